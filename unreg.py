import sys
import logging

from reg import MENU_ROOTS, remove_menu_trees
from toolbox_context_menu import handle_critical_error, setup_logging
from winregistry import RegistryError, WindowsRegistry


def remove_context_menu(registry):
    removed = remove_menu_trees(registry)
    for title, key_path in MENU_ROOTS:
        if (title, key_path) in removed:
            print(f"Removed {title} at {key_path}")
        else:
            print(f"Registry entry not found: {key_path}")
    print("Context menu options removed successfully.")


def main(registry=None):
    try:
        if registry is None:
            registry = WindowsRegistry()
        remove_context_menu(registry)
    except RegistryError as e:
        print(f"Failed to modify the registry: {handle_critical_error(e, 'context menu removal')}", file=sys.stderr)
        return 2
    logging.info("Context menu removed")
    return 0


def cli():
    setup_logging()
    sys.exit(main())


if __name__ == "__main__":
    cli()
