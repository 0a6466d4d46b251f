import logging

MENU_NAME = "JetBrainsToolbox"
MENU_LABEL = "Open with JetBrains"

# Folder background first, then the folder itself
MENU_ROOTS = [
    ("Background Menu", f"Software\\Classes\\Directory\\Background\\shell\\{MENU_NAME}"),
    ("Directory Menu", f"Software\\Classes\\Directory\\shell\\{MENU_NAME}"),
]


def remove_menu_trees(registry):
    """Delete both menu subtrees and return the (title, key_path) pairs that were installed."""
    removed = []
    for title, key_path in MENU_ROOTS:
        # Every group we write carries MUIVerb
        if registry.query_value(key_path, 'MUIVerb') is not None:
            removed.append((title, key_path))
        registry.delete_tree(key_path)
        logging.info(f"Cleared context menu tree at {key_path}")
    return removed


def add_context_menu(registry, toolbox_exe, tools):
    """Rebuild the "Open with JetBrains" menus so they list exactly `tools`.

    The old trees are removed first, so tools that were uninstalled or
    renamed since the last run disappear. Registry failures propagate.
    """
    remove_menu_trees(registry)

    print("Creating context menu item for JetBrains Toolbox")
    for title, key_path in MENU_ROOTS:
        print(title)
        add_menu_group(registry, key_path, toolbox_exe)
        for tool in tools:
            add_registry_entry(registry, key_path + r'\shell', tool)
            print(f"\t- {tool.display_name}")


def add_menu_group(registry, key_path, toolbox_exe):
    """Helper function to create the flyout that holds one entry per tool"""
    with registry.create_key(key_path) as key:
        registry.set_value(key, 'MUIVerb', MENU_LABEL)
        # Empty SubCommands makes Explorer render a submenu from the shell subkey
        registry.set_value(key, 'SubCommands', '')
        registry.set_value(key, 'Icon', f'"{toolbox_exe}"')
    logging.info(f"Added context menu group at {key_path} with icon: {toolbox_exe}")


def add_registry_entry(registry, shell_path, tool):
    """Helper function to create a single tool entry and its command subkey"""
    exe_path = tool.executable_path
    key_path = shell_path + '\\' + tool.display_name

    with registry.create_key(key_path) as key:
        registry.set_value(key, 'MUIVerb', tool.display_name)
        registry.set_value(key, 'Icon', f'"{exe_path}"')

    # %V is replaced by the folder that was right-clicked
    with registry.create_key(key_path + r'\command') as command_key:
        registry.set_value(command_key, '', f'"{exe_path}" "%V"')

    logging.info(f"Added context menu entry at {key_path} for {exe_path}")
