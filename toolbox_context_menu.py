import os
import sys
import logging

import reg
import toolbox
from winregistry import RegistryError, WindowsRegistry

LOG_FILE_NAME = "toolbox_context_menu.log"


def get_application_path():
    if getattr(sys, 'frozen', False):
        return os.path.dirname(sys.executable)
    return os.path.dirname(os.path.abspath(__file__))


def get_current_version():
    """Read version from version.txt bundled alongside the executable."""
    try:
        with open(os.path.join(get_application_path(), 'version.txt'), 'r') as f:
            return f.read().strip()
    except OSError:
        return "0.0.0"


# --- Logging Setup ---
def setup_logging(log_dir=None):
    """Send all log records to a file next to the executable. Console output stays on print."""
    try:
        log_formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s')
        logger = logging.getLogger()
        logger.setLevel(logging.DEBUG)

        log_file_path = os.path.abspath(os.path.join(log_dir or get_application_path(), LOG_FILE_NAME))
        has_file_handler = any(isinstance(h, logging.FileHandler) and h.baseFilename == log_file_path for h in logger.handlers)
        if not has_file_handler:
            file_handler = logging.FileHandler(log_file_path, mode='a', encoding='utf-8')
            file_handler.setFormatter(log_formatter)
            logger.addHandler(file_handler)

        logging.info(f"=== Toolbox Context Menu {get_current_version()} started ===")
        return True
    except OSError as e:
        print(f"Warning: could not set up log file: {e}", file=sys.stderr)
        return False


def handle_critical_error(error, context="Unknown"):
    """Log the failure and return a message the operator can act on"""
    error_msg = str(error)
    logging.critical(f"Critical error in {context}: {error_msg}", exc_info=True)

    if "Access is denied" in error_msg or "Permission denied" in error_msg:
        return "Permission denied writing to the registry. Check that your account can modify HKEY_CURRENT_USER\\Software\\Classes."
    if "only available on Windows" in error_msg:
        return "This tool edits the Windows registry and has to be run on Windows."
    return f"An unexpected error occurred: {error_msg}. Please check the log file for details."

# --- End Logging Setup ---


def print_error(message):
    print(message, file=sys.stderr)
    logging.error(message)


def main(registry=None):
    """Synchronize the Explorer context menu with the installed Toolbox IDEs. Returns the exit code."""
    try:
        if registry is None:
            registry = WindowsRegistry()

        toolbox_dir = toolbox.find_toolbox_dir(registry)
        if toolbox_dir is None:
            print("JetBrains Toolbox not found")
            return 0

        toolbox_exe = toolbox.get_toolbox_executable(toolbox_dir)
        if not os.path.isfile(toolbox_exe):
            print_error(f"{toolbox.TOOLBOX_EXE_NAME} not found")
            return 1

        state_file = toolbox.get_state_file(toolbox_dir)
        if not os.path.isfile(state_file):
            print_error(f"{toolbox.STATE_FILE_NAME} not found")
            return 1

        try:
            tools = toolbox.get_tools(state_file)
        except OSError as e:
            print_error(f"Could not read {state_file}: {e}")
            return 1

        reg.add_context_menu(registry, toolbox_exe, tools)
    except RegistryError as e:
        print(f"Failed to modify the registry: {handle_critical_error(e, 'context menu update')}", file=sys.stderr)
        return 2

    print("Done!")
    logging.info("Context menu synchronized")
    return 0


def cli():
    setup_logging()
    sys.exit(main())


if __name__ == "__main__":
    cli()
