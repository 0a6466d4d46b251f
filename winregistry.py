import logging
import sys

if sys.platform == "win32":
    import winreg


class RegistryError(Exception):
    """Raised when a registry key cannot be created, written or deleted."""


class WindowsRegistry:
    """Key-value tree over HKEY_CURRENT_USER.

    All paths are relative to HKEY_CURRENT_USER and use backslashes.
    Handles returned by create_key must be used in a with block so they are
    closed on every exit path.
    """

    def __init__(self):
        if sys.platform != "win32":
            raise RegistryError("The Windows registry is only available on Windows")
        self.hive = winreg.HKEY_CURRENT_USER

    def create_key(self, key_path):
        try:
            return winreg.CreateKey(self.hive, key_path)
        except OSError as e:
            raise RegistryError(f"Could not create registry key {key_path}: {e}") from e

    def set_value(self, key, name, value):
        try:
            winreg.SetValueEx(key, name, 0, winreg.REG_SZ, value)
        except OSError as e:
            raise RegistryError(f"Could not set registry value '{name}': {e}") from e

    def query_value(self, key_path, name=''):
        """Return the string value, or None if the key or value does not exist."""
        try:
            with winreg.OpenKey(self.hive, key_path) as key:
                value, _ = winreg.QueryValueEx(key, name)
        except FileNotFoundError:
            return None
        except OSError as e:
            raise RegistryError(f"Could not read registry key {key_path}: {e}") from e
        return None if value is None else str(value)

    def delete_tree(self, key_path):
        """Delete key_path and everything below it. A missing key is not an error."""
        try:
            self._delete_tree(key_path)
        except FileNotFoundError:
            logging.debug(f"Registry key not found, nothing to delete: {key_path}")
        except OSError as e:
            raise RegistryError(f"Could not delete registry key {key_path}: {e}") from e

    def _delete_tree(self, key_path):
        # DeleteKey refuses keys that still have children
        with winreg.OpenKey(self.hive, key_path) as key:
            sub_key_names = []
            i = 0
            while True:
                try:
                    sub_key_names.append(winreg.EnumKey(key, i))
                    i += 1
                except OSError:
                    break

        for name in sub_key_names:
            self._delete_tree(f"{key_path}\\{name}")

        winreg.DeleteKey(self.hive, key_path)
        logging.debug(f"Deleted registry key {key_path}")
