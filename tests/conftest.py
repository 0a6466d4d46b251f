"""Shared fixtures: an in-memory stand-in for HKEY_CURRENT_USER."""

import json

import pytest

from winregistry import RegistryError


class FakeKey:
    def __init__(self, registry, path):
        self.registry = registry
        self.path = path
        self.closed = False
        registry.open_handles += 1

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.Close()
        return False

    def Close(self):
        if not self.closed:
            self.closed = True
            self.registry.open_handles -= 1


class FakeRegistry:
    """Implements the WindowsRegistry interface on a dict of path -> values.

    Paths are compared case-insensitively, like the real registry.
    `fail_on` makes create_key raise RegistryError for any path containing it.
    """

    def __init__(self, fail_on=None):
        self.keys = {}
        self.open_handles = 0
        self.fail_on = fail_on
        self.writes = 0

    @staticmethod
    def _norm(path):
        return path.strip('\\').lower()

    def create_key(self, key_path):
        if self.fail_on and self.fail_on.lower() in key_path.lower():
            raise RegistryError(f"Could not create registry key {key_path}: [WinError 5] Access is denied")
        parts = key_path.strip('\\').split('\\')
        for i in range(1, len(parts) + 1):
            self.keys.setdefault(self._norm('\\'.join(parts[:i])), {})
        return FakeKey(self, key_path)

    def set_value(self, key, name, value):
        assert not key.closed, f"write to closed key {key.path}"
        self.keys[self._norm(key.path)][name] = value
        self.writes += 1

    def query_value(self, key_path, name=''):
        values = self.keys.get(self._norm(key_path))
        if values is None:
            return None
        return values.get(name)

    def delete_tree(self, key_path):
        prefix = self._norm(key_path)
        for path in list(self.keys):
            if path == prefix or path.startswith(prefix + '\\'):
                del self.keys[path]

    # Test helpers

    def exists(self, key_path):
        return self._norm(key_path) in self.keys

    def values(self, key_path):
        return self.keys[self._norm(key_path)]

    def subkeys(self, key_path):
        prefix = self._norm(key_path) + '\\'
        return sorted(
            path[len(prefix):] for path in self.keys
            if path.startswith(prefix) and '\\' not in path[len(prefix):]
        )


@pytest.fixture
def registry():
    return FakeRegistry()


def _make_tool(display_name, install_location, launch_command, **extra):
    tool = {
        "channelId": "release",
        "toolId": display_name.replace(" ", ""),
        "productCode": "XX",
        "tag": "IDE",
        "displayName": display_name,
        "displayVersion": "2024.1",
        "buildNumber": "241.1",
        "installLocation": install_location,
        "launchCommand": launch_command,
    }
    tool.update(extra)
    return tool


@pytest.fixture
def make_tool():
    """Build a state.json tool entry the way Toolbox writes it."""
    return _make_tool


@pytest.fixture
def toolbox_install(tmp_path):
    """A fake Toolbox layout: <root>/bin/jetbrains-toolbox.exe and <root>/state.json."""
    bin_dir = tmp_path / "Toolbox" / "bin"
    bin_dir.mkdir(parents=True)
    (bin_dir / "jetbrains-toolbox.exe").write_bytes(b"MZ")

    def write_state(tools=None, raw=None):
        state_file = tmp_path / "Toolbox" / "state.json"
        if raw is None:
            raw = json.dumps({"version": 1, "tools": tools or []})
        state_file.write_text(raw, encoding="utf-8")
        return state_file

    return bin_dir, write_state


@pytest.fixture
def registry_factory():
    return FakeRegistry


@pytest.fixture
def installed_registry(registry, toolbox_install):
    """A registry whose Toolbox key points at the fake install."""
    bin_dir, _ = toolbox_install
    with registry.create_key(r'SOFTWARE\JetBrains\Toolbox') as key:
        registry.set_value(key, '', str(bin_dir))
    return registry
