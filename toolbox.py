import json
import logging
import ntpath
import os
from dataclasses import dataclass

TOOLBOX_KEY = r'SOFTWARE\JetBrains\Toolbox'
TOOLBOX_EXE_NAME = 'jetbrains-toolbox.exe'
STATE_FILE_NAME = 'state.json'


@dataclass(frozen=True)
class ToolRecord:
    """One installed IDE as listed in the Toolbox state.json"""
    display_name: str
    install_location: str
    launch_command: str
    channel_id: str = ''
    tool_id: str = ''
    product_code: str = ''
    tag: str = ''
    display_version: str = ''
    build_number: str = ''

    @classmethod
    def from_dict(cls, data):
        return cls(
            display_name=data['displayName'],
            install_location=data['installLocation'],
            launch_command=data['launchCommand'],
            channel_id=data.get('channelId', ''),
            tool_id=data.get('toolId', ''),
            product_code=data.get('productCode', ''),
            tag=data.get('tag', ''),
            display_version=data.get('displayVersion', ''),
            build_number=data.get('buildNumber', ''),
        )

    @property
    def executable_path(self):
        # Registry commands are always Windows paths, whatever we run on
        return ntpath.join(self.install_location, self.launch_command)


def find_toolbox_dir(registry):
    """Return the Toolbox bin directory from the registry, or None if Toolbox is not installed."""
    toolbox_dir = registry.query_value(TOOLBOX_KEY)
    if not toolbox_dir:
        logging.info(f"No Toolbox install path under HKCU\\{TOOLBOX_KEY}")
        return None
    logging.info(f"Found JetBrains Toolbox at: {toolbox_dir}")
    return toolbox_dir


def get_toolbox_executable(toolbox_dir):
    return os.path.join(toolbox_dir, TOOLBOX_EXE_NAME)


def get_state_file(toolbox_dir):
    """state.json lives one level above the bin directory."""
    parent = os.path.dirname(os.path.normpath(toolbox_dir))
    return os.path.join(parent or toolbox_dir, STATE_FILE_NAME)


def _is_valid_tool(entry):
    if not isinstance(entry, dict):
        return False
    for field in ('displayName', 'installLocation', 'launchCommand'):
        if not isinstance(entry.get(field), str) or not entry[field]:
            return False
    # Display names become registry key names
    return '\\' not in entry['displayName']


def get_tools(state_file_path):
    """Read the tool list from state.json.

    OSError from reading the file propagates. Content that is not valid JSON
    or has no usable "tools" array yields an empty list so the menu is cleared.
    """
    with open(state_file_path, 'rb') as f:
        content = f.read()

    # UnicodeDecodeError and JSONDecodeError are both ValueError
    try:
        state = json.loads(content.decode('utf-8-sig'))
    except (ValueError, RecursionError) as e:
        logging.warning(f"Could not parse {state_file_path}: {e}")
        return []

    entries = state.get('tools') if isinstance(state, dict) else None
    if not isinstance(entries, list):
        logging.warning(f"No tools list found in {state_file_path}")
        return []

    tools = []
    for entry in entries:
        if not _is_valid_tool(entry):
            logging.warning(f"Skipping unusable tool entry: {entry!r}")
            continue
        tools.append(ToolRecord.from_dict(entry))

    logging.info(f"Loaded {len(tools)} tools from {state_file_path}")
    return tools
