from cx_Freeze import setup, Executable

with open("version.txt", "r") as _vf:
    APP_VERSION = _vf.read().strip()

build_exe_options = {
    "packages": [
        # Core Python modules
        "os", "sys", "json", "ntpath", "logging", "dataclasses",

        # Windows-specific
        "winreg",
    ],
    "excludes": [
        # Exclude unnecessary modules to reduce size
        "tkinter", "unittest", "email", "http", "xml", "pydoc_data",
    ],
    "include_files": [
        "version.txt"
    ],
    "optimize": 2,
    "zip_include_packages": ["*"],
    "zip_exclude_packages": []
}

# Both tools are console programs, so no GUI base
executables = [
    Executable("toolbox_context_menu.py", base=None),
    Executable("unreg.py", base=None),
]

setup(
    name="Toolbox Context Menu",
    version=APP_VERSION,
    description="Adds an 'Open with JetBrains' folder context menu listing the IDEs installed by JetBrains Toolbox",
    options={"build_exe": build_exe_options},
    executables=executables
)
