import os
from pathlib import Path

from platformdirs import PlatformDirs

# Used for platformdirs (no spaces!)
APP_SLUG = "fs-snapshot"

SETTINGS_FILE_NAME = "settings.json"


def get_config_dir() -> Path:
    """
    Resolve the directory holding user settings.

    Priority:
    1. FS_SNAPSHOT_CONFIG_DIR env override
    2. Platform-specific user config directory
    """
    env = os.environ.get("FS_SNAPSHOT_CONFIG_DIR")
    if env:
        return Path(env).expanduser().resolve()

    dirs = PlatformDirs(appname=APP_SLUG, appauthor=False)
    return Path(dirs.user_config_dir).resolve()


def default_settings_path() -> Path:
    return get_config_dir() / SETTINGS_FILE_NAME
