import os
from collections.abc import Callable
from collections.abc import Mapping
from pathlib import Path
from typing import Final
from typing import TypeAlias

STATE_DIR_NAME: Final[str] = ".mrbeanbot"
CONFIG_FILE_NAME: Final[str] = "mrbeanbot.json"

CONFIG_PATH_ENV_VAR: Final[str] = "MRBEANBOT_CONFIG_PATH"
STATE_DIR_ENV_VAR: Final[str] = "MRBEANBOT_STATE_DIR"

# Returns the config file location, or None when it cannot be determined.
ConfigPathProvider: TypeAlias = Callable[[], Path | None]


def _home_dir_or_none() -> Path | None:
    try:
        return Path.home()
    except (RuntimeError, KeyError):
        return None


def _expand_user_path(raw_path: str, home_dir: Path | None) -> Path | None:
    if raw_path == "~" or raw_path.startswith("~/"):
        if home_dir is None:
            return None
        return Path(os.path.abspath(home_dir / raw_path[2:]))
    # abspath needs the cwd for relative paths, which fails if it was deleted
    try:
        return Path(os.path.abspath(raw_path))
    except OSError:
        return None


def resolve_config_path(
    environ: Mapping[str, str] | None = None,
    get_home_dir: Callable[[], Path | None] = _home_dir_or_none,
) -> Path | None:
    """Find the MrBeanBot config file the same way the agent itself does.

    Precedence: $MRBEANBOT_CONFIG_PATH, then $MRBEANBOT_STATE_DIR/mrbeanbot.json,
    then ~/.mrbeanbot/mrbeanbot.json. Returns None instead of raising when the
    home directory is needed but cannot be determined.
    """
    env = os.environ if environ is None else environ

    explicit_path = env.get(CONFIG_PATH_ENV_VAR, "").strip()
    if explicit_path:
        return _expand_user_path(explicit_path, get_home_dir())

    state_dir = env.get(STATE_DIR_ENV_VAR, "").strip()
    if state_dir:
        expanded_state_dir = _expand_user_path(state_dir, get_home_dir())
        return None if expanded_state_dir is None else expanded_state_dir / CONFIG_FILE_NAME

    home_dir = get_home_dir()
    if home_dir is None:
        return None
    return home_dir / STATE_DIR_NAME / CONFIG_FILE_NAME


def fixed_config_path(path: Path | None) -> ConfigPathProvider:
    """Make a provider that always returns the given path (or None)."""
    return lambda: path
