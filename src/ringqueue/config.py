from dataclasses import asdict, dataclass, field, is_dataclass
from pathlib import Path
import sys
import tomllib
from typing import Any, ClassVar, TypeVar

from loguru import logger

# --- Constants ---
APP_NAME = "ringqueue"
# Use a platform-agnostic user config directory
if sys.platform == "win32":
    CONFIG_DIR = Path.home() / "AppData" / "Roaming" / APP_NAME
else:
    CONFIG_DIR = Path.home() / ".config" / APP_NAME

CONFIG_FILE = CONFIG_DIR / "config.toml"

# --- Dataclass Models for Settings ---
T = TypeVar("T")


@dataclass
class GeneralSettings:
    """Logging settings. An empty `log_directory` disables file logging."""

    log_level_console: str = "INFO"
    log_level_file: str = "DEBUG"
    log_directory: str = ""


@dataclass
class DemoSettings:
    """Parameters of the command-line push/pop demonstration."""

    initial_capacity: int = 1
    element_count: int = 16
    dump_on_exit: bool = True


@dataclass
class Settings:
    """Root container for all settings."""

    general: GeneralSettings = field(default_factory=GeneralSettings)
    demo: DemoSettings = field(default_factory=DemoSettings)

    _instance: ClassVar["Settings | None"] = None

    @classmethod
    def get_instance(cls) -> "Settings":
        """Returns the singleton instance, loading it on first use."""
        if cls._instance is None:
            cls._instance = load_config()
        return cls._instance


def _update_dataclass(dc_instance: T, data: dict[str, Any]) -> T:
    """Recursively updates a dataclass instance from a dictionary.

    Unknown keys are ignored with a warning so a stale config file does not
    stop the program.
    """
    names = field_names(dc_instance)
    for key, value in data.items():
        if key not in names:
            logger.warning(f"Ignoring unknown configuration key '{key}'.")
            continue
        current = getattr(dc_instance, key)
        if is_dataclass(current):
            if isinstance(value, dict):
                _update_dataclass(current, value)
            else:
                logger.warning(
                    f"Ignoring configuration key '{key}': expected a table, "
                    f"got {type(value).__name__}."
                )
        else:
            setattr(dc_instance, key, value)
    return dc_instance


def field_names(dc_instance: Any) -> list[str]:
    """Helper to get field names from a dataclass instance."""
    return [f.name for f in dc_instance.__dataclass_fields__.values()]


def render_default_config() -> str:
    """Renders the default settings as TOML text."""
    lines = ["# ringqueue configuration file", ""]
    for section, values in asdict(Settings()).items():
        lines.append(f"[{section}]")
        for key, value in values.items():
            if isinstance(value, bool):
                rendered = "true" if value else "false"
            elif isinstance(value, str):
                rendered = f'"{value}"'
            else:
                rendered = str(value)
            lines.append(f"{key} = {rendered}")
        lines.append("")
    return "\n".join(lines)


def load_config(path: Path = CONFIG_FILE) -> Settings:
    """Loads settings from a TOML file, merging them with defaults.

    If the config file does not exist, it creates one with default values.

    Args:
        path: The path to the configuration file.

    Returns:
        A populated Settings object.
    """
    settings_obj = Settings()
    logger.debug(f"Loading configuration from '{path}'...")

    if not path.exists():
        logger.info(f"Configuration file not found. Creating default at '{path}'.")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(render_default_config(), encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to create default config file: {e}")
        return settings_obj

    try:
        with path.open("rb") as f:
            user_config = tomllib.load(f)
        _update_dataclass(settings_obj, user_config)
        logger.debug("Successfully loaded user configuration.")
    except tomllib.TOMLDecodeError as e:
        logger.error(f"Error decoding TOML from '{path}': {e}")
        logger.warning("Using default settings due to configuration error.")
    except OSError as e:
        logger.error(f"Could not read configuration file '{path}': {e}")
        logger.warning("Using default settings due to configuration error.")

    return settings_obj
