import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Callable
from countdown.common.logger import log
from countdown.common.setup import ProjectPaths
from countdown.core.formatting import format_time


#region === Defaults ===

CONFIG_FILENAME = "timer.json"

# Where the CLI keeps its saved settings. Resolved on use, nothing is created until save_config() writes.
def default_config_path():
    return ProjectPaths.locate().data / CONFIG_FILENAME

# Used for every callback slot that wasn't given one.
def noop(*args, **kwargs):
    return None

# Plain (JSON-able) settings and their defaults. Callables are handled separately, they can't come from a file.
_SETTINGS_DEFAULTS = {
    "start_at": 0,
    "count_down": False,
    "update_interval_ms": 10,
}
_CALLABLE_FIELDS = (
    "format_time",
    "display_function",
    "countdown_callback",
    "start_callback",
    "stop_callback",
    "reset_callback",
)

# Accepted aliases, so params written in the camelCase style map straight across.
_ALIASES = {
    "startAt": "start_at",
    "countDown": "count_down",
    "updateInterval": "update_interval_ms",
    "updateIntervalMs": "update_interval_ms",
    "formatTime": "format_time",
    "displayFunction": "display_function",
    "countdownCallback": "countdown_callback",
    "startCallback": "start_callback",
    "stopCallback": "stop_callback",
    "resetCallback": "reset_callback",
}

#endregion === Defaults ===

#region === TimerConfig ===

@dataclass
class TimerConfig:
    start_at: int = 0
    count_down: bool = False
    update_interval_ms: int = 10
    format_time: Callable = format_time
    display_function: Callable = noop
    countdown_callback: Callable = noop
    start_callback: Callable = noop
    stop_callback: Callable = noop
    reset_callback: Callable = noop

    # Builds a config from a loose params dict. Missing keys quietly take their defaults, wrong-typed ones (and
    # intervals that aren't positive) are defaulted and logged, unknown ones are ignored.
    @staticmethod
    def from_dict(params):
        params = dict(params or {})
        known = {f.name for f in fields(TimerConfig)}
        values = {}
        ignored = set()
        defaulted_values = set()

        for key, value in params.items():
            name = _ALIASES.get(key, key)
            if name in known:
                values[name] = value
            else:
                ignored.add(key)

        for name in ("start_at", "update_interval_ms"):
            if name in values and (isinstance(values[name], bool) or not isinstance(values[name], (int, float))):
                defaulted_values.add(name)
                values[name] = _SETTINGS_DEFAULTS[name]
            elif name in values:
                values[name] = int(values[name])
        if values.get("update_interval_ms", 1) <= 0:
            defaulted_values.add("update_interval_ms")
            values["update_interval_ms"] = _SETTINGS_DEFAULTS["update_interval_ms"]
        if "count_down" in values and not isinstance(values["count_down"], bool):
            defaulted_values.add("count_down")
            values["count_down"] = _SETTINGS_DEFAULTS["count_down"]
        for name in _CALLABLE_FIELDS:
            if name in values and values[name] is None:
                values.pop(name)
            elif name in values and not callable(values[name]):
                defaulted_values.add(name)
                values.pop(name)

        if defaulted_values:
            log.warning(f"Timer config had invalid values that were defaulted: {', '.join(sorted(defaulted_values))}")
        if ignored:
            log.debug(f"Ignoring unrecognized timer config keys: {', '.join(sorted(ignored))}")

        return TimerConfig(**values)

    # Every field, callables included, in the shape from_dict() takes back.
    def as_params(self):
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def settings(self):
        return {name: getattr(self, name) for name in _SETTINGS_DEFAULTS}

#endregion === TimerConfig ===

#region === Saving and Loading ===

# Loads the plain timer settings from a JSON file (default_config_path() when not given). A missing or broken file
# just means defaults, with a warning in the log.
def load_config(path: Path | None = None, **callbacks):
    path = Path(path) if path is not None else default_config_path()
    try:
        if not path.exists():
            log.info(f"No timer config found at '{path}', using defaults.")
            return TimerConfig.from_dict(callbacks)
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        if not isinstance(raw, dict):
            raise TypeError(f"Expected a JSON object, got {type(raw).__name__}")

        settings = {}
        for key, value in raw.items():
            name = _ALIASES.get(key, key)
            if name in _SETTINGS_DEFAULTS:
                settings[name] = value
        missing = set(_SETTINGS_DEFAULTS) - set(settings)
        if missing:
            log.info(f"Loaded timer config from '{path}', with missing values that were defaulted: {', '.join(sorted(missing))}")
        else:
            log.info(f"Successfully loaded timer config from '{path}'.")
        return TimerConfig.from_dict({**settings, **callbacks})
    except (json.JSONDecodeError, OSError, TypeError):
        log.warning(f"Ran into an error while trying to load '{path}', falling back to a default timer config.",exc_info=True)
        return TimerConfig.from_dict(callbacks)

# Writes the plain settings of the given config to disk as JSON.
def save_config(config: TimerConfig, path: Path | None = None):
    path = Path(path) if path is not None else default_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.settings(), f, indent=2)
    log.info(f"Successfully saved timer config to '{path}'")
    return path

#endregion === Saving and Loading ===
