import logging
import os
from pathlib import Path
from dataclasses import dataclass

from rtimer.common.errors import ConfigurationError, StorageError

PROGRAM_NAME = "timer"

# Environment variables that drive configuration.
ENV_RUNTIME_DIR = "TIMER_RUNTIME_DIR"
ENV_LOG_DIR = "TIMER_LOG_DIR"
ENV_LOG_LEVEL = "TIMER_LOG_LEVEL"
ENV_DEBUG = "TIMER_DEBUG"

# Lil helper function to create missing directories (and parents) on demand, turning OS failures into a StorageError.
def ensure_directory(path: Path):
    try:
        path.mkdir(parents=True,exist_ok=True)
    except OSError as e:
        raise StorageError(f"can not create directory '{path}'", e) from e
    return path

# Dataclass for accessing paths and settings across the program. Built exactly once from the environment at startup
# and then handed to whatever needs it, nothing else reads the environment.
@dataclass(frozen=True)
class RuntimePaths:

    runtime_dir: Path | None
    log_dir: Path | None
    log_level: int = logging.INFO
    debug: bool = False
    # Problems noticed while building that are worth logging but not worth failing over.
    warnings: tuple = ()

    # Returns the runtime directory, erroring out if it couldn't be determined.
    def require_runtime_dir(self) -> Path:
        if self.runtime_dir is None:
            raise ConfigurationError(
                f"can not determine runtime directory, set {ENV_RUNTIME_DIR} or XDG_RUNTIME_DIR"
            )
        return self.runtime_dir

    @staticmethod
    def build(environ=None):
        environ = os.environ if environ is None else environ

        # Explicit override wins, otherwise a per-program folder inside the user's runtime base directory.
        override = environ.get(ENV_RUNTIME_DIR)
        xdg_runtime = environ.get("XDG_RUNTIME_DIR")
        if override:
            runtime_dir = Path(override)
        elif xdg_runtime:
            runtime_dir = Path(xdg_runtime) / PROGRAM_NAME
        else:
            runtime_dir = None

        # Logs are optional, if no location can be worked out then file logging is simply skipped.
        log_override = environ.get(ENV_LOG_DIR)
        xdg_state = environ.get("XDG_STATE_HOME")
        home = environ.get("HOME")
        if log_override:
            log_dir = Path(log_override)
        elif xdg_state:
            log_dir = Path(xdg_state) / PROGRAM_NAME / "logs"
        elif home:
            log_dir = Path(home) / ".local" / "state" / PROGRAM_NAME / "logs"
        else:
            log_dir = None

        # A bad log level only affects logging, so it falls back to INFO instead of stopping every command.
        warnings = []
        level_name = (environ.get(ENV_LOG_LEVEL) or "INFO").strip().upper()
        log_level = logging.getLevelName(level_name)
        if not isinstance(log_level, int):
            warnings.append(f"Unknown log level '{level_name}' in {ENV_LOG_LEVEL}, using INFO")
            log_level = logging.INFO

        debug_flag = environ.get(ENV_DEBUG, "")
        debug = bool(debug_flag) and debug_flag != "0"

        return RuntimePaths(
            runtime_dir = runtime_dir,
            log_dir = log_dir,
            log_level = log_level,
            debug = debug,
            warnings = tuple(warnings)
        )
