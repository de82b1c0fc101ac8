import os
from pathlib import Path

from rtimer.common.errors import StorageError, TimerExistsError, TimerNotFoundError, UnreadableRecordError
from rtimer.common.logger import log
from rtimer.common.setup import ensure_directory
from rtimer.core.record import decode_duration, decode_record, encode_record, new_record
from rtimer.util.misc import is_valid_name, now_ts, validate_name

SUFFIX = ".timer"


# Maps timer names onto <runtime_dir>/<name>.timer and does all the file work. The runtime directory is handed in
# once, nothing here looks at the environment.
class TimerStore:

    def __init__(self, runtime_dir, clock=now_ts):
        self.runtime_dir = Path(runtime_dir)
        self.clock = clock

    # Returns the record path for a name. The name is validated first, so an invalid name never reaches the disk.
    def path_for(self, name):
        validate_name(name)
        return self.runtime_dir / f"{name}{SUFFIX}"

    def exists(self, name):
        return self.path_for(name).is_file()

    # Resolves a path for a timer that has to exist already.
    def _existing_path(self, name):
        path = self.path_for(name)
        if not path.is_file():
            raise TimerNotFoundError(name)
        return path

    def _read(self, name, path):
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise TimerNotFoundError(name) from None
        except UnicodeDecodeError:
            raise UnreadableRecordError(path) from None
        except OSError as e:
            raise StorageError(f"can not read timer file '{path}'", e) from e

    #region === Create / Read / Delete ===

    # Creates a new running timer. Order matters: the name is validated, then checked for a conflict, then the
    # directory gets created, and only then is the file written. The file itself is opened with exclusive create so
    # two racing starts can't both win.
    def create(self, name, duration):
        path = self.path_for(name)
        if path.exists():
            raise TimerExistsError(name)
        ensure_directory(self.runtime_dir)

        record = new_record(self.clock(), duration)
        try:
            f = open(path, "x", encoding="utf-8")
        except FileExistsError:
            raise TimerExistsError(name) from None
        except OSError as e:
            raise StorageError(f"can not create timer file '{path}'", e) from e

        # From here on the file is ours. Write errors often only surface when the buffer is flushed on close, so the
        # cleanup has to cover both or a half-written record would block the name for good.
        try:
            with f:
                f.write(encode_record(record))
        except OSError as e:
            path.unlink(missing_ok=True)
            raise StorageError(f"can not write timer file '{path}'", e) from e
        log.info(f"Started timer '{name}' for {duration} seconds at {record.ts}")
        return record

    # Reads and fully validates a timer's record.
    def load(self, name):
        path = self._existing_path(name)
        record = decode_record(self._read(name, path), path)
        log.debug(f"Loaded timer '{name}': {record}")
        return record

    # Reads just the stored duration, without validating the other fields.
    def read_duration(self, name):
        path = self._existing_path(name)
        return decode_duration(self._read(name, path), path)

    def remove(self, name):
        path = self._existing_path(name)
        try:
            path.unlink()
        except FileNotFoundError:
            raise TimerNotFoundError(name) from None
        except OSError as e:
            raise StorageError(f"can not remove timer file '{path}'", e) from e
        log.info(f"Removed timer '{name}'")

    #endregion === Create / Read / Delete ===

    # Returns the names of every timer in the runtime directory, in whatever order the filesystem hands them back.
    # A missing directory just means there are no timers yet.
    def names(self):
        try:
            with os.scandir(self.runtime_dir) as entries:
                stems = [entry.name[:-len(SUFFIX)] for entry in entries if entry.name.endswith(SUFFIX)]
            # Skips dotfiles and anything else no timer name could have produced
            found = [stem for stem in stems if is_valid_name(stem)]
        except FileNotFoundError:
            log.debug(f"Runtime directory '{self.runtime_dir}' doesn't exist yet, no timers")
            return []
        except OSError as e:
            raise StorageError(f"can not list '{self.runtime_dir}'", e) from e
        log.debug(f"Found {len(found)} timers in '{self.runtime_dir}'")
        return found
