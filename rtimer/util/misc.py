import re
import time

from rtimer.common.errors import InvalidNameError

# Alphanumeric segments joined by single hyphens, nothing leading or trailing.
_NAME_PATTERN = re.compile(r"[A-Za-z0-9]+(?:-[A-Za-z0-9]+)*")


# Simply returns the current wall-clock time as whole Unix epoch seconds.
def now_ts():
    return int(time.time())


def is_valid_name(name):
    return isinstance(name, str) and _NAME_PATTERN.fullmatch(name) is not None


# Returns the name untouched if it's a usable timer name, otherwise raises InvalidNameError. Called before anything
# touches the filesystem.
def validate_name(name):
    if not is_valid_name(name):
        raise InvalidNameError(name)
    return name
