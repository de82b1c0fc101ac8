# Every failure the tool can report. All of them are fatal to the invocation: the dispatcher catches TimerError,
# prints it prefixed with the program name and exits 1.
class TimerError(Exception):

    # Whether the usage block gets printed after the message.
    show_usage = False

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return self.message


class UsageError(TimerError):
    show_usage = True


class ConfigurationError(TimerError):
    pass


class InvalidNameError(TimerError):
    def __init__(self, name):
        super().__init__(f"invalid timer name '{name}'")
        self.name = name


class TimerExistsError(TimerError):
    def __init__(self, name):
        super().__init__(f"timer '{name}' already exists")
        self.name = name


class TimerNotFoundError(TimerError):
    def __init__(self, name):
        super().__init__(f"timer '{name}' does not exist")
        self.name = name


# A record field failed validation. Carries the field name and the raw offending text.
class CorruptRecordError(TimerError):
    def __init__(self, field, raw, path=None):
        where = f" in '{path}'" if path else ""
        super().__init__(f"corrupt timer file{where}: invalid {field} '{raw}'")
        self.field = field
        self.raw = raw
        self.path = path


# The first line doesn't even hold the four fields, so nothing could be validated.
class UnreadableRecordError(CorruptRecordError):
    def __init__(self, path=None):
        TimerError.__init__(self, f"can not read timer file '{path}'" if path else "can not read timer file")
        self.field = None
        self.raw = None
        self.path = path


class InvalidDurationError(TimerError):
    def __init__(self, raw):
        super().__init__(f"invalid duration '{raw}'")
        self.raw = raw


# Wraps an OSError hit while creating, reading, listing or deleting timer files.
class StorageError(TimerError):
    def __init__(self, message, cause=None):
        super().__init__(f"{message}: {cause.strerror or cause}" if cause is not None else message)
        self.cause = cause


class NotImplementedCommandError(TimerError):
    def __init__(self, command):
        super().__init__(f"{command}: not implemented")
        self.command = command


class UnknownCommandError(TimerError):
    def __init__(self, command):
        super().__init__(f"unknown command '{command}'")
        self.command = command
