import logging
from pathlib import Path
from logging.handlers import RotatingFileHandler

LOG_NAME = "timer"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(filename)s:%(lineno)d] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Module-level logger used everywhere. Until configure_logging() runs it has no handlers and doesn't propagate, so
# importing the package never writes anywhere.
log = logging.getLogger(LOG_NAME)
log.propagate = False
log.addHandler(logging.NullHandler())

def configure_logging(
        log_dir: Path | None = None,
        level = logging.INFO,
        max_bytes = 1024 * 1024,
        backup_count = 3,
        console = False,
        stream = None,
        name = LOG_NAME
) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.propagate = False
    logger.setLevel(logging.DEBUG if console else level)

    fmt = logging.Formatter(LOG_FORMAT,LOG_DATE_FORMAT)

    # Setup persistent handler. A log dir that can't be created just means no file log for this run, it never
    # stops the command itself and never spills log lines onto the terminal.
    persistent_handler_name = f"{name}:persistent"
    if log_dir is not None and not any(h.get_name() == persistent_handler_name for h in logger.handlers):
        try:
            log_dir.mkdir(parents=True,exist_ok=True)
            persistent_handler = RotatingFileHandler(
                filename=log_dir / f"{name}.log",
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
                delay=True,
            )
        except OSError:
            pass
        else:
            persistent_handler.setLevel(level)
            persistent_handler.setFormatter(fmt)
            persistent_handler.set_name(persistent_handler_name)
            logger.addHandler(persistent_handler)

    # Setup console handler, only when asked for. Goes to the given stream (stderr by default) so it never mixes with
    # command output.
    console_handler_name = f"{name}:console"
    if console and not any(h.get_name() == console_handler_name for h in logger.handlers):
        console_handler = logging.StreamHandler(stream)
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(fmt)
        console_handler.set_name(console_handler_name)
        logger.addHandler(console_handler)

    return logger

# Drops every handler configure_logging() attached. Mostly for tests, which configure logging per case.
def reset_logging(name = LOG_NAME):
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        if handler.get_name() and handler.get_name().startswith(f"{name}:"):
            logger.removeHandler(handler)
            handler.close()
