import sys
from rtimer.common.logger import log
from rtimer.cli import main

# Entry point for `python -m rtimer` and the `timer` console script
def run() -> None:
    try:
        sys.exit(main())
    except SystemExit:
        raise
    except Exception:
        # Full stack trace goes to the log, the user just gets a one-liner
        log.exception("Uncaught exception in entrypoint, exiting")
        print("timer: unexpected error, see the log for details", file=sys.stderr)
        sys.exit(1)

if __name__ == "__main__":
    run()
