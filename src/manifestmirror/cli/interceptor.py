"""Log exceptions raised by a run and convert them to exit codes."""

from __future__ import annotations

from .logger import log


class Interceptor:
    """
    Context manager to intercept exceptions.

    Use as a context manager:

        interceptor = Interceptor()
        with interceptor:
            func()
        raise SystemExit(interceptor.exitcode())

    Exceptions are logged and suppressed, except KeyboardInterrupt. The
    failed field tells you whether there were any exceptions.
    """

    def __init__(self):
        self.failed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        if exc_type is None:
            return False
        if issubclass(exc_type, KeyboardInterrupt):
            return False
        log.error("run failed: %s", exc_value)
        log.debug("run failed", exc_info=(exc_type, exc_value, traceback))
        self.failed = True
        return True  # suppress the exception

    def exitcode(self) -> int:
        """Zero on success, 1 on failure."""
        return int(self.failed)
