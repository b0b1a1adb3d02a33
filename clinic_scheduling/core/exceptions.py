class SchedulingError(Exception):
    """Base for errors the scheduler reports to its caller.

    `code` is machine-readable (e.g. "INVALID_DATE"); `message` is for humans.
    """

    def __init__(self, code: str, message: str | None = None) -> None:
        self.code = code
        self.message = message or code
        super().__init__(self.message)


class ValidationError(SchedulingError):
    """Malformed or out-of-range input. Caller-correctable, never retried."""


class UnsatisfiableRequestError(SchedulingError):
    """Input was well-formed but the combination cannot produce the requested slots."""
