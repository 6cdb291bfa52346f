"""Custom exception classes for the GolfLink handicap sync.

``ConfigError`` and ``SessionError`` are fatal: they abort the run before any
sheet write. ``ProfileLookupError`` is the only per-record failure; the
scrape loop records it as the ``"Error"`` outcome and moves on.
"""


class ConfigError(Exception):
    """Raised when the run configuration cannot be used.

    Args:
        field: The ``RunConfig`` field that is invalid.
        reason: Human-readable explanation of what is wrong.
    """

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid configuration for '{field}': {reason}")


class SessionError(Exception):
    """Raised when the browser session cannot be established.

    Covers a browser that fails to launch, a login page that cannot be
    opened, and a console that closes before the operator confirms login.
    Never raised for a single profile lookup.
    """


class ProfileLookupError(LookupError):
    """Raised when one member's profile lookup fails.

    Examples: the navigation errors out, or the handicap element never
    appears before the timeout.

    Args:
        url: The profile URL that was being looked up.
        reason: Human-readable explanation of the failure.
    """

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Lookup failed for '{url}': {reason}")
