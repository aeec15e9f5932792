"""
Exceptions raised by the service layer and turned into HTTP responses by the
handlers registered in ``main.create_app``.
"""


class InvalidShortcodeRequest(Exception):
    """Client supplied a missing or malformed redirect/status (HTTP 400)."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ShortcodeGenerationError(Exception):
    """No unused short code could be found within the retry budget."""


class LoginRequired(Exception):
    """Raised by admin routes when the session carries no user."""

    def __init__(self, return_to: str = "/"):
        super().__init__(return_to)
        self.return_to = return_to


class OAuthError(Exception):
    """The GitHub OAuth handshake could not be completed."""


class IntegrityTokenNotFound(Exception):
    """The index template carries no non-sha integrity attribute."""
