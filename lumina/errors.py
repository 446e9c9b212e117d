"""
Exceptions raised by the request dispatcher and polling loop.
"""


class LuminaError(Exception):
    """Base class for errors shown to the user."""


class ValidationError(LuminaError):
    """A required prompt or source file is missing. Raised before any service call."""


class ServiceError(LuminaError):
    """The service answered, but with nothing usable."""


class CredentialsMissingError(LuminaError):
    """No API key is selected."""


class SessionExpiredError(LuminaError):
    """The API key stopped being accepted while a video operation was polled."""

    def __init__(self, message: str = (
        "Your API key session has expired or the key is no longer valid. "
        "Please select your API key again and retry."
    )):
        super().__init__(message)


class PollTimeoutError(LuminaError):
    """A video operation did not finish within the configured wait."""
