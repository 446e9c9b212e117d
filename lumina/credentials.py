"""
API key selection as an explicit precondition for service calls.

The host decides how a key is picked (sidebar input, environment, a secrets
store). Callers pass a ``KeySelector`` into ``ensure_key_selection`` before
dispatching, and back into ``request_reselection`` after a session expiry.
"""

from __future__ import annotations

from typing import Optional, Protocol

from .errors import CredentialsMissingError
from .utils import get_logger

logger = get_logger("credentials")


class KeySelector(Protocol):
    def has_selected_key(self) -> bool:
        ...

    def open_select_key(self) -> None:
        ...

    def get_key(self) -> Optional[str]:
        ...


class StaticKeySelector:
    """Selector backed by a fixed key, e.g. one read from the environment."""

    def __init__(self, api_key: Optional[str]):
        self.api_key = api_key or None

    def has_selected_key(self) -> bool:
        return bool(self.api_key)

    def open_select_key(self) -> None:
        logger.warning("No interactive key selection available; set GEMINI_API_KEY")

    def get_key(self) -> Optional[str]:
        return self.api_key


def ensure_key_selection(selector: KeySelector) -> str:
    """
    Make sure an API key is selected, prompting once if it is not.

    Returns:
        The selected key

    Raises:
        CredentialsMissingError: if no key is available after prompting
    """
    if not selector.has_selected_key():
        logger.info("No API key selected, prompting for one")
        selector.open_select_key()
    key = selector.get_key() if selector.has_selected_key() else None
    if not key:
        raise CredentialsMissingError("Please select an API key before processing.")
    return key


def request_reselection(selector: KeySelector) -> None:
    """Ask the host to prompt for a new key after the current one was rejected."""
    logger.warning("API key rejected by the service, requesting reselection")
    selector.open_select_key()
