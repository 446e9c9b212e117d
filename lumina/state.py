"""
View state for the studio page and the action that drives one request.

The page keeps a single ``StudioState`` in Streamlit session state. Requests
move it through ``Idle -> InFlight -> Succeeded | Failed``; a new result
always replaces the previous one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional, Union

from .config import Feature, GenerationRequest, GenerationResult, SourceMedia, get_feature_spec
from .credentials import KeySelector, ensure_key_selection, request_reselection
from .dispatcher import validate_request
from .errors import LuminaError, SessionExpiredError
from .utils import get_logger

logger = get_logger("state")


# ---------- Request State ----------
@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class InFlight:
    feature: Feature


@dataclass(frozen=True)
class Succeeded:
    result: GenerationResult


@dataclass(frozen=True)
class Failed:
    message: str
    previous: Optional[GenerationResult] = None


RequestState = Union[Idle, InFlight, Succeeded, Failed]


@dataclass
class StudioState:
    active_feature: Feature = Feature.IMAGE_4K
    prompt: str = ""
    uploaded: Optional[SourceMedia] = None
    request: RequestState = field(default_factory=Idle)
    showing_original: bool = False

    @property
    def is_processing(self) -> bool:
        return isinstance(self.request, InFlight)

    @property
    def result(self) -> Optional[GenerationResult]:
        """Result to display: the latest success, or the one a failure left in place."""
        if isinstance(self.request, Succeeded):
            return self.request.result
        if isinstance(self.request, Failed):
            return self.request.previous
        return None

    @property
    def error(self) -> Optional[str]:
        return self.request.message if isinstance(self.request, Failed) else None

    def can_submit(self) -> bool:
        """Mirror of the process button's enabled state."""
        if self.is_processing:
            return False
        spec = get_feature_spec(self.active_feature)
        if spec.requires_prompt and not self.prompt.strip():
            return False
        if spec.requires_media and self.uploaded is None:
            return False
        return True


# ---------- Actions ----------
def select_feature(state: StudioState, feature: Feature) -> bool:
    """
    Switch the active feature. Ignored while a request is in flight.

    Clears the result, prompt and upload; each feature has its own uploader.
    """
    if state.is_processing:
        return False
    feature = Feature(feature)
    state.active_feature = feature
    state.prompt = ""
    state.request = Idle()
    state.showing_original = False
    state.uploaded = None
    return True


def set_upload(state: StudioState, media: Optional[SourceMedia]) -> None:
    """Replace (or clear) the uploaded file; any previous result no longer applies."""
    if state.is_processing:
        return
    state.uploaded = media
    state.request = Idle()
    state.showing_original = False


def build_request(state: StudioState) -> GenerationRequest:
    return GenerationRequest(
        feature=state.active_feature,
        prompt_text=state.prompt or None,
        source_media=state.uploaded,
    )


def execute_action(
    state: StudioState,
    dispatch: Callable[[GenerationRequest, str], GenerationResult],
    selector: KeySelector,
) -> RequestState:
    """
    Run one request for the active feature and record its outcome.

    Args:
        state: Page state, updated in place
        dispatch: Called with (request, api_key); returns the new result
        selector: Credential gate checked before dispatching

    Returns:
        The final request state (unchanged if a request was already in flight)
    """
    if state.is_processing:
        logger.info("Ignoring submit while a request is in flight")
        return state.request

    previous = state.result
    request = build_request(state)
    state.request = InFlight(request.feature)
    state.showing_original = False

    try:
        validate_request(request)
        api_key = ensure_key_selection(selector)
        result = dispatch(request, api_key)
        state.request = Succeeded(result)
    except SessionExpiredError as exc:
        request_reselection(selector)
        state.request = Failed(str(exc), previous)
    except LuminaError as exc:
        logger.warning(f"{request.feature.value} failed: {exc}")
        state.request = Failed(str(exc), previous)
    except Exception as exc:
        logger.exception(f"{request.feature.value} failed unexpectedly")
        state.request = Failed(str(exc) or "Failed to process.", previous)
    finally:
        # A Streamlit rerun interrupts the script with a BaseException.
        if isinstance(state.request, InFlight):
            state.request = Succeeded(previous) if previous else Idle()
    return state.request
