"""
Lumina AI Studio - Modular Components

This package contains the core modules for Lumina AI Studio:
- config: Features, constants, and data models
- utils: Logging and media helpers
- errors: User-facing exception types
- gemini_client: Gemini API client initialization
- credentials: API key selection precondition
- dispatcher: Feature -> Gemini / Veo request dispatch
- video_poller: Long-running video operation polling and download
- state: Studio page state and the request action
"""

# Lazy imports to avoid circular dependencies and hot-reload issues
__all__ = [
    # Config
    "Feature",
    "FEATURE_SPECS",
    "get_feature_spec",
    "SourceMedia",
    "GenerationRequest",
    "GenerationResult",
    # Utils
    "get_logger",
    "load_media_bytes",
    # Errors
    "LuminaError",
    "ValidationError",
    "ServiceError",
    "SessionExpiredError",
    "CredentialsMissingError",
    "PollTimeoutError",
    # Gemini Client
    "get_genai_client",
    "get_api_key",
    # Credentials
    "StaticKeySelector",
    "ensure_key_selection",
    # Dispatcher
    "dispatch_request",
    "validate_request",
    # State
    "StudioState",
    "select_feature",
    "set_upload",
    "execute_action",
]


def __getattr__(name):
    """Lazy import to avoid circular dependencies and streamlit hot-reload issues."""
    if name in __all__:
        if name in ("Feature", "FEATURE_SPECS", "get_feature_spec", "SourceMedia", "GenerationRequest", "GenerationResult"):
            from . import config
            return getattr(config, name)
        elif name in ("get_logger", "load_media_bytes"):
            from . import utils
            return getattr(utils, name)
        elif name in ("LuminaError", "ValidationError", "ServiceError", "SessionExpiredError", "CredentialsMissingError", "PollTimeoutError"):
            from . import errors
            return getattr(errors, name)
        elif name in ("get_genai_client", "get_api_key"):
            from . import gemini_client
            return getattr(gemini_client, name)
        elif name in ("StaticKeySelector", "ensure_key_selection"):
            from . import credentials
            return getattr(credentials, name)
        elif name in ("dispatch_request", "validate_request"):
            from . import dispatcher
            return getattr(dispatcher, name)
        elif name in ("StudioState", "select_feature", "set_upload", "execute_action"):
            from . import state
            return getattr(state, name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
