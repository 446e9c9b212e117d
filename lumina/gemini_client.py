"""
Gemini API client initialization and configuration.
"""

from __future__ import annotations

import os
from typing import Optional

from google import genai

from .config import DEFAULT_EDIT_MODEL, DEFAULT_IMAGE_MODEL, DEFAULT_VIDEO_MODEL


def get_api_key() -> Optional[str]:
    """
    Read the API key from the environment.

    Returns:
        Key string or None if not set
    """
    # Prefer official GEMINI_API_KEY; fallback to GOOGLE_GENAI_API_KEY for compatibility.
    return os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_GENAI_API_KEY") or None


def get_genai_client(api_key: Optional[str] = None) -> Optional[genai.Client]:
    """
    Initialize and return Gemini API client.

    Args:
        api_key: Explicit key; falls back to the environment

    Returns:
        genai.Client instance or None if API key not available
    """
    api_key = api_key or get_api_key()
    if not api_key:
        return None
    return genai.Client(api_key=api_key)


def get_image_model() -> str:
    """Model used for text-to-image generation."""
    return os.getenv("LUMINA_IMAGE_MODEL", DEFAULT_IMAGE_MODEL)


def get_edit_model() -> str:
    """Model used for 4K enhancement and dark restoration."""
    return os.getenv("LUMINA_EDIT_MODEL", DEFAULT_EDIT_MODEL)


def get_video_model() -> str:
    return os.getenv("LUMINA_VIDEO_MODEL", DEFAULT_VIDEO_MODEL)
