"""
Configuration, constants, and data models for Lumina AI Studio.
"""

from __future__ import annotations

import os
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from .utils import get_logger, to_data_uri

logger = get_logger("config")


# ---------- Features ----------
class Feature(str, Enum):
    VIDEO_CLEANER = "VIDEO_CLEANER"
    IMAGE_4K = "IMAGE_4K"
    DARK_RESTORE = "DARK_RESTORE"
    AI_GENERATE = "AI_GENERATE"


# ---------- Models ----------
DEFAULT_IMAGE_MODEL = "gemini-2.5-flash-image"
DEFAULT_EDIT_MODEL = "gemini-3-pro-image-preview"
DEFAULT_VIDEO_MODEL = "veo-3.1-fast-generate-preview"

DEFAULT_ASPECT_RATIO = "1:1"
DEFAULT_IMAGE_SIZE = "1K"
DEFAULT_VIDEO_RESOLUTION = "720p"
DEFAULT_VIDEO_ASPECT_RATIO = "16:9"

# ---------- Polling ----------
DEFAULT_POLL_INTERVAL = 10.0
DEFAULT_MAX_POLL_SECONDS = 600.0


# ---------- Instructions ----------
ENHANCE_4K_INSTRUCTION = (
    "Upscale this image to 4K ultra-high resolution. Enhance every detail, sharpen edges, "
    "remove all compression artifacts, and restore textures to studio quality. The output "
    "must be a perfectly clean, high-definition version of this exact scene."
)

DARK_RESTORE_INSTRUCTION = (
    "This is a very dark or black image. Fully restore it to a clear, realistic image. "
    "Increase the exposure, recover all details from the shadows, remove digital noise, "
    "and make it look as if it were taken in bright daylight. The result must be sharp "
    "and professional."
)

VIDEO_CLEAN_TEMPLATE = (
    "A crystal clear, noise-free, cinematic 4K video. Perfectly clean visuals, stable "
    "camera, studio lighting. Content: {prompt}"
)

DEFAULT_VIDEO_PROMPT = "A clean cinematic masterpiece"


@dataclass(frozen=True)
class FeatureSpec:
    key: Feature
    label: str
    title: str
    accepts: Tuple[str, ...]  # MIME prefixes the uploader takes
    requires_prompt: bool
    requires_media: bool
    placeholder: str
    instruction: str = ""


FEATURE_SPECS = {
    Feature.VIDEO_CLEANER: FeatureSpec(
        key=Feature.VIDEO_CLEANER,
        label="Video",
        title="Video",
        accepts=("video/", "image/"),
        requires_prompt=False,
        requires_media=False,
        placeholder="Add details for better results...",
        instruction=VIDEO_CLEAN_TEMPLATE,
    ),
    Feature.IMAGE_4K: FeatureSpec(
        key=Feature.IMAGE_4K,
        label="4K Edit",
        title="4K HD",
        accepts=("image/",),
        requires_prompt=False,
        requires_media=True,
        placeholder="Add details for better results...",
        instruction=ENHANCE_4K_INSTRUCTION,
    ),
    Feature.DARK_RESTORE: FeatureSpec(
        key=Feature.DARK_RESTORE,
        label="Restore",
        title="Restored",
        accepts=("image/",),
        requires_prompt=False,
        requires_media=True,
        placeholder="Add details for better results...",
        instruction=DARK_RESTORE_INSTRUCTION,
    ),
    Feature.AI_GENERATE: FeatureSpec(
        key=Feature.AI_GENERATE,
        label="Generate",
        title="AI Concept",
        accepts=(),
        requires_prompt=True,
        requires_media=False,
        placeholder="Describe your vision...",
    ),
}


def get_feature_spec(feature: Feature) -> FeatureSpec:
    """Lookup the display and input rules for a feature."""
    return FEATURE_SPECS[Feature(feature)]


# ---------- Data Models ----------
@dataclass(frozen=True)
class SourceMedia:
    """Uploaded media held in memory."""
    data: bytes
    mime_type: str
    name: Optional[str] = None

    @property
    def kind(self) -> str:
        return "video" if self.mime_type.startswith("video/") else "image"

    @property
    def data_uri(self) -> str:
        return to_data_uri(self.data, self.mime_type)


@dataclass(frozen=True)
class GenerationRequest:
    feature: Feature
    prompt_text: Optional[str] = None
    source_media: Optional[SourceMedia] = None


@dataclass(frozen=True)
class GenerationResult:
    image_uri: Optional[str] = None
    video_uri: Optional[str] = None
    original_uri: Optional[str] = None
    original_type: str = "image"
    created_at: float = field(default_factory=time.time)


# ---------- Environment ----------
def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}, using {default}")
        return default
    if value <= 0:
        logger.warning(f"Ignoring non-positive {name}={raw!r}, using {default}")
        return default
    return value


def get_poll_interval() -> float:
    """Seconds between video operation status checks."""
    return _env_float("LUMINA_POLL_INTERVAL", DEFAULT_POLL_INTERVAL)


def get_max_poll_seconds() -> float:
    """Upper bound on how long a video operation is polled."""
    return _env_float("LUMINA_MAX_POLL_SECONDS", DEFAULT_MAX_POLL_SECONDS)


def get_video_resolution() -> str:
    return os.getenv("LUMINA_VIDEO_RESOLUTION", DEFAULT_VIDEO_RESOLUTION)
