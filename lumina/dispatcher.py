"""
Request Dispatcher - map a selected feature to one Gemini / Veo call.
"""

from __future__ import annotations

from typing import Optional

from google.genai import types as genai_types

from .config import (
    DEFAULT_ASPECT_RATIO,
    DEFAULT_IMAGE_SIZE,
    DEFAULT_VIDEO_ASPECT_RATIO,
    DEFAULT_VIDEO_PROMPT,
    DARK_RESTORE_INSTRUCTION,
    ENHANCE_4K_INSTRUCTION,
    VIDEO_CLEAN_TEMPLATE,
    Feature,
    GenerationRequest,
    GenerationResult,
    SourceMedia,
    get_feature_spec,
    get_video_resolution,
)
from .errors import ServiceError, ValidationError
from .gemini_client import get_edit_model, get_image_model, get_video_model
from .utils import first_inline_image, get_logger
from .video_poller import fetch_completed_video, poll_operation

logger = get_logger("dispatcher")


def validate_request(request: GenerationRequest) -> None:
    """
    Check that a request carries the inputs its feature needs.

    Raises:
        ValidationError: before any network call is made
    """
    feature = Feature(request.feature)
    prompt = (request.prompt_text or "").strip()
    media = request.source_media

    if feature == Feature.AI_GENERATE:
        if not prompt:
            raise ValidationError("Please enter a prompt.")
    elif feature == Feature.IMAGE_4K:
        if media is None:
            raise ValidationError("Please upload an image.")
        if media.kind != "image":
            raise ValidationError("4K enhancement needs an image, not a video.")
    elif feature == Feature.DARK_RESTORE:
        if media is None:
            raise ValidationError("Please upload a dark image.")
        if media.kind != "image":
            raise ValidationError("Dark restoration needs an image, not a video.")
    elif feature == Feature.VIDEO_CLEANER:
        if media is not None:
            accepts = get_feature_spec(feature).accepts
            if not media.mime_type.startswith(accepts):
                raise ValidationError(f"Unsupported file type: {media.mime_type}")


def _with_details(instruction: str, details: Optional[str]) -> str:
    details = (details or "").strip()
    if not details:
        return instruction
    return f"{instruction}\n\nAdditional details: {details}"


def generate_ai_image(client, prompt: str) -> Optional[str]:
    """
    Generate an image from a text prompt.

    Returns:
        PNG/JPEG data URI, or None if the response had no inline image
    """
    model = get_image_model()
    logger.info(f"Generating image with {model}")
    response = client.models.generate_content(
        model=model,
        contents=[prompt],
        config=genai_types.GenerateContentConfig(
            image_config=genai_types.ImageConfig(aspect_ratio=DEFAULT_ASPECT_RATIO),
        ),
    )
    return first_inline_image(response)


def _edit_image(client, media: SourceMedia, instruction: str) -> Optional[str]:
    model = get_edit_model()
    logger.info(f"Editing {media.mime_type} image ({len(media.data)} bytes) with {model}")
    image_part = genai_types.Part.from_bytes(data=media.data, mime_type=media.mime_type)
    response = client.models.generate_content(
        model=model,
        contents=[image_part, instruction],
        config=genai_types.GenerateContentConfig(
            image_config=genai_types.ImageConfig(
                aspect_ratio=DEFAULT_ASPECT_RATIO,
                image_size=DEFAULT_IMAGE_SIZE,
            ),
        ),
    )
    return first_inline_image(response)


def enhance_to_4k(client, media: SourceMedia, details: Optional[str] = None) -> Optional[str]:
    """Upscale and clean an image using the built-in 4K instruction."""
    return _edit_image(client, media, _with_details(ENHANCE_4K_INSTRUCTION, details))


def restore_dark_image(client, media: SourceMedia, details: Optional[str] = None) -> Optional[str]:
    """Recover an underexposed image using the built-in restoration instruction."""
    return _edit_image(client, media, _with_details(DARK_RESTORE_INSTRUCTION, details))


def process_video_noise(
    client,
    api_key: str,
    prompt: str,
    media: Optional[SourceMedia] = None,
    status_writer=None,
    poll_interval: Optional[float] = None,
    max_wait: Optional[float] = None,
    sleep=None,
) -> Optional[str]:
    """
    Submit a clean-video generation job, wait for it and download the result.

    An uploaded image is sent as the reference frame. Uploaded videos are only
    kept for comparison; the video model takes an image here, not a clip.

    Returns:
        Video data URI, or None if no video was produced
    """
    model = get_video_model()
    kwargs = {
        "model": model,
        "prompt": VIDEO_CLEAN_TEMPLATE.format(prompt=prompt),
        "config": genai_types.GenerateVideosConfig(
            number_of_videos=1,
            resolution=get_video_resolution(),
            aspect_ratio=DEFAULT_VIDEO_ASPECT_RATIO,
        ),
    }
    if media is not None and media.kind == "image":
        kwargs["image"] = genai_types.Image(image_bytes=media.data, mime_type=media.mime_type)

    logger.info(f"Submitting video job to {model} (reference frame: {'image' in kwargs})")
    if status_writer:
        status_writer.write("🚀 Submitting video job...")
    operation = client.models.generate_videos(**kwargs)

    poll_kwargs = {}
    if sleep is not None:
        poll_kwargs["sleep"] = sleep
    operation = poll_operation(
        client,
        operation,
        poll_interval=poll_interval,
        max_wait=max_wait,
        status_writer=status_writer,
        **poll_kwargs,
    )
    return fetch_completed_video(operation, api_key, status_writer=status_writer)


def dispatch_request(
    request: GenerationRequest,
    client,
    api_key: str,
    status_writer=None,
    **video_options,
) -> GenerationResult:
    """
    Validate a request, issue its service call and package the output.

    Args:
        request: Feature plus prompt / source media
        client: genai.Client
        api_key: Key used to download finished videos
        status_writer: Optional object with ``write(msg)`` for progress
        video_options: poll_interval / max_wait / sleep passed to the poller

    Raises:
        ValidationError: missing inputs (no call made)
        ServiceError: the service returned no media
    """
    validate_request(request)
    feature = Feature(request.feature)
    media = request.source_media
    prompt = (request.prompt_text or "").strip()

    image_uri = None
    video_uri = None

    if feature == Feature.AI_GENERATE:
        image_uri = generate_ai_image(client, prompt)
    elif feature == Feature.IMAGE_4K:
        image_uri = enhance_to_4k(client, media, details=prompt)
    elif feature == Feature.DARK_RESTORE:
        image_uri = restore_dark_image(client, media, details=prompt)
    elif feature == Feature.VIDEO_CLEANER:
        video_uri = process_video_noise(
            client,
            api_key,
            prompt or DEFAULT_VIDEO_PROMPT,
            media=media,
            status_writer=status_writer,
            **video_options,
        )

    if not image_uri and not video_uri:
        logger.error(f"{feature.value}: service returned no media")
        raise ServiceError("Failed to process: the service returned no media.")

    return GenerationResult(
        image_uri=image_uri,
        video_uri=video_uri,
        original_uri=media.data_uri if media is not None else None,
        original_type=media.kind if media is not None else "image",
    )
