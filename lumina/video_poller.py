"""
Video operation polling - wait for a Veo job, then download the result.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

import requests
from google.genai import errors as genai_errors

from .config import get_max_poll_seconds, get_poll_interval
from .errors import PollTimeoutError, ServiceError, SessionExpiredError
from .utils import get_logger, to_data_uri

logger = get_logger("video_poller")

# Returned by the service when the key behind an operation handle is gone.
ENTITY_NOT_FOUND = "Requested entity was not found"


def is_session_expired(exc: Exception) -> bool:
    """True if a status query failed because the API key is no longer accepted."""
    if isinstance(exc, genai_errors.APIError) and exc.code in (401, 403):
        return True
    return ENTITY_NOT_FOUND in str(exc)


def poll_operation(
    client,
    operation,
    poll_interval: Optional[float] = None,
    max_wait: Optional[float] = None,
    status_writer=None,
    sleep: Callable[[float], None] = time.sleep,
):
    """
    Re-query a long-running operation until it reports done.

    Args:
        client: genai.Client (only ``operations.get`` is used)
        operation: Handle returned by ``models.generate_videos``
        poll_interval: Seconds between checks (default from LUMINA_POLL_INTERVAL)
        max_wait: Give up after this many seconds (default from LUMINA_MAX_POLL_SECONDS)
        status_writer: Optional object with ``write(msg)`` for progress
        sleep: Injected for tests

    Returns:
        The completed operation

    Raises:
        SessionExpiredError: the key was rejected during a status query
        PollTimeoutError: the operation did not finish within ``max_wait``
    """
    interval = poll_interval if poll_interval is not None else get_poll_interval()
    limit = max_wait if max_wait is not None else get_max_poll_seconds()

    def log(msg):
        logger.info(msg)
        if status_writer:
            status_writer.write(msg)

    elapsed = 0.0
    while not operation.done:
        if elapsed >= limit:
            raise PollTimeoutError(
                f"Video generation did not finish within {int(limit)} seconds."
            )
        sleep(interval)
        elapsed += interval
        try:
            operation = client.operations.get(operation)
        except Exception as exc:
            if is_session_expired(exc):
                logger.error(f"Status query rejected: {exc}")
                raise SessionExpiredError() from exc
            raise
        if not operation.done:
            log(f"⏳ Still processing... ({int(elapsed)}s)")

    log("✅ Video generation complete")
    return operation


def resolve_video_uri(operation) -> Optional[str]:
    """Extract the first generated video URI from a completed operation."""
    error = getattr(operation, "error", None)
    if error:
        message = error.get("message") if isinstance(error, dict) else str(error)
        raise ServiceError(f"Video generation failed: {message or 'unknown error'}")
    response = getattr(operation, "response", None)
    videos = getattr(response, "generated_videos", None) or []
    if not videos:
        return None
    video = getattr(videos[0], "video", None)
    return getattr(video, "uri", None)


def download_video(uri: str, api_key: str, timeout: float = 120) -> bytes:
    """Fetch a completed video; the service expects the key as a query parameter."""
    resp = requests.get(uri, params={"key": api_key}, timeout=timeout)
    resp.raise_for_status()
    if not resp.content:
        raise ServiceError("Downloaded video is empty.")
    logger.info(f"Downloaded video ({len(resp.content)} bytes)")
    return resp.content


def materialize_video(data: bytes, mime_type: str = "video/mp4") -> str:
    """Hold downloaded video bytes as a self-contained data URI."""
    return to_data_uri(data, mime_type)


def fetch_completed_video(
    operation,
    api_key: str,
    status_writer=None,
) -> Optional[str]:
    """
    Resolve and download the video of a completed operation.

    Returns:
        Video data URI, or None if the operation produced no video
    """
    uri = resolve_video_uri(operation)
    if not uri:
        logger.warning("Completed operation carried no video reference")
        return None
    if status_writer:
        status_writer.write("📥 Downloading video...")
    data = download_video(uri, api_key)
    return materialize_video(data)
