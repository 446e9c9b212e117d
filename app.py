"""
Streamlit frontend for Lumina AI Studio.

This is the main entry point for the application. It holds the page state and
wires the upload, prompt and process controls to the request dispatcher.

Environment Variables:
- GEMINI_API_KEY or GOOGLE_GENAI_API_KEY: Used when no key is entered in the sidebar
- LUMINA_IMAGE_MODEL: (Optional) Text-to-image model (default: gemini-2.5-flash-image)
- LUMINA_EDIT_MODEL: (Optional) Enhancement/restoration model (default: gemini-3-pro-image-preview)
- LUMINA_VIDEO_MODEL: (Optional) Video model (default: veo-3.1-fast-generate-preview)
- LUMINA_VIDEO_RESOLUTION: (Optional) Video resolution (default: 720p)
- LUMINA_POLL_INTERVAL: (Optional) Seconds between video status checks (default: 10)
- LUMINA_MAX_POLL_SECONDS: (Optional) Maximum video wait in seconds (default: 600)
- LUMINA_LOG_LEVEL: (Optional) Log level (default: INFO)
"""

from typing import Optional

import streamlit as st
from dotenv import load_dotenv

from lumina import (
    FEATURE_SPECS,
    Feature,
    SourceMedia,
    StudioState,
    dispatch_request,
    execute_action,
    get_api_key,
    get_feature_spec,
    get_genai_client,
    load_media_bytes,
    select_feature,
    set_upload,
)
from lumina.utils import parse_data_uri

# Load environment variables from .env file
load_dotenv()

STATE_KEY = "studio"


class StreamlitKeySelector:
    """Key selection backed by the sidebar input, falling back to the environment."""

    def has_selected_key(self) -> bool:
        return bool(self.get_key())

    def open_select_key(self) -> None:
        # Widget state can only be reset before the sidebar input is drawn.
        st.session_state["key_reset"] = bool(st.session_state.get("api_key_input"))
        st.session_state["key_prompt"] = True

    def get_key(self) -> Optional[str]:
        return st.session_state.get("api_key_input") or get_api_key()


def _studio() -> StudioState:
    if STATE_KEY not in st.session_state:
        st.session_state[STATE_KEY] = StudioState()
    return st.session_state[STATE_KEY]


def _on_feature_change():
    if select_feature(_studio(), st.session_state["feature_choice"]):
        st.session_state["prompt_input"] = ""
    else:
        st.session_state["feature_choice"] = _studio().active_feature


def _on_prompt_change():
    _studio().prompt = st.session_state["prompt_input"]


def _on_upload(uploader_key: str):
    file = st.session_state.get(uploader_key)
    if file is None:
        set_upload(_studio(), None)
        return
    try:
        data, mime = load_media_bytes(file)
    except ValueError as exc:
        st.session_state["upload_error"] = str(exc)
        set_upload(_studio(), None)
        return
    st.session_state.pop("upload_error", None)
    set_upload(_studio(), SourceMedia(data=data, mime_type=mime, name=file.name))


def _show_media(uri: Optional[str], kind: str, caption: str):
    if not uri:
        return
    data, mime = parse_data_uri(uri)
    if kind == "video":
        st.video(data, format=mime)
    else:
        st.image(data, caption=caption)


# ---------- Streamlit Page Configuration ----------
st.set_page_config(page_title="Lumina AI", page_icon="✨", layout="centered")

studio = _studio()
selector = StreamlitKeySelector()

st.title("✨ Lumina AI")
st.markdown("_Premium Studio_")

# ---------- Sidebar: API Key ----------
with st.sidebar:
    st.markdown("**API Key**")
    if st.session_state.pop("key_reset", False):
        st.session_state["api_key_input"] = ""
    if st.session_state.pop("key_prompt", False):
        st.warning("🔑 Please select your API key to continue.")
    st.text_input(
        "Google AI API Key",
        type="password",
        key="api_key_input",
        help="Your API key from Google AI Studio (ai.google.dev). Falls back to GEMINI_API_KEY.",
    )
    if selector.has_selected_key():
        st.caption("✅ API key selected")
    else:
        st.caption("⚠️ No API key selected")

# ---------- Feature Selection ----------
features = list(FEATURE_SPECS)
st.session_state.setdefault("feature_choice", studio.active_feature)
st.radio(
    "Feature",
    features,
    format_func=lambda f: FEATURE_SPECS[f].label,
    key="feature_choice",
    horizontal=True,
    on_change=_on_feature_change,
    disabled=studio.is_processing,
)
spec = get_feature_spec(studio.active_feature)

# ---------- Inputs ----------
if studio.active_feature != Feature.AI_GENERATE:
    is_video = studio.active_feature == Feature.VIDEO_CLEANER
    uploader_key = f"upload_{studio.active_feature.value}"
    st.file_uploader(
        f"Upload Source ({'video or photo' if is_video else 'photo'})",
        type=["png", "jpg", "jpeg", "webp", "bmp", "gif", "tiff"] + (["mp4", "mov", "webm"] if is_video else []),
        key=uploader_key,
        on_change=_on_upload,
        args=(uploader_key,),
        disabled=studio.is_processing,
    )
    if st.session_state.get("upload_error"):
        st.error(st.session_state["upload_error"])
    if studio.uploaded:
        st.caption(f"✅ Media Ready: {studio.uploaded.name or studio.uploaded.mime_type}")

st.session_state.setdefault("prompt_input", studio.prompt)
st.text_area(
    "AI Prompt / Context",
    key="prompt_input",
    placeholder=spec.placeholder,
    on_change=_on_prompt_change,
    disabled=studio.is_processing,
)
studio.prompt = st.session_state["prompt_input"]

process = st.button(
    "Processing..." if studio.is_processing else f"Process {spec.title}",
    type="primary",
    width="stretch",
    disabled=not studio.can_submit(),
)

# ---------- Request ----------
if process:
    with st.status(f"Processing {spec.title}...", expanded=True) as status:

        def _dispatch(request, api_key):
            return dispatch_request(request, get_genai_client(api_key), api_key, status_writer=status)

        execute_action(studio, _dispatch, selector)
        if studio.error:
            status.update(label="❌ Failed", state="error")
        else:
            status.update(label="✅ Complete!", state="complete")
    if st.session_state.get("key_prompt"):
        st.rerun()

# ---------- Result ----------
if studio.error:
    st.error(studio.error)

result = studio.result
if result is None:
    st.info("💡 Capture or upload media to enhance")
else:
    if result.original_uri:
        studio.showing_original = st.toggle("Show original", value=studio.showing_original)
    if studio.showing_original and result.original_uri:
        _show_media(result.original_uri, result.original_type, "Original")
    elif result.video_uri:
        video_bytes, video_mime = parse_data_uri(result.video_uri)
        st.video(video_bytes, format=video_mime)
        st.download_button(
            "📥 Download video",
            data=video_bytes,
            file_name=f"lumina_{int(result.created_at)}.mp4",
            mime=video_mime,
        )
    elif result.image_uri:
        image_bytes, image_mime = parse_data_uri(result.image_uri)
        st.image(image_bytes, caption="AI Enhanced")
        st.download_button(
            "📥 Download image",
            data=image_bytes,
            file_name=f"lumina_{int(result.created_at)}.{image_mime.split('/')[-1]}",
            mime=image_mime,
        )

st.caption("Built with Streamlit + Google Gemini AI. Set your API key in the sidebar to get started.")
