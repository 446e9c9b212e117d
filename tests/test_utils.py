import io

import pytest
from PIL import Image

from lumina.config import SourceMedia, get_feature_spec, Feature
from lumina.utils import first_inline_image, load_media_bytes, parse_data_uri, to_data_uri
from conftest import make_response


class Upload(io.BytesIO):
    def __init__(self, data, type_, name="upload"):
        super().__init__(data)
        self.type = type_
        self.name = name


def _image_bytes(fmt):
    buf = io.BytesIO()
    Image.new("RGB", (4, 4), (10, 20, 30)).save(buf, format=fmt)
    return buf.getvalue()


def test_data_uri_embeds_mime_type():
    uri = to_data_uri(b"\x00\x01", "image/jpeg")
    assert uri == "data:image/jpeg;base64,AAE="
    assert parse_data_uri(uri) == (b"\x00\x01", "image/jpeg")


@pytest.mark.parametrize("bad", ["", "http://x/y.png", "data:image/png,plain", "data:image/png;base64,@@@"])
def test_parse_rejects_non_base64_data_uris(bad):
    with pytest.raises(ValueError):
        parse_data_uri(bad)


def test_supported_image_kept_as_is():
    data = _image_bytes("PNG")
    assert load_media_bytes(Upload(data, "image/png")) == (data, "image/png")


def test_video_kept_as_is():
    assert load_media_bytes(Upload(b"clip", "video/mp4")) == (b"clip", "video/mp4")


def test_other_image_formats_become_png():
    data, mime = load_media_bytes(Upload(_image_bytes("BMP"), "image/bmp"))
    assert mime == "image/png"
    assert Image.open(io.BytesIO(data)).format == "PNG"


def test_unreadable_upload_rejected():
    with pytest.raises(ValueError):
        load_media_bytes(Upload(b"not an image", "application/octet-stream"))


def test_first_inline_image_handles_empty_candidates():
    assert first_inline_image(make_response()) is None
    assert first_inline_image(type("R", (), {"candidates": None})()) is None


def test_source_media_kind_and_uri():
    media = SourceMedia(data=b"v", mime_type="video/webm")
    assert media.kind == "video"
    assert media.data_uri == "data:video/webm;base64,dg=="


def test_generation_feature_takes_no_upload():
    assert get_feature_spec(Feature.AI_GENERATE).accepts == ()
    assert get_feature_spec("VIDEO_CLEANER").accepts == ("video/", "image/")
