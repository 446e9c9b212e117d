from types import SimpleNamespace

import pytest

from lumina.config import SourceMedia


def make_response(*parts):
    """Build a generate_content-shaped response from (bytes, mime) pairs or text."""
    built = []
    for part in parts:
        if isinstance(part, tuple):
            data, mime = part
            built.append(SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type=mime), text=None))
        else:
            built.append(SimpleNamespace(inline_data=None, text=part))
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=built))])


def make_operation(done, uri=None, error=None):
    response = None
    if uri is not None:
        response = SimpleNamespace(generated_videos=[SimpleNamespace(video=SimpleNamespace(uri=uri))])
    return SimpleNamespace(done=done, response=response, error=error)


class FakeModels:
    def __init__(self, response=None, operation=None):
        self.response = response
        self.operation = operation
        self.content_calls = []
        self.video_calls = []

    def generate_content(self, **kwargs):
        self.content_calls.append(kwargs)
        return self.response

    def generate_videos(self, **kwargs):
        self.video_calls.append(kwargs)
        return self.operation


class FakeOperations:
    """Returns queued results (operations or exceptions) one per status query."""

    def __init__(self, results=()):
        self.results = list(results)
        self.calls = 0

    def get(self, operation):
        self.calls += 1
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


class FakeClient:
    def __init__(self, response=None, operation=None, poll_results=()):
        self.models = FakeModels(response=response, operation=operation)
        self.operations = FakeOperations(poll_results)


class RecordingWriter:
    def __init__(self):
        self.messages = []

    def write(self, msg):
        self.messages.append(msg)


@pytest.fixture
def png_media():
    return SourceMedia(data=b"\x89PNG\r\n\x1a\nfake", mime_type="image/png", name="photo.png")


@pytest.fixture
def video_media():
    return SourceMedia(data=b"\x00\x00\x00\x18ftypmp42", mime_type="video/mp4", name="clip.mp4")


@pytest.fixture
def no_sleep():
    slept = []
    return slept.append, slept
