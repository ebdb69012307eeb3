import asyncio
from types import SimpleNamespace

import pytest
from google.api_core import exceptions as google_exceptions

from site_compiler.errors import ImageGenerationError, ImageServiceUnavailableError
from site_compiler.image_generation import ImagenImageBackend, blob_name_for, enhance_prompt


class FakeImagen:
    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.prompts = []

    def generate_images(self, prompt, number_of_images, aspect_ratio):
        self.prompts.append(prompt)
        outcome = self.outcomes.pop(0) if self.outcomes else b"png-bytes"
        if isinstance(outcome, Exception):
            raise outcome
        if outcome is None:
            return SimpleNamespace(images=[])
        return SimpleNamespace(images=[SimpleNamespace(_image_bytes=outcome)])


class FakeBlob:
    def __init__(self, name):
        self.name = name
        self.uploads = []

    def upload_from_string(self, data, content_type):
        self.uploads.append((data, content_type))

    @property
    def public_url(self):
        return f"https://storage.example/bucket/{self.name}"


class FakeBucket:
    def __init__(self):
        self.blobs = {}

    def blob(self, name):
        return self.blobs.setdefault(name, FakeBlob(name))


def _backend(model, bucket=None, sleeps=None):
    return ImagenImageBackend(
        project_id="demo",
        bucket_name="bucket",
        model=model,
        bucket=bucket or FakeBucket(),
        backoff_seconds=2.0,
        sleep=(sleeps.append if sleeps is not None else lambda seconds: None),
    )


def test_renders_uploads_and_returns_the_public_url():
    model = FakeImagen()
    bucket = FakeBucket()

    url = asyncio.run(_backend(model, bucket).generate_image("a sunny terrace"))

    name = blob_name_for("a sunny terrace")
    assert url == f"https://storage.example/bucket/{name}"
    assert bucket.blobs[name].uploads == [(b"png-bytes", "image/png")]
    assert model.prompts == [enhance_prompt("a sunny terrace")]


def test_blob_names_are_stable_per_description():
    assert blob_name_for("a") == blob_name_for("a")
    assert blob_name_for("a") != blob_name_for("b")
    assert blob_name_for("a").startswith("images/")


def test_quota_errors_back_off_and_retry():
    sleeps = []
    model = FakeImagen(google_exceptions.ResourceExhausted("quota"), google_exceptions.ResourceExhausted("quota"))

    url = _backend(model, sleeps=sleeps).generate_image_sync("bread")

    assert url.endswith(".png")
    assert sleeps == [2.0, 4.0]
    assert len(model.prompts) == 3


def test_quota_exhausted_on_every_attempt():
    sleeps = []
    model = FakeImagen(*[google_exceptions.ResourceExhausted("quota")] * 3)

    with pytest.raises(ImageGenerationError) as info:
        _backend(model, sleeps=sleeps).generate_image_sync("bread")

    assert info.value.description == "bread"
    assert sleeps == [2.0, 4.0]


@pytest.mark.parametrize(
    "error",
    [google_exceptions.ServiceUnavailable("down"), google_exceptions.PermissionDenied("no access")],
)
def test_outages_mean_the_service_is_unavailable(error):
    with pytest.raises(ImageServiceUnavailableError):
        _backend(FakeImagen(error)).generate_image_sync("bread")


def test_bad_request_and_empty_response_fail_one_description():
    with pytest.raises(ImageGenerationError):
        _backend(FakeImagen(google_exceptions.InvalidArgument("bad prompt"))).generate_image_sync("bread")
    with pytest.raises(ImageGenerationError):
        _backend(FakeImagen(None)).generate_image_sync("bread")
