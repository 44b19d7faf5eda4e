import io
import logging
import zipfile

import pytest
from PIL import Image

from converter.config import ICO_SIZES
from converter.conversion import ico
from converter.conversion.errors import IcoGenerationFailed


@pytest.fixture
def source_image():
    return Image.new("RGBA", (80, 40), (10, 120, 200, 255))


def test_bundle_contains_every_size(source_image):
    result = ico.build_ico_bundle(source_image, "logo-icons.zip")
    assert result.output_mime_type == "application/zip"
    assert result.output_filename == "logo-icons.zip"
    with zipfile.ZipFile(io.BytesIO(result.output_bytes)) as zf:
        assert zf.testzip() is None
        names = zf.namelist()
        assert names == [f"icon-{d}x{d}.ico" for d in ICO_SIZES]
        for info in zf.infolist():
            assert info.compress_type == zipfile.ZIP_DEFLATED
        for d in ICO_SIZES:
            with Image.open(io.BytesIO(zf.read(f"icon-{d}x{d}.ico"))) as icon:
                assert icon.format == "ICO"
                assert icon.size == (d, d)
                assert len(icon.info["sizes"]) == 1


def test_partial_failure_is_tolerated(source_image, monkeypatch, caplog):
    real_render = ico.render_ico

    def flaky(img, size):
        if size in (24, 128):
            raise OSError("encoder exploded")
        return real_render(img, size)

    monkeypatch.setattr(ico, "render_ico", flaky)
    with caplog.at_level(logging.WARNING, logger="converter.ico"):
        result = ico.build_ico_bundle(source_image, "x-icons.zip")
    with zipfile.ZipFile(io.BytesIO(result.output_bytes)) as zf:
        assert zf.namelist() == [
            "icon-16x16.ico",
            "icon-32x32.ico",
            "icon-48x48.ico",
            "icon-64x64.ico",
            "icon-256x256.ico",
        ]
    assert "24x24" in caplog.text
    assert "128x128" in caplog.text


def test_total_failure_raises(source_image, monkeypatch):
    def broken(img, size):
        raise ValueError("nope")

    monkeypatch.setattr(ico, "render_ico", broken)
    with pytest.raises(IcoGenerationFailed) as exc_info:
        ico.build_ico_bundle(source_image, "x-icons.zip")
    assert exc_info.value.status_code == 500


def test_sizes_rendered_smallest_first(source_image, monkeypatch):
    seen = []
    real_render = ico.render_ico

    def record(img, size):
        seen.append(size)
        return real_render(img, size)

    monkeypatch.setattr(ico, "render_ico", record)
    ico.build_ico_bundle(source_image, "x-icons.zip", sizes=(48, 16, 32))
    assert seen == [16, 32, 48]


def test_render_ico_has_transparent_padding(source_image):
    with Image.open(io.BytesIO(ico.render_ico(source_image, 32))) as icon:
        icon = icon.convert("RGBA")
        assert icon.getpixel((0, 0))[3] == 0
        assert icon.getpixel((16, 16))[3] == 255
