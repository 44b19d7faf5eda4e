import io

import pytest
from PIL import Image, features

SVG_SOURCE = (
    b'<svg xmlns="http://www.w3.org/2000/svg" width="40" height="20">'
    b'<rect width="40" height="20" fill="#ff0000"/></svg>'
)


def _cairosvg_available() -> bool:
    try:
        import cairosvg  # noqa: F401
    except (ImportError, OSError):
        return False
    return True


requires_avif = pytest.mark.skipif(not features.check("avif"), reason="Pillow built without AVIF")
requires_cairosvg = pytest.mark.skipif(not _cairosvg_available(), reason="cairosvg/cairo not available")


def image_bytes(fmt: str = "PNG", size=(80, 40), mode: str = "RGBA", color=(200, 30, 30, 255)) -> bytes:
    if mode == "RGB":
        color = color[:3]
    img = Image.new(mode, size, color)
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()
