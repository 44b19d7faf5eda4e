"""ICO bundle: one single-image .ico per size, zipped together."""
import io
import logging
import zipfile
from typing import Optional, Sequence, Union

from PIL import Image

from converter.config import ICO_SIZES
from converter.conversion.errors import IcoGenerationFailed
from converter.conversion.models import ZIP_MIME_TYPE, ConversionResult
from converter.conversion.resize import resize_contain

logger = logging.getLogger("converter.ico")

Log = Union[logging.Logger, logging.LoggerAdapter]


def ico_entry_name(size: int) -> str:
    return f"icon-{size}x{size}.ico"


def render_ico(img: Image.Image, size: int) -> bytes:
    """Contain-fit img into size x size and encode it as a standalone ICO."""
    square = resize_contain(img, size, size)
    buf = io.BytesIO()
    square.save(buf, format="ICO", sizes=[(size, size)])
    return buf.getvalue()


def create_zip(entries: Sequence[tuple[str, bytes]]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for arcname, data in entries:
            zf.writestr(arcname, data)
    return buf.getvalue()


def build_ico_bundle(
    img: Image.Image,
    output_filename: str,
    sizes: Sequence[int] = ICO_SIZES,
    log: Optional[Log] = None,
) -> ConversionResult:
    """
    Render img at every size in ascending order and zip the .ico files.
    A size that fails is logged and skipped; IcoGenerationFailed is raised
    only when no size could be rendered.
    """
    log = log or logger
    entries: list[tuple[str, bytes]] = []
    for size in sorted(sizes):
        try:
            entries.append((ico_entry_name(size), render_ico(img, size)))
        except Exception as e:
            log.warning("Failed to generate %sx%s .ico file: %s", size, size, e)
    if not entries:
        raise IcoGenerationFailed()
    data = create_zip(entries)
    log.info("Created ico bundle %s with %s of %s sizes", output_filename, len(entries), len(sizes))
    return ConversionResult(
        output_bytes=data,
        output_mime_type=ZIP_MIME_TYPE,
        output_filename=output_filename,
    )
