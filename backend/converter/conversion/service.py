"""Format dispatch: re-encode with Pillow, pass SVG through, or bundle ICOs."""
import io
import logging
import math
from typing import Optional, Union

from PIL import Image

from converter.config import DEFAULT_QUALITY, ICO_SIZES
from converter.conversion.errors import (
    EncodeFailure,
    IcoGenerationFailed,
    UnsupportedConversion,
)
from converter.conversion.filenames import derive_output_filename
from converter.conversion.ico import build_ico_bundle
from converter.conversion.models import (
    FORMAT_SPECS,
    SVG_MIME_TYPE,
    ConversionRequest,
    ConversionResult,
    TargetFormat,
)

logger = logging.getLogger("converter.service")

Log = Union[logging.Logger, logging.LoggerAdapter]


def resolve_quality(fmt: TargetFormat, quality: Optional[float], default: int = DEFAULT_QUALITY) -> Optional[int]:
    """
    Encoder quality (1-100) for fmt, or None when fmt has no quality setting.
    A 0-1 float is scaled to a percentage, rounded half-up and clamped.
    """
    if not FORMAT_SPECS[fmt].supports_quality:
        return None
    if quality is None or not math.isfinite(quality):
        return default
    percent = math.floor(quality * 100 + 0.5)
    return max(1, min(100, percent))


def rasterize_svg(data: bytes) -> bytes:
    """Render SVG markup to PNG bytes at its intrinsic size."""
    import cairosvg

    return cairosvg.svg2png(bytestring=data)


def prepare_for_encoder(img: Image.Image, fmt: TargetFormat) -> Image.Image:
    """Convert to a pixel mode the target encoder accepts."""
    if fmt == TargetFormat.JPEG:
        # JPEG has no alpha or palette
        return img if img.mode in ("RGB", "L") else img.convert("RGB")
    if img.mode in ("RGB", "RGBA"):
        return img
    if img.mode in ("LA", "PA") or "transparency" in img.info:
        return img.convert("RGBA")
    return img.convert("RGB")


class ConversionService:
    """Converts one uploaded image per call. Holds no per-request state."""

    def __init__(self, default_quality: int = DEFAULT_QUALITY, ico_sizes=ICO_SIZES):
        self.default_quality = default_quality
        self.ico_sizes = tuple(ico_sizes)

    def open_image(self, request: ConversionRequest) -> Image.Image:
        data = request.source_bytes
        if request.is_svg_source:
            data = rasterize_svg(data)
        img = Image.open(io.BytesIO(data))
        img.load()
        return img

    def encode(self, img: Image.Image, fmt: TargetFormat, quality: Optional[int]) -> bytes:
        spec = FORMAT_SPECS[fmt]
        save_kw: dict = {"format": spec.pillow_format}
        if fmt == TargetFormat.PNG:
            save_kw["optimize"] = True
        elif fmt == TargetFormat.JPEG:
            save_kw.update(quality=quality, optimize=True)
        elif fmt == TargetFormat.WEBP:
            save_kw.update(quality=quality, method=4)
        elif fmt == TargetFormat.AVIF:
            save_kw["quality"] = quality
        buf = io.BytesIO()
        prepare_for_encoder(img, fmt).save(buf, **save_kw)
        return buf.getvalue()

    def _convert_svg(self, request: ConversionRequest, output_filename: str) -> ConversionResult:
        if not request.is_svg_source:
            raise UnsupportedConversion("Conversion from raster to SVG is not supported by this server.")
        return ConversionResult(
            output_bytes=request.source_bytes,
            output_mime_type=SVG_MIME_TYPE,
            output_filename=output_filename,
        )

    def _convert_ico(self, request: ConversionRequest, output_filename: str, log: Log) -> ConversionResult:
        try:
            img = self.open_image(request)
        except Exception as e:
            # every size would fail on the same undecodable source
            log.warning("Could not decode %s for ico bundle: %s", request.source_name, e)
            raise IcoGenerationFailed() from e
        return build_ico_bundle(img, output_filename, sizes=self.ico_sizes, log=log)

    def _convert_raster(
        self,
        request: ConversionRequest,
        fmt: TargetFormat,
        output_filename: str,
        log: Log,
    ) -> ConversionResult:
        quality = resolve_quality(fmt, request.quality, self.default_quality)
        if quality is not None:
            if request.quality is None:
                log.info("No quality provided, defaulting to %s for %s", quality, fmt.value)
            else:
                log.info("Applying quality %s for %s", quality, fmt.value)
        try:
            img = self.open_image(request)
            data = self.encode(img, fmt, quality)
        except Exception as e:
            log.exception("Encoding to %s failed for %s: %s", fmt.value, request.source_name, e)
            raise EncodeFailure(request.target_format.strip().lower(), str(e)) from e
        return ConversionResult(
            output_bytes=data,
            output_mime_type=FORMAT_SPECS[fmt].mime_type,
            output_filename=output_filename,
        )

    def convert(self, request: ConversionRequest, log: Optional[Log] = None) -> ConversionResult:
        """Dispatch on the target format. Raises ConversionError subclasses."""
        log = log or logger
        fmt = TargetFormat.parse(request.target_format)
        output_filename = derive_output_filename(request.source_name, request.target_format)
        if fmt == TargetFormat.SVG:
            result = self._convert_svg(request, output_filename)
        elif fmt == TargetFormat.ICO:
            result = self._convert_ico(request, output_filename, log)
        else:
            result = self._convert_raster(request, fmt, output_filename, log)
        log.info(
            "Outputting as %s, filename: %s, size: %s bytes",
            result.output_mime_type,
            result.output_filename,
            len(result.output_bytes),
        )
        return result


# Singleton
_conversion_service: Optional[ConversionService] = None


def get_conversion_service() -> ConversionService:
    global _conversion_service
    if _conversion_service is None:
        _conversion_service = ConversionService()
    return _conversion_service
