"""Conversion request/response models and the format capability table."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from converter.conversion.errors import UnsupportedFormat

SVG_MIME_TYPE = "image/svg+xml"
ZIP_MIME_TYPE = "application/zip"


class TargetFormat(str, Enum):
    PNG = "png"
    JPEG = "jpeg"
    WEBP = "webp"
    AVIF = "avif"
    SVG = "svg"
    ICO = "ico"

    @classmethod
    def parse(cls, value: str) -> "TargetFormat":
        """Normalize a requested format ("JPG", " webp ") to a member."""
        name = (value or "").strip().lower()
        name = FORMAT_ALIASES.get(name, name)
        try:
            return cls(name)
        except ValueError:
            raise UnsupportedFormat(value) from None


FORMAT_ALIASES = {"jpg": "jpeg"}


@dataclass(frozen=True)
class FormatSpec:
    mime_type: str
    pillow_format: Optional[str]
    supports_quality: bool = False


FORMAT_SPECS: dict[TargetFormat, FormatSpec] = {
    TargetFormat.PNG: FormatSpec("image/png", "PNG"),
    TargetFormat.JPEG: FormatSpec("image/jpeg", "JPEG", supports_quality=True),
    TargetFormat.WEBP: FormatSpec("image/webp", "WEBP", supports_quality=True),
    TargetFormat.AVIF: FormatSpec("image/avif", "AVIF", supports_quality=True),
    TargetFormat.SVG: FormatSpec(SVG_MIME_TYPE, None),
    TargetFormat.ICO: FormatSpec(ZIP_MIME_TYPE, None),
}


@dataclass
class ConversionRequest:
    source_bytes: bytes
    source_name: str
    source_mime_type: str
    target_format: str  # as requested; parsed by the service
    quality: Optional[float] = None

    @property
    def is_svg_source(self) -> bool:
        mime = (self.source_mime_type or "").split(";", 1)[0].strip().lower()
        return mime == SVG_MIME_TYPE


@dataclass
class ConversionResult:
    output_bytes: bytes
    output_mime_type: str
    output_filename: str
