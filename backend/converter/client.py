"""Command-line client for the convert endpoint."""
import argparse
import logging
import mimetypes
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import httpx

from converter.config import INPUT_EXTENSIONS, QUALITY_MAX, QUALITY_MIN
from converter.conversion.filenames import derive_output_filename, filename_from_content_disposition
from converter.conversion.models import SVG_MIME_TYPE

logger = logging.getLogger("converter.client")

DEFAULT_URL = "http://localhost:8000"
QUALITY_FORMATS = ("jpeg", "jpg", "webp", "avif")


class ConverterClientError(Exception):
    pass


@dataclass
class DownloadedFile:
    filename: str
    content: bytes
    mime_type: str

    def save(self, out_dir: Path) -> Path:
        out_dir.mkdir(parents=True, exist_ok=True)
        path = out_dir / Path(self.filename).name
        path.write_bytes(self.content)
        return path


def guess_mime_type(filename: str) -> str:
    if Path(filename).suffix.lower() == ".svg":
        return SVG_MIME_TYPE
    return mimetypes.guess_type(filename)[0] or "application/octet-stream"


def error_message(response: httpx.Response) -> str:
    """Server's {"error": ...} text, or the status line for non-JSON bodies."""
    try:
        message = response.json().get("error")
    except (ValueError, AttributeError):
        message = None
    return message or f"Server error: {response.status_code} {response.reason_phrase}"


class ConverterClient:
    def __init__(self, base_url: str = DEFAULT_URL, timeout: float = 120.0, transport: Optional[httpx.BaseTransport] = None):
        self._http = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def close(self) -> None:
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def convert_bytes(
        self,
        content: bytes,
        filename: str,
        target_format: str,
        quality: Optional[float] = None,
    ) -> DownloadedFile:
        fmt = target_format.strip().lower()
        data = {"targetFormat": fmt}
        if quality is not None and fmt in QUALITY_FORMATS:
            if not QUALITY_MIN <= quality <= QUALITY_MAX:
                raise ConverterClientError(f"Quality must be between {QUALITY_MIN:.2f} and {QUALITY_MAX:.2f}")
            data["quality"] = str(quality)
        files = {"file": (filename, content, guess_mime_type(filename))}
        try:
            response = self._http.post("/api/convert", data=data, files=files)
        except httpx.HTTPError as e:
            raise ConverterClientError(f"Request failed: {e}") from e
        if response.is_error:
            raise ConverterClientError(error_message(response))
        fallback = derive_output_filename(filename, fmt)
        name = filename_from_content_disposition(response.headers.get("content-disposition"), fallback)
        mime_type = response.headers.get("content-type", "application/octet-stream")
        logger.info("Converted %s -> %s (%s bytes)", filename, name, len(response.content))
        return DownloadedFile(filename=name, content=response.content, mime_type=mime_type)

    def convert(self, path: Path, target_format: str, quality: Optional[float] = None) -> DownloadedFile:
        path = Path(path)
        if path.suffix.lower() not in INPUT_EXTENSIONS:
            raise ConverterClientError(
                f"Unsupported input file type: {path.suffix or path.name}. Accepted: {','.join(INPUT_EXTENSIONS)}"
            )
        return self.convert_bytes(path.read_bytes(), path.name, target_format, quality)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Convert an image via the converter API.")
    parser.add_argument("file", type=Path, help="Image to convert")
    parser.add_argument("--to", dest="target_format", required=True, help="png|jpeg|jpg|webp|avif|svg|ico")
    parser.add_argument("--quality", type=float, default=None, help="0.10-1.00, jpeg/webp/avif only")
    parser.add_argument("--url", default=DEFAULT_URL, help="API base URL")
    parser.add_argument("--out", type=Path, default=Path("."), help="Output directory")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        with ConverterClient(args.url) as client:
            result = client.convert(args.file, args.target_format, args.quality)
        path = result.save(args.out)
    except (ConverterClientError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
