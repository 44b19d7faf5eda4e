"""Output filename derivation, shared by the API and the client."""
import re
from typing import Optional
from urllib.parse import quote, unquote

_FILENAME_STAR_RE = re.compile(r"filename\*\s*=\s*(?:[\w-]+'[\w-]*')?([^;\s]+)", re.I)
_FILENAME_RE = re.compile(r"""filename\s*=\s*(?:"([^"]*)"|'([^']*)'|([^;\s]*))""", re.I)


def base_name(original_name: str) -> str:
    """Name without its last extension; the whole name when there is none."""
    name = original_name or ""
    i = name.rfind(".")
    return name[:i] if i > 0 else name


def derive_output_filename(original_name: str, target_format: str) -> str:
    """photo.JPG + png -> photo.png, photo.JPG + ico -> photo-icons.zip."""
    fmt = (target_format or "").strip().lower()
    base = base_name(original_name)
    if fmt == "ico":
        return f"{base}-icons.zip"
    return f"{base}.{fmt}"


def filename_from_content_disposition(header: Optional[str], fallback: str) -> str:
    """Pull the filename parameter out of a Content-Disposition value."""
    if not header:
        return fallback
    m = _FILENAME_STAR_RE.search(header)
    if m:
        name = unquote(m.group(1).strip("\"'")).strip()
        if name:
            return name
    m = _FILENAME_RE.search(header)
    if m:
        name = next((g for g in m.groups() if g is not None), "").strip()
        if name:
            return name
    return fallback


def content_disposition(filename: str) -> str:
    """attachment header; non latin-1 names also get an RFC 5987 filename*."""
    name = filename.replace('"', "")
    try:
        name.encode("latin-1")
    except UnicodeEncodeError:
        ascii_name = name.encode("ascii", "replace").decode("ascii")
        return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(name)}"
    return f'attachment; filename="{name}"'
