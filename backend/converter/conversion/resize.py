"""Contain-fit resize onto a transparent canvas."""
from typing import Tuple

from PIL import Image

TRANSPARENT = (0, 0, 0, 0)


def contain_size(width: int, height: int, target_width: int, target_height: int) -> Tuple[int, int]:
    """Largest (w, h) with the source aspect ratio that fits inside the target."""
    scale = min(target_width / width, target_height / height)
    new_w = max(1, min(target_width, int(round(width * scale))))
    new_h = max(1, min(target_height, int(round(height * scale))))
    return new_w, new_h


def resize_contain(
    img: Image.Image,
    target_width: int,
    target_height: int,
    background: Tuple[int, int, int, int] = TRANSPARENT,
) -> Image.Image:
    """
    Produce an RGBA image of exactly (target_width, target_height).
    The source is scaled up or down to fit without cropping, centered, and the
    remainder is filled with background (fully transparent by default).
    """
    if img.mode != "RGBA":
        img = img.convert("RGBA")
    w, h = img.size
    tw, th = target_width, target_height
    new_w, new_h = contain_size(w, h, tw, th)
    if (new_w, new_h) != (w, h):
        img = img.resize((new_w, new_h), Image.Resampling.LANCZOS)
    if (new_w, new_h) == (tw, th):
        return img.copy()
    out = Image.new("RGBA", (tw, th), background)
    paste_x = (tw - new_w) // 2
    paste_y = (th - new_h) // 2
    out.paste(img, (paste_x, paste_y))
    return out
