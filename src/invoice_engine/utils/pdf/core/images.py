"""
Logo decoding: any Pillow-readable raster (bytes, data URL or file path) -> RGB image XObject data.
"""

from __future__ import annotations

import base64
import binascii
import io
import zlib
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from PIL import Image

RasterImage = Union[bytes, bytearray, str, Path]


class LogoDecodeError(ValueError):
    """The logo could not be read or decoded."""


@dataclass(frozen=True)
class PdfImage:
    width: int
    height: int
    data: bytes  # FlateDecode-compressed 8-bit RGB samples

    def fit(self, max_w: float, max_h: float) -> tuple[float, float]:
        """Display size inside the box, keeping the aspect ratio; never upscaled."""
        scale = min(max_w / self.width, max_h / self.height, 1.0)
        return round(self.width * scale, 2), round(self.height * scale, 2)


def _read_source(source: RasterImage) -> bytes:
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    if isinstance(source, Path):
        try:
            return source.read_bytes()
        except (OSError, ValueError) as exc:
            raise LogoDecodeError(f"cannot read {source}: {exc}") from exc
    text = str(source)
    if text.startswith("data:"):
        _, _, encoded = text.partition(",")
        try:
            return base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise LogoDecodeError(f"invalid data URL: {exc}") from exc
    try:
        return Path(text).read_bytes()
    except (OSError, ValueError) as exc:
        raise LogoDecodeError(f"cannot read {text}: {exc}") from exc


def decode_logo(source: RasterImage) -> PdfImage:
    raw = _read_source(source)
    if not raw:
        raise LogoDecodeError("empty image data")
    try:
        with Image.open(io.BytesIO(raw)) as img:
            img.load()
            if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
                rgba = img.convert("RGBA")
                rgb = Image.new("RGB", rgba.size, (255, 255, 255))
                rgb.paste(rgba, mask=rgba.getchannel("A"))
            else:
                rgb = img.convert("RGB")
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise LogoDecodeError(f"cannot decode image: {exc}") from exc
    width, height = rgb.size
    if not width or not height:
        raise LogoDecodeError("image has no pixels")
    return PdfImage(width=width, height=height, data=zlib.compress(rgb.tobytes()))
