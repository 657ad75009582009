"""
Bitmap Module
Immutable RGBA pixel grids exchanged between the rasterizers and the pipeline
"""

import io
import base64
import binascii
from dataclasses import dataclass, field
from typing import Tuple, Union

from PIL import Image, UnidentifiedImageError

from . import config
from .error_handling import InvalidBitmapError


@dataclass(frozen=True)
class Bitmap:
    """A captured pixel grid.

    The wrapped Pillow image is always RGBA and is never modified after
    construction; every transformation returns a new Bitmap.
    """
    image: Image.Image = field(repr=False)

    def __post_init__(self):
        if not isinstance(self.image, Image.Image):
            raise InvalidBitmapError(f"Expected a PIL image, got {type(self.image).__name__}")
        if self.image.mode != "RGBA":
            object.__setattr__(self, "image", self.image.convert("RGBA"))

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def __repr__(self):
        return f"Bitmap({self.width}x{self.height})"

    @classmethod
    def from_image(cls, image: Image.Image) -> "Bitmap":
        """Wrap a copy of a Pillow image"""
        return cls(image.convert("RGBA") if image.mode != "RGBA" else image.copy())

    @classmethod
    def blank(cls, width: int, height: int, color=(0, 0, 0, 0)) -> "Bitmap":
        """Create a bitmap filled with a single color (transparent by default)"""
        return cls(Image.new("RGBA", (width, height), color))

    @classmethod
    def from_bytes(cls, data: bytes) -> "Bitmap":
        """Decode PNG/JPEG/any Pillow-supported image bytes"""
        try:
            with Image.open(io.BytesIO(data)) as img:
                img.load()
                return cls(img.convert("RGBA"))
        except (UnidentifiedImageError, OSError) as e:
            raise InvalidBitmapError(f"Could not decode image data: {e}") from e

    @classmethod
    def from_data_url(cls, data_url: str) -> "Bitmap":
        """Decode a ``data:image/...;base64,...`` URL"""
        header, sep, payload = data_url.partition(",")
        if not sep or not header.startswith("data:image/"):
            raise InvalidBitmapError("Not an image data URL")
        if not header.endswith(";base64"):
            raise InvalidBitmapError("Only base64 encoded data URLs are supported")
        try:
            data = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidBitmapError(f"Invalid base64 payload in data URL: {e}") from e
        return cls.from_bytes(data)

    def to_jpeg_bytes(self, quality: float = config.JPEG_QUALITY) -> bytes:
        return encode_jpeg(self.image, quality)


def jpeg_quality_to_pillow(quality: float) -> int:
    """Map a 0..1 quality factor to Pillow's JPEG quality scale"""
    if not 0 < quality <= 1:
        raise ValueError(f"JPEG quality must be in (0, 1], got {quality}")
    return max(1, min(95, round(quality * 100)))


def encode_jpeg(image: Union[Image.Image, Bitmap], quality: float = config.JPEG_QUALITY,
                background=config.BACKGROUND_COLOR) -> bytes:
    """Encode an image as JPEG, flattening transparency onto background"""
    if isinstance(image, Bitmap):
        image = image.image
    if image.mode == "RGBA":
        rgb = Image.new("RGB", image.size, background)
        rgb.paste(image, mask=image.getchannel("A"))
    elif image.mode != "RGB":
        rgb = image.convert("RGB")
    else:
        rgb = image

    buffer = io.BytesIO()
    rgb.save(buffer, "JPEG", quality=jpeg_quality_to_pillow(quality))
    return buffer.getvalue()
