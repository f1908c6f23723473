"""
Drawing-surface provider used by the surface adapter.

The comparison engine only needs four things from a drawing surface: read
pixels back, write pixels, draw a decoded picture, and clear a rectangle.
Embedding environments can plug in their own rasteriser by subclassing
Surface and SurfaceProvider; the default implementation is backed by a
Pillow RGBA image.
"""

import logging
from abc import ABC, abstractmethod

from PIL import Image

from .core import ImageData

logger = logging.getLogger(__name__)

TRANSPARENT = (0, 0, 0, 0)


class SurfaceContext:
    """Rendering context bound to exactly one surface"""

    def __init__(self, surface: 'Surface'):
        self.surface = surface

    def __repr__(self) -> str:
        return f"SurfaceContext({self.surface!r})"


class Surface(ABC):
    """Off-screen rasterisation target"""

    @property
    @abstractmethod
    def width(self) -> int:
        ...

    @property
    @abstractmethod
    def height(self) -> int:
        ...

    @abstractmethod
    def get_pixels(self, x: int, y: int, width: int, height: int) -> ImageData:
        """Read back a rectangle as a new buffer"""

    @abstractmethod
    def put_pixels(self, buffer: ImageData, x: int, y: int):
        """Write buffer at (x, y), replacing what is there"""

    @abstractmethod
    def draw_picture(self, picture: Image.Image, x: int, y: int):
        """Draw a decoded picture at (x, y) over the current content"""

    @abstractmethod
    def clear(self, x: int, y: int, width: int, height: int):
        """Reset a rectangle to transparent black"""

    def get_context(self) -> SurfaceContext:
        return SurfaceContext(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.width}x{self.height})"


class SurfaceProvider(ABC):
    """Creates drawing surfaces for the adapter"""

    @abstractmethod
    def create_surface(self, width: int, height: int) -> Surface:
        ...


class PillowSurface(Surface):
    """Surface backed by a Pillow RGBA image"""

    def __init__(self, width: int, height: int):
        self.image = Image.new('RGBA', (width, height), TRANSPARENT)

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    def get_pixels(self, x: int, y: int, width: int, height: int) -> ImageData:
        if (x, y, width, height) == (0, 0, self.width, self.height):
            return ImageData.from_pil(self.image)
        return ImageData.from_pil(self.image.crop((x, y, x + width, y + height)))

    def put_pixels(self, buffer: ImageData, x: int, y: int):
        self.image.paste(buffer.to_pil(), (x, y))

    def draw_picture(self, picture: Image.Image, x: int, y: int):
        if picture.mode != 'RGBA':
            picture = picture.convert('RGBA')
        self.image.alpha_composite(picture, dest=(x, y))

    def clear(self, x: int, y: int, width: int, height: int):
        self.image.paste(TRANSPARENT, (x, y, x + width, y + height))


class PillowSurfaceProvider(SurfaceProvider):
    """Default provider: in-memory Pillow images"""

    def create_surface(self, width: int, height: int) -> Surface:
        logger.debug(f"Creating {width}x{height} surface")
        return PillowSurface(width, height)
