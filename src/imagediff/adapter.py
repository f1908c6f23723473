"""
Surface adapter - classify image-like handles and normalise them to ImageData.

Classification runs once at this boundary and yields a SourceKind; the rest
of the engine dispatches on that kind and never re-inspects the handle.
Kinds are tried in a fixed order, first match wins:
    picture -> surface -> context -> raw pixel buffer
"""

import logging
import numbers
from collections.abc import Mapping
from enum import Enum
from typing import Any, Optional

import numpy as np
from PIL import Image

from .core import CHANNELS, ImageData, NotAnImageError, as_byte_array
from .surface import PillowSurfaceProvider, Surface, SurfaceContext, SurfaceProvider

logger = logging.getLogger(__name__)


class SourceKind(Enum):
    """Kinds of handle the adapter can normalise"""
    PICTURE = "picture"
    SURFACE = "surface"
    CONTEXT = "context"
    BUFFER = "buffer"


def _field(handle: Any, name: str) -> Any:
    if isinstance(handle, Mapping):
        return handle.get(name)
    return getattr(handle, name, None)


def _is_dimension(value: Any) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool) and value >= 0


def _byte_values(data: Any) -> Optional[np.ndarray]:
    """data as a flat uint8 array, or None unless every value is a byte"""
    try:
        return as_byte_array(data)
    except (TypeError, ValueError):
        return None


def is_picture(handle: Any) -> bool:
    return isinstance(handle, Image.Image)


def is_surface(handle: Any) -> bool:
    return isinstance(handle, Surface)


def is_context(handle: Any) -> bool:
    return isinstance(handle, SurfaceContext) and isinstance(handle.surface, Surface)


def is_pixel_buffer(handle: Any) -> bool:
    """Duck-typed check for width, height and byte-valued data of matching length"""
    if handle is None:
        return False
    width = _field(handle, 'width')
    height = _field(handle, 'height')
    if not (_is_dimension(width) and _is_dimension(height)):
        return False
    values = _byte_values(_field(handle, 'data'))
    return values is not None and values.size == width * height * CHANNELS


_CLASSIFIERS = (
    (SourceKind.PICTURE, is_picture),
    (SourceKind.SURFACE, is_surface),
    (SourceKind.CONTEXT, is_context),
    (SourceKind.BUFFER, is_pixel_buffer),
)


def classify(handle: Any) -> Optional[SourceKind]:
    """Return the SourceKind of handle, or None if it is not image-like"""
    for kind, matches in _CLASSIFIERS:
        if matches(handle):
            return kind
    return None


def is_image_like(handle: Any) -> bool:
    return classify(handle) is not None


def check_type(*handles: Any):
    """Raise NotAnImageError for the first handle that is not image-like"""
    for position, handle in enumerate(handles):
        if classify(handle) is None:
            raise NotAnImageError(
                handle,
                f"Submitted object was not an image (argument {position}: {type(handle).__name__})"
            )


class SurfaceAdapter:
    """
    Normalises image-like handles to ImageData.

    Pictures are rasterised through a scratch surface owned by this adapter.
    The scratch surface is resized or cleared before every extraction, so an
    adapter must not be used from two threads at once; give each concurrent
    caller its own adapter.
    """

    def __init__(self, provider: Optional[SurfaceProvider] = None):
        self.provider = provider or PillowSurfaceProvider()
        self._scratch: Optional[Surface] = None
        self._extractors = {
            SourceKind.PICTURE: self._from_picture,
            SourceKind.SURFACE: self._from_surface,
            SourceKind.CONTEXT: self._from_context,
            SourceKind.BUFFER: self._from_buffer,
        }

    def _scratch_surface(self, width: int, height: int) -> Surface:
        scratch = self._scratch
        if scratch is None or scratch.width != width or scratch.height != height:
            logger.debug(f"Resizing scratch surface to {width}x{height}")
            scratch = self._scratch = self.provider.create_surface(width, height)
        else:
            scratch.clear(0, 0, width, height)
        return scratch

    def _from_picture(self, picture: Image.Image, copy: bool) -> ImageData:
        width, height = picture.size
        if width == 0 or height == 0:
            return ImageData.blank(width, height)
        scratch = self._scratch_surface(width, height)
        scratch.draw_picture(picture, 0, 0)
        return scratch.get_pixels(0, 0, width, height)

    def _from_surface(self, surface: Surface, copy: bool) -> ImageData:
        return surface.get_pixels(0, 0, surface.width, surface.height)

    def _from_context(self, context: SurfaceContext, copy: bool) -> ImageData:
        return self._from_surface(context.surface, copy)

    def _from_buffer(self, buffer: Any, copy: bool) -> ImageData:
        if isinstance(buffer, ImageData):
            return buffer.copy() if copy else buffer
        image = ImageData(_field(buffer, 'width'), _field(buffer, 'height'), _field(buffer, 'data'))
        # Raw data may still alias caller memory
        return image.copy() if copy else image

    def normalize(self, handle: Any, copy: bool = True) -> ImageData:
        """
        Convert handle to ImageData.

        Args:
            handle: Picture, surface, context or raw pixel buffer
            copy: Return a buffer the caller owns exclusively. When False, a
                raw buffer may come back aliased and must be treated as
                read-only.

        Raises:
            NotAnImageError: handle is not image-like
        """
        kind = classify(handle)
        if kind is None:
            raise NotAnImageError(handle)
        return self._extractors[kind](handle, copy)

    def to_surface(self, handle: Any) -> Surface:
        """Copy the pixels of handle onto a fresh provider surface"""
        image = self.normalize(handle, copy=False)
        surface = self.provider.create_surface(image.width, image.height)
        surface.put_pixels(image, 0, 0)
        return surface
