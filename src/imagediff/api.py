"""
Public entry points for imagediff.

ImageDiff bundles a configuration with its own surface adapter. The
module-level functions build a fresh engine per call, so they share no
state and are safe to call from several threads.

Example:
    from imagediff import equal, diff
    if not equal(actual_picture, expected_picture, tolerance=2):
        diff(actual_picture, expected_picture).to_pil().save('diff.png')
"""

from typing import Any, Optional, Union

from .adapter import SurfaceAdapter, check_type, is_image_like as _is_image_like
from .core import (
    Align,
    ImageData,
    ImageDiffConfig,
    ImageMismatchError,
    diff_image_data,
    equal_image_data,
)
from .surface import Surface, SurfaceProvider

# Per-call default that defers to the engine config; None is a real override
FROM_CONFIG: Any = object()

__all__ = [
    'ImageDiff',
    'to_canonical',
    'equal',
    'diff',
    'is_image_like',
    'assert_equal',
    'to_surface',
]


class ImageDiff:
    """Comparison engine: validation, normalisation, equality and diffs"""

    def __init__(self, config: Optional[ImageDiffConfig] = None,
                 provider: Optional[SurfaceProvider] = None):
        self.config = config or ImageDiffConfig()
        self.adapter = SurfaceAdapter(provider)

    def create_surface(self, width: int, height: int) -> Surface:
        return self.adapter.provider.create_surface(width, height)

    def create_image_data(self, width: int, height: int) -> ImageData:
        return ImageData.blank(width, height)

    def is_image_like(self, handle: Any) -> bool:
        return _is_image_like(handle)

    def to_image_data(self, handle: Any) -> ImageData:
        """Normalise handle to a buffer the caller owns exclusively"""
        check_type(handle)
        return self.adapter.normalize(handle, copy=True)

    def to_surface(self, handle: Any) -> Surface:
        check_type(handle)
        return self.adapter.to_surface(handle)

    def equal(self, a: Any, b: Any, tolerance: Optional[float] = FROM_CONFIG,
              violation_budget: Optional[int] = FROM_CONFIG) -> bool:
        """
        Decide whether a and b are equal images.

        Args:
            a, b: Image-like handles
            tolerance: Per-channel absolute difference allowed, defaults to config;
                None means 0
            violation_budget: Bytes allowed over tolerance, defaults to config;
                None disables the budget

        Returns:
            False on any dimension mismatch, otherwise the tolerance verdict
        """
        check_type(a, b)
        if tolerance is FROM_CONFIG:
            tolerance = self.config.tolerance
        if violation_budget is FROM_CONFIG:
            violation_budget = self.config.violation_budget
        return equal_image_data(
            self.adapter.normalize(a, copy=False),
            self.adapter.normalize(b, copy=False),
            tolerance,
            violation_budget,
        )

    def diff(self, a: Any, b: Any, align: Union[Align, str, None] = None) -> ImageData:
        """Difference buffer of a and b; align only matters for unequal sizes"""
        check_type(a, b)
        return diff_image_data(
            self.adapter.normalize(a, copy=False),
            self.adapter.normalize(b, copy=False),
            align if align is not None else self.config.align,
        )

    def assert_equal(self, actual: Any, expected: Any, tolerance: Optional[float] = FROM_CONFIG,
                     violation_budget: Optional[int] = FROM_CONFIG):
        """Raise ImageMismatchError carrying both images and their diff unless equal"""
        check_type(actual, expected)
        actual = self.adapter.normalize(actual, copy=True)
        expected = self.adapter.normalize(expected, copy=True)
        if self.equal(actual, expected, tolerance, violation_budget):
            return
        raise ImageMismatchError(
            f"Expected to be equal. Actual {actual.width}x{actual.height}, "
            f"expected {expected.width}x{expected.height}.",
            actual=actual,
            expected=expected,
            diff=self.diff(actual, expected),
        )


def to_canonical(handle: Any) -> ImageData:
    """Normalise any image-like handle to an independent ImageData"""
    return ImageDiff().to_image_data(handle)


def equal(a: Any, b: Any, tolerance: Optional[float] = FROM_CONFIG,
          violation_budget: Optional[int] = FROM_CONFIG) -> bool:
    return ImageDiff().equal(a, b, tolerance, violation_budget)


def diff(a: Any, b: Any, align: Union[Align, str, None] = None) -> ImageData:
    return ImageDiff().diff(a, b, align)


def is_image_like(handle: Any) -> bool:
    """Non-throwing classification check"""
    return _is_image_like(handle)


def assert_equal(actual: Any, expected: Any, tolerance: Optional[float] = FROM_CONFIG,
                 violation_budget: Optional[int] = FROM_CONFIG):
    ImageDiff().assert_equal(actual, expected, tolerance, violation_budget)


def to_surface(handle: Any) -> Surface:
    return ImageDiff().to_surface(handle)
