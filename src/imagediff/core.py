"""
imagediff core - canonical pixel buffers, equality and visual diffs.

All comparison work happens on ImageData: a width, a height and a flat
RGBA byte buffer. Inputs of other kinds are normalised by the surface
adapter before they reach the functions in this module.
- Equality under a per-channel tolerance and an optional violation budget.
- Subtract diff for images of equal size.
- Compose diff (placement + subtraction, no resampling) for unequal sizes.
"""

import json
import logging
import math
import numbers
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional, Tuple, Union

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)

# Constants
CHANNELS = 4
OPAQUE = 255
DEFAULT_TOLERANCE = 0
DEFAULT_ALIGN = "center"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
VERSION = "1.0.0"


class NotAnImageError(TypeError):
    """Submitted object was not an image"""

    def __init__(self, value, message: Optional[str] = None):
        self.value = value
        if message is None:
            message = f"Submitted object was not an image: {type(value).__name__}"
        super().__init__(message)


class ConfigError(Exception):
    """Configuration related errors"""
    pass


class ImageMismatchError(AssertionError):
    """Raised by assert_equal when two images are not equal"""

    def __init__(self, message: str, actual=None, expected=None, diff=None):
        super().__init__(message)
        self.actual = actual
        self.expected = expected
        self.diff = diff


class Align(str, Enum):
    """Placement of an image on the compose-diff canvas"""
    TOP = "top"
    CENTER = "center"

    @classmethod
    def coerce(cls, value: Union['Align', str, None]) -> 'Align':
        if value is None:
            return cls.CENTER
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown alignment {value!r}, expected 'top' or 'center'") from None


def as_byte_array(data) -> np.ndarray:
    """Flat uint8 view or copy of data; every value must be an integer in 0..255"""
    if isinstance(data, (bytes, bytearray, memoryview)):
        return np.frombuffer(data, dtype=np.uint8)
    values = np.asarray(data)
    if values.size == 0:
        return values.astype(np.uint8).reshape(-1)
    if values.dtype != np.uint8:
        if values.dtype.kind not in 'iu':
            raise ValueError(f"Pixel data must hold integers, got {values.dtype}")
        if values.min() < 0 or values.max() > 255:
            raise ValueError(f"Pixel values must lie in 0..255, got {values.min()}..{values.max()}")
    return values.astype(np.uint8, copy=False).reshape(-1)


@dataclass(eq=False)
class ImageData:
    """Canonical RGBA pixel buffer, row-major, one byte per channel"""
    width: int
    height: int
    data: np.ndarray

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Negative dimensions: {self.width}x{self.height}")
        self.width = int(self.width)
        self.height = int(self.height)
        self.data = as_byte_array(self.data)
        expected = self.width * self.height * CHANNELS
        if self.data.size != expected:
            raise ValueError(
                f"Pixel data holds {self.data.size} bytes, "
                f"{self.width}x{self.height} needs {expected}"
            )

    @classmethod
    def blank(cls, width: int, height: int) -> 'ImageData':
        """Transparent black buffer of the given size"""
        return cls(width, height, np.zeros(width * height * CHANNELS, dtype=np.uint8))

    @classmethod
    def from_pil(cls, image: Image.Image) -> 'ImageData':
        if image.mode != 'RGBA':
            image = image.convert('RGBA')
        width, height = image.size
        return cls(width, height, np.frombuffer(image.tobytes(), dtype=np.uint8).copy())

    def to_pil(self) -> Image.Image:
        return Image.frombytes('RGBA', self.size, self.data.tobytes())

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    @property
    def pixels(self) -> np.ndarray:
        """(height, width, 4) view over data"""
        return self.data.reshape(self.height, self.width, CHANNELS)

    def copy(self) -> 'ImageData':
        return ImageData(self.width, self.height, self.data.copy())

    def __repr__(self) -> str:
        return f"ImageData(width={self.width}, height={self.height})"


@dataclass
class ImageDiffConfig:
    """Default comparison settings for an ImageDiff engine"""
    tolerance: float = DEFAULT_TOLERANCE
    violation_budget: Optional[int] = None
    align: str = DEFAULT_ALIGN

    def __post_init__(self):
        try:
            _check_tolerance(self.tolerance, self.violation_budget)
            self.align = Align.coerce(self.align).value
        except ValueError as e:
            raise ConfigError(str(e)) from e

    @classmethod
    def from_json(cls, path: str) -> 'ImageDiffConfig':
        """Load configuration from JSON file"""
        try:
            with open(path, 'r') as f:
                data = json.load(f)
            return cls(**data)
        except ConfigError:
            raise
        except Exception as e:
            raise ConfigError(f"Failed to load config from {path}: {e}") from e

    def to_json(self, path: str):
        """Save configuration to JSON file"""
        with open(path, 'w') as f:
            json.dump(asdict(self), f, indent=2)


def configure_logging(verbose: bool = False):
    """Install the package log format on the root logger"""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)
    logging.getLogger().setLevel(logging.DEBUG if verbose else logging.INFO)


def _check_tolerance(tolerance, violation_budget):
    if tolerance is not None:
        # nan is rejected, inf admits every difference
        if (isinstance(tolerance, bool) or not isinstance(tolerance, numbers.Real)
                or math.isnan(tolerance) or tolerance < 0):
            raise ValueError(f"tolerance must be a non-negative number, got {tolerance!r}")
    if violation_budget is not None:
        if (isinstance(violation_budget, bool) or not isinstance(violation_budget, numbers.Integral)
                or violation_budget < 0):
            raise ValueError(f"violation_budget must be a non-negative integer, got {violation_budget!r}")


def equal_dimensions(a: ImageData, b: ImageData) -> bool:
    return a.width == b.width and a.height == b.height


def equal_image_data(a: ImageData, b: ImageData, tolerance: Optional[float] = DEFAULT_TOLERANCE,
                     violation_budget: Optional[int] = None) -> bool:
    """
    Compare two buffers byte by byte.

    A byte whose absolute difference exceeds tolerance is a violation. Without
    a budget any violation fails the comparison; with one, the comparison fails
    once the violation count exceeds it. Alpha is compared like every other
    channel.

    Args:
        a, b: Buffers to compare
        tolerance: Allowed absolute difference per channel (None means 0)
        violation_budget: Number of violations tolerated, or None

    Returns:
        True when the buffers are equal under the given tolerance
    """
    _check_tolerance(tolerance, violation_budget)
    tolerance = tolerance or 0

    if not equal_dimensions(a, b):
        return False

    delta = np.abs(a.data.astype(np.int16) - b.data.astype(np.int16))
    violations = int(np.count_nonzero(delta > tolerance))
    if violations == 0:
        return True

    if not violation_budget or violations > violation_budget:
        logger.debug(f"Diff {int(delta.max())}, {violations} bytes over tolerance {tolerance}")
        return False
    return True


def _offsets(image: ImageData, width: int, height: int, align: Align) -> Tuple[int, int]:
    """Row and column offset of image on a width x height canvas"""
    if align is Align.TOP:
        return 0, 0
    return (height - image.height) // 2, (width - image.width) // 2


def _diff_equal(a: ImageData, b: ImageData) -> ImageData:
    pa = a.pixels.astype(np.int16)
    pb = b.pixels.astype(np.int16)
    out = np.empty((a.height, a.width, CHANNELS), dtype=np.uint8)
    out[..., :3] = np.abs(pa[..., :3] - pb[..., :3])
    # Opaque where alpha matches, darker as it diverges
    out[..., 3] = OPAQUE - np.abs(pa[..., 3] - pb[..., 3])
    return ImageData(a.width, a.height, out)


def _diff_unequal(a: ImageData, b: ImageData, align: Align) -> ImageData:
    height = max(a.height, b.height)
    width = max(a.width, b.width)
    canvas = np.zeros((height, width, CHANNELS), dtype=np.int16)
    canvas[..., 3] = OPAQUE

    # Add first image
    row, column = _offsets(a, width, height, align)
    canvas[row:row + a.height, column:column + a.width, :3] = a.pixels[..., :3]

    # Subtract second image
    row, column = _offsets(b, width, height, align)
    region = canvas[row:row + b.height, column:column + b.width, :3]
    region[...] = np.abs(region - b.pixels[..., :3].astype(np.int16))

    return ImageData(width, height, canvas.astype(np.uint8))


def diff_image_data(a: ImageData, b: ImageData, align: Union[Align, str, None] = Align.CENTER) -> ImageData:
    """
    Build a buffer visualising the difference between a and b.

    Equal sizes are subtracted channel by channel. Unequal sizes are placed on
    a canvas of the larger width and height (top-left or centred) and b is
    subtracted from a where they overlap. The result is always a new buffer.
    """
    align = Align.coerce(align)
    if equal_dimensions(a, b):
        return _diff_equal(a, b)
    return _diff_unequal(a, b, align)
