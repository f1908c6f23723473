"""
Pixel filters producing canonical ImageData.

contrast() stretches or flattens RGB values around mid-grey:
    adjust = ((amount + 100) / 100) ** 2
    v' = ((v / 255 - 0.5) * adjust + 0.5) * 255, clamped to 0..255
Alpha is left untouched and the input buffer is never modified.
"""

import logging
import numbers

import numpy as np

from .core import ImageData

logger = logging.getLogger(__name__)

CONTRAST_MIN = -100
CONTRAST_MAX = 100


def contrast(image: ImageData, amount: float) -> ImageData:
    """Return a contrast-adjusted copy of image; amount is normally -100..100"""
    if isinstance(amount, bool) or not isinstance(amount, numbers.Real):
        raise TypeError(f"Contrast amount must be a number, got {amount!r}")
    if not CONTRAST_MIN <= amount <= CONTRAST_MAX:
        logger.warning(f"Contrast amount {amount} outside [{CONTRAST_MIN}, {CONTRAST_MAX}]")

    adjust = ((amount + 100) / 100) ** 2
    out = image.pixels.copy()
    rgb = out[..., :3].astype(np.float64)
    rgb = ((rgb / 255 - 0.5) * adjust + 0.5) * 255
    # Round half to even like a clamped byte store
    out[..., :3] = np.rint(np.clip(rgb, 0, 255)).astype(np.uint8)
    return ImageData(image.width, image.height, out)
