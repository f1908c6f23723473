"""imagediff package
Exporting main classes and functions for external use.

Example:
    from imagediff import ImageDiff, ImageDiffConfig, equal, diff
"""
from .core import (
    Align,
    ConfigError,
    ImageData,
    ImageDiffConfig,
    ImageMismatchError,
    NotAnImageError,
    VERSION,
    configure_logging,
    diff_image_data,
    equal_image_data,
)
from .surface import PillowSurface, PillowSurfaceProvider, Surface, SurfaceContext, SurfaceProvider
from .adapter import SourceKind, SurfaceAdapter, check_type, classify
from .api import ImageDiff, assert_equal, diff, equal, is_image_like, to_canonical, to_surface
from .filters import contrast

__all__ = [
    'Align',
    'ConfigError',
    'ImageData',
    'ImageDiff',
    'ImageDiffConfig',
    'ImageMismatchError',
    'NotAnImageError',
    'PillowSurface',
    'PillowSurfaceProvider',
    'SourceKind',
    'Surface',
    'SurfaceAdapter',
    'SurfaceContext',
    'SurfaceProvider',
    'VERSION',
    'assert_equal',
    'check_type',
    'classify',
    'configure_logging',
    'contrast',
    'diff',
    'diff_image_data',
    'equal',
    'equal_image_data',
    'is_image_like',
    'to_canonical',
    'to_surface',
]
