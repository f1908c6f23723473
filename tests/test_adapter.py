#!/usr/bin/env python3
"""
Unit tests for source classification and the surface adapter
"""

import unittest
from types import SimpleNamespace

import numpy as np
from PIL import Image

from imagediff.adapter import (
    SourceKind,
    SurfaceAdapter,
    check_type,
    classify,
    is_context,
    is_image_like,
    is_picture,
    is_pixel_buffer,
    is_surface,
)
from imagediff.core import ImageData, NotAnImageError
from imagediff.surface import PillowSurface, PillowSurfaceProvider


class CountingProvider(PillowSurfaceProvider):
    """Provider that records every surface it creates"""

    def __init__(self):
        self.created = []

    def create_surface(self, width, height):
        self.created.append((width, height))
        return super().create_surface(width, height)


class TestClassification(unittest.TestCase):
    """Test source kind classification"""

    def test_picture(self):
        picture = Image.new('RGB', (2, 2))
        self.assertEqual(classify(picture), SourceKind.PICTURE)
        self.assertTrue(is_picture(picture))

    def test_surface(self):
        surface = PillowSurface(2, 2)
        self.assertEqual(classify(surface), SourceKind.SURFACE)
        self.assertTrue(is_surface(surface))
        self.assertFalse(is_pixel_buffer(surface))

    def test_context(self):
        context = PillowSurface(2, 2).get_context()
        self.assertEqual(classify(context), SourceKind.CONTEXT)
        self.assertTrue(is_context(context))
        self.assertFalse(is_surface(context))

    def test_raw_buffers(self):
        """Width, height and data are enough, whatever the container"""
        self.assertEqual(classify({'width': 1, 'height': 1, 'data': [0, 0, 0, 255]}), SourceKind.BUFFER)
        self.assertEqual(classify(SimpleNamespace(width=1, height=1, data=b'\x00\x00\x00\xff')), SourceKind.BUFFER)
        self.assertEqual(classify(ImageData.blank(2, 3)), SourceKind.BUFFER)
        self.assertEqual(classify({'width': 2, 'height': 1, 'data': np.zeros((1, 2, 4), dtype=np.uint8)}),
                         SourceKind.BUFFER)

    def test_not_images(self):
        for value in (None, 42, "image", [0, 0, 0, 255], {'width': 1, 'height': 1},
                      {'width': 1, 'height': 1, 'data': [0, 0, 0]},
                      {'width': True, 'height': 1, 'data': [0, 0, 0, 255]},
                      {'width': -1, 'height': -1, 'data': [0, 0, 0, 255]},
                      {'width': 1, 'height': 1, 'data': "abcd"},
                      {'width': 1, 'height': 1, 'data': [0, 0, 0, 256]},
                      {'width': 1, 'height': 1, 'data': np.array([0, 0, 0, 256], dtype=np.int32)},
                      {'width': 1, 'height': 1, 'data': [0.0, 0.0, 0.0, 255.0]}):
            self.assertIsNone(classify(value), value)
            self.assertFalse(is_image_like(value))

    def test_wide_integer_buffer(self):
        raw = {'width': 1, 'height': 1, 'data': np.array([0, 0, 0, 255], dtype=np.int64)}
        self.assertEqual(classify(raw), SourceKind.BUFFER)

    def test_check_type(self):
        check_type(Image.new('RGB', (1, 1)), ImageData.blank(1, 1))
        with self.assertRaises(NotAnImageError) as ctx:
            check_type(ImageData.blank(1, 1), "nope")
        self.assertIn("argument 1", str(ctx.exception))
        self.assertEqual(ctx.exception.value, "nope")
        self.assertIsInstance(ctx.exception, TypeError)


class TestSurfaceAdapter(unittest.TestCase):
    """Test normalisation to ImageData"""

    def setUp(self):
        self.provider = CountingProvider()
        self.adapter = SurfaceAdapter(self.provider)

    def test_picture(self):
        picture = Image.new('RGBA', (2, 1), (10, 20, 30, 255))
        image = self.adapter.normalize(picture)
        self.assertEqual(image.size, (2, 1))
        self.assertEqual(image.data.tolist(), [10, 20, 30, 255] * 2)

    def test_picture_without_alpha(self):
        image = self.adapter.normalize(Image.new('RGB', (1, 1), (1, 2, 3)))
        self.assertEqual(image.data.tolist(), [1, 2, 3, 255])

    def test_empty_picture(self):
        image = self.adapter.normalize(Image.new('RGBA', (0, 0)))
        self.assertEqual(image.size, (0, 0))

    def test_scratch_surface_reused_and_cleared(self):
        red = Image.new('RGBA', (2, 2), (255, 0, 0, 255))
        clear = Image.new('RGBA', (2, 2), (0, 0, 0, 0))
        self.adapter.normalize(red)
        image = self.adapter.normalize(clear)
        self.assertFalse(image.data.any())
        self.assertEqual(self.provider.created, [(2, 2)])

    def test_scratch_surface_resized(self):
        self.adapter.normalize(Image.new('RGBA', (2, 2)))
        image = self.adapter.normalize(Image.new('RGBA', (3, 1), (0, 0, 9, 255)))
        self.assertEqual(image.size, (3, 1))
        self.assertEqual(self.provider.created, [(2, 2), (3, 1)])

    def test_surface_and_context(self):
        buffer = ImageData(2, 1, [1, 2, 3, 4, 5, 6, 7, 8])
        surface = PillowSurface(2, 1)
        surface.put_pixels(buffer, 0, 0)
        self.assertEqual(self.adapter.normalize(surface).data.tolist(), buffer.data.tolist())
        self.assertEqual(self.adapter.normalize(surface.get_context()).data.tolist(), buffer.data.tolist())
        # Surfaces are read directly, never through the scratch surface
        self.assertEqual(self.provider.created, [])

    def test_buffer_copied(self):
        raw = {'width': 1, 'height': 1, 'data': bytearray([0, 0, 0, 255])}
        image = self.adapter.normalize(raw)
        image.data[0] = 77
        self.assertEqual(raw['data'][0], 0)

    def test_image_data_copied(self):
        original = ImageData(1, 1, [4, 3, 2, 1])
        image = self.adapter.normalize(original)
        self.assertIsNot(image, original)
        image.data[0] = 0
        self.assertEqual(original.data[0], 4)

    def test_image_data_passthrough(self):
        original = ImageData(1, 1, [4, 3, 2, 1])
        self.assertIs(self.adapter.normalize(original, copy=False), original)

    def test_not_an_image(self):
        with self.assertRaises(NotAnImageError):
            self.adapter.normalize(object())

    def test_to_surface(self):
        picture = Image.new('RGBA', (3, 2), (5, 6, 7, 255))
        surface = self.adapter.to_surface(picture)
        self.assertEqual((surface.width, surface.height), (3, 2))
        self.assertEqual(surface.get_pixels(2, 1, 1, 1).data.tolist(), [5, 6, 7, 255])


class TestPillowSurface(unittest.TestCase):
    """Test the default drawing surface"""

    def test_put_pixels_replaces(self):
        surface = PillowSurface(2, 2)
        surface.draw_picture(Image.new('RGBA', (2, 2), (255, 255, 255, 255)), 0, 0)
        surface.put_pixels(ImageData(1, 1, [0, 0, 0, 0]), 1, 1)
        pixels = surface.get_pixels(0, 0, 2, 2).pixels
        self.assertEqual(pixels[1, 1].tolist(), [0, 0, 0, 0])
        self.assertEqual(pixels[0, 0].tolist(), [255, 255, 255, 255])

    def test_clear(self):
        surface = PillowSurface(2, 2)
        surface.draw_picture(Image.new('RGBA', (2, 2), (9, 9, 9, 255)), 0, 0)
        surface.clear(0, 0, 1, 2)
        pixels = surface.get_pixels(0, 0, 2, 2).pixels
        self.assertFalse(pixels[:, 0].any())
        self.assertEqual(pixels[0, 1].tolist(), [9, 9, 9, 255])


if __name__ == '__main__':
    unittest.main(verbosity=2)
