#!/usr/bin/env python3
"""
Demo script for imagediff
Creates test images and demonstrates equality checks and visual diffs
"""

import numpy as np
from PIL import Image, ImageDraw

from imagediff import ImageDiff, ImageDiffConfig, configure_logging, contrast, to_canonical


def create_test_images():
    """Create sprites that differ in colour, transparency and canvas size"""

    print("Creating test images...")

    # Base: 8x8 checker tiles on a transparent 120x80 sprite, built as a raw buffer
    rows, columns = np.indices((80, 120))
    tiles = ((rows // 8 + columns // 8) % 2).astype(np.uint8)
    pixels = np.zeros((80, 120, 4), dtype=np.uint8)
    pixels[..., 0] = 40 + 160 * tiles
    pixels[..., 1] = 90
    pixels[..., 2] = 200 - 160 * tiles
    pixels[10:70, 10:110, 3] = 255
    pixels[pixels[..., 3] == 0] = 0
    base = {'width': 120, 'height': 80, 'data': pixels}
    print("✓ Created base sprite (120x80 raw buffer, transparent border)")

    # Translucent white badge composited over the sprite
    badge = Image.new('RGBA', (120, 80), (0, 0, 0, 0))
    ImageDraw.Draw(badge).rectangle([80, 10, 109, 29], fill=(255, 255, 255, 96))
    overlaid = Image.alpha_composite(Image.fromarray(pixels), badge)
    print("✓ Created overlaid (30x20 badge at 96 alpha)")

    # Same colours, half the opacity in the top band
    faded_pixels = pixels.copy()
    faded_pixels[10:30, 10:110, 3] = 128
    faded = {'width': 120, 'height': 80, 'data': faded_pixels}
    print("✓ Created faded (alpha-only change)")

    # Sprite padded onto a larger transparent canvas, so the diff has to compose
    padded = Image.new('RGBA', (160, 100), (0, 0, 0, 0))
    padded.paste(Image.fromarray(pixels), (20, 10))
    print("✓ Created padded (160x100)")

    return base, overlaid, faded, padded


def run_demo():
    """Run the imagediff demonstration"""
    print("=" * 60)
    print("imagediff - Demo")
    print("=" * 60)

    configure_logging()
    base, overlaid, faded, padded = create_test_images()
    engine = ImageDiff(ImageDiffConfig(tolerance=2))

    print("\n🔍 Equality")
    print(f"   base vs base:                   {engine.equal(base, base)}")
    print(f"   base vs overlaid:               {engine.equal(base, overlaid)}")
    print(f"   base vs overlaid (tol 100):     {engine.equal(base, overlaid, tolerance=100)}")
    print(f"   base vs faded:                  {engine.equal(base, faded)}")
    print(f"   base vs faded (2000 ok):        {engine.equal(base, faded, violation_budget=2000)}")
    print(f"   base vs padded:                 {engine.equal(base, padded)}")

    print("\n🖼  Diffs")
    for name, other, align in (('diff_overlaid.png', overlaid, None),
                               ('diff_faded.png', faded, None),
                               ('diff_padded_center.png', padded, 'center'),
                               ('diff_padded_top.png', padded, 'top')):
        result = engine.diff(base, other, align=align)
        result.to_pil().save(name)
        print(f"   ✓ {name} ({result.width}x{result.height})")

    print("\n🎚  Contrast")
    punchy = contrast(to_canonical(base), 40)
    punchy.to_pil().save('contrast_40.png')
    print(f"   ✓ contrast_40.png, equal to base: {engine.equal(punchy, base)}")


if __name__ == '__main__':
    run_demo()
