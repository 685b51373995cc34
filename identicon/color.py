"""
Color synthesis for identicons.
Turns the tail of a digest into a small HSL-derived RGB palette.
"""

import math
from typing import List, Sequence, Tuple

RGBColor = Tuple[int, int, int]


def hue_from_segment(segment: Sequence[int], segment_len: int = 7) -> float:
    """
    Normalize a color segment of the digest into a hue in [0, 1).

    Only the first ``segment_len - 1`` bytes are read, big-endian. The last
    byte of the segment never influences the hue.

    Returns 0.0 when the segment has the wrong length.
    """
    if len(segment) != segment_len:
        return 0.0
    value = int.from_bytes(bytes(segment[:-1]), "big")
    return value / float(1 << (8 * (segment_len - 1)))


def _to_channel(component: float) -> int:
    # round half away from zero, components are never negative
    return max(0, min(255, int(math.floor(component * 255 + 0.5))))


def hsl_to_rgb(hue: float, saturation: float, lightness: float) -> RGBColor:
    """
    Convert an HSL color to 8-bit sRGB.

    Args:
        hue: Hue as a fraction of a full turn, in [0, 1)
        saturation: Saturation in [0, 1]
        lightness: Lightness in [0, 1]

    Returns:
        (r, g, b) tuple with channels clamped to [0, 255]
    """
    chroma = (1 - abs(2 * lightness - 1)) * saturation
    sector = (hue * 360) / 60
    x = chroma * (1 - abs(sector % 2 - 1))

    if sector < 1:
        rgb = (chroma, x, 0.0)
    elif sector < 2:
        rgb = (x, chroma, 0.0)
    elif sector < 3:
        rgb = (0.0, chroma, x)
    elif sector < 4:
        rgb = (0.0, x, chroma)
    elif sector < 5:
        rgb = (x, 0.0, chroma)
    else:
        rgb = (chroma, 0.0, x)

    m = lightness - chroma / 2
    r, g, b = rgb
    return _to_channel(r + m), _to_channel(g + m), _to_channel(b + m)


def synthesize_palette(
    digest: Sequence[int],
    palette_size: int = 2,
    segment_len: int = 7,
    saturation: float = 0.5,
    lightness_base: float = 0.3,
    lightness_step: float = 0.5,
) -> List[RGBColor]:
    """
    Build the palette from non-overlapping segments read backwards from the
    end of the digest. Entry ``i`` gets lightness ``i * lightness_step +
    lightness_base``.
    """
    palette: List[RGBColor] = []
    for index in range(palette_size):
        end = len(digest) - index * segment_len
        segment = digest[end - segment_len:end]
        hue = hue_from_segment(segment, segment_len)
        lightness = index * lightness_step + lightness_base
        palette.append(hsl_to_rgb(hue, saturation, lightness))
    return palette
