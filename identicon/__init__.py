"""
Deterministic identicon generation.
Pure core used by the particle pack builder to render pack icons.
"""

from .color import (
    RGBColor,
    hue_from_segment,
    hsl_to_rgb,
    synthesize_palette,
)
from .generator import (
    IdenticonConfig,
    DEFAULT_CONFIG,
    IdenticonError,
    HashTooShort,
    InvalidSize,
    LogicalGrid,
    assign_grid,
    mirror_column,
    rasterize,
    generate_identicon,
)

__all__ = [
    "RGBColor",
    "hue_from_segment",
    "hsl_to_rgb",
    "synthesize_palette",
    "IdenticonConfig",
    "DEFAULT_CONFIG",
    "IdenticonError",
    "HashTooShort",
    "InvalidSize",
    "LogicalGrid",
    "assign_grid",
    "mirror_column",
    "rasterize",
    "generate_identicon",
]
