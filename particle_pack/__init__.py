"""
Particle pack generation.
Builds Bedrock resource and behavior packs from animated GIFs, with an
identicon pack icon derived from the pack name.
"""

from .pack import (
    PackConfig,
    DEFAULT_PACK_CONFIG,
    PackResult,
    PackLayout,
    digest_for_name,
    render_pack_icon,
    build_manifest,
    build_particle,
    init_commands,
    loop_commands,
    extract_frames,
    build_pack,
)

__all__ = [
    "PackConfig",
    "DEFAULT_PACK_CONFIG",
    "PackResult",
    "PackLayout",
    "digest_for_name",
    "render_pack_icon",
    "build_manifest",
    "build_particle",
    "init_commands",
    "loop_commands",
    "extract_frames",
    "build_pack",
]
