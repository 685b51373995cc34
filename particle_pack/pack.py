"""
Particle pack builder.
Converts an animated GIF into a Bedrock resource pack plus behavior pack that
replays the animation as one particle per frame.
"""

import hashlib
import json
import sys
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from PIL import Image, ImageSequence, UnidentifiedImageError
from tqdm import tqdm

from identicon import generate_identicon

FACE_CAMERA_MODES = frozenset({
    "rotate_xyz",
    "rotate_y",
    "lookat_xyz",
    "lookat_y",
    "direction_x",
    "direction_y",
    "direction_z",
})
PACK_VERSION = [1, 0, 0]


@dataclass(frozen=True)
class PackConfig:
    """Options for a generated pack."""

    description: str = "Generated by particle-pack."
    width: float = 2.0
    height: float = 1.0
    face_camera_mode: str = "lookat_xyz"
    auto_replay: bool = True
    icon_size_factor: int = 128

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Particle width and height must be positive. Got: {self.width}x{self.height}"
            )
        if self.icon_size_factor < 1:
            raise ValueError(f"Icon size factor must be at least 1. Got: {self.icon_size_factor}")


DEFAULT_PACK_CONFIG = PackConfig()


@dataclass(frozen=True)
class PackResult:
    root: Path
    frame_count: int


@dataclass(frozen=True)
class PackLayout:
    """Folder tree of one generated pack."""

    root: Path

    @property
    def behavior_pack(self) -> Path:
        return self.root / "behavior_pack"

    @property
    def resource_pack(self) -> Path:
        return self.root / "resource_pack"

    @property
    def functions(self) -> Path:
        return self.behavior_pack / "functions"

    @property
    def textures(self) -> Path:
        return self.resource_pack / "textures" / "frames"

    @property
    def particles(self) -> Path:
        return self.resource_pack / "particles" / "frames"

    def create(self) -> None:
        for folder in (self.functions, self.textures, self.particles):
            folder.mkdir(parents=True, exist_ok=True)


def digest_for_name(name: str) -> bytes:
    """SHA3-256 of the name as lowercase hex, encoded to 64 ASCII bytes."""
    return hashlib.sha3_256(name.encode("utf-8")).hexdigest().encode("ascii")


def render_pack_icon(name: str, size_factor: int = DEFAULT_PACK_CONFIG.icon_size_factor) -> Image.Image:
    return generate_identicon(digest_for_name(name), size_factor)


def build_manifest(name: str, description: str, module_type: str) -> Dict[str, Any]:
    """Manifest document for a pack with a single module of ``module_type``."""
    return {
        "format_version": 1,
        "header": {
            "description": description,
            "name": name,
            "uuid": str(uuid.uuid4()),
            "version": list(PACK_VERSION),
        },
        "modules": [
            {
                "description": description,
                "type": module_type,
                "uuid": str(uuid.uuid4()),
                "version": list(PACK_VERSION),
            }
        ],
    }


def build_particle(name: str, index: int, config: PackConfig = DEFAULT_PACK_CONFIG) -> Dict[str, Any]:
    """Particle effect that shows frame ``index`` once as a camera-facing billboard."""
    return {
        "format_version": "1.10.0",
        "particle_effect": {
            "description": {
                "identifier": f"{name}:img_{index}",
                "basic_render_parameters": {
                    "material": "particles_alpha",
                    "texture": f"textures/frames/img_{index}.png",
                },
            },
            "components": {
                "minecraft:emitter_rate_instant": {
                    "num_particles": 1,
                },
                "minecraft:emitter_lifetime_once": {
                    "active_time": 0.05,
                },
                "minecraft:emitter_shape_point": {
                    "offset": [0, 0, 0],
                    "direction": [1, 0, 0],
                },
                "minecraft:particle_lifetime_expression": {
                    "max_lifetime": 0.5,
                },
                "minecraft:particle_appearance_billboard": {
                    "facing_camera_mode": config.face_camera_mode,
                    "size": [config.width, config.height],
                },
            },
        },
    }


def init_commands(name: str) -> List[str]:
    return [
        f"scoreboard objectives remove {name}",
        f"scoreboard objectives add {name} dummy {name}",
        f"scoreboard players add @p {name} 0",
    ]


def loop_commands(name: str, frame_count: int, auto_replay: bool = True) -> List[str]:
    """
    Commands run every tick: emit the particle for the current score, then
    advance the score. With ``auto_replay`` the score resets after the last frame.
    """
    commands = [
        f"execute @a[scores={{{name}={index}}}] ~ ~ ~ execute "
        f"@e[type=armor_stand,name={name}] ~ ~ ~ particle {name}:img_{index} ~ ~ ~"
        for index in range(frame_count)
    ]
    commands.append(
        f"execute @p[scores={{{name}=..{frame_count}}}] ~ ~ ~ scoreboard players add @s {name} 1"
    )
    if auto_replay:
        commands.append(
            f"execute @p[scores={{{name}={frame_count}}}] ~ ~ ~ scoreboard players set {name} 0"
        )
    return commands


def extract_frames(gif_path: Path) -> List[Image.Image]:
    """
    Load every frame of a GIF as RGBA.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a readable GIF
    """
    if not gif_path.is_file():
        raise FileNotFoundError(f"Input GIF not found: {gif_path}")
    try:
        with Image.open(gif_path) as animation:
            if animation.format != "GIF":
                raise ValueError(f"Input must be a GIF. Got: {animation.format} ({gif_path})")
            return [frame.convert("RGBA") for frame in ImageSequence.Iterator(animation)]
    except UnidentifiedImageError as exc:
        raise ValueError(f"Unable to decode image: {gif_path}") from exc


def validate_name(name: str) -> str:
    if not name or not name.strip():
        raise ValueError("Pack name must not be empty.")
    if any(char in name for char in '/\\{}=,"') or any(char.isspace() for char in name):
        raise ValueError(
            f"Pack name may not contain whitespace, path separators or selector characters. Got: {name}"
        )
    return name


def write_json(path: Path, document: Dict[str, Any]) -> None:
    path.write_text(json.dumps(document, separators=(",", ":")), encoding="utf-8")


def build_pack(
    gif_path: Path,
    name: str,
    output_dir: Path = Path("."),
    config: PackConfig = DEFAULT_PACK_CONFIG,
    progress: bool = True,
) -> PackResult:
    """
    Write the resource and behavior packs for ``gif_path`` to ``output_dir / name``.

    Args:
        gif_path: Animated GIF to convert
        name: Pack name, also used as scoreboard objective and particle namespace
        output_dir: Folder that receives the pack folder
        config: Pack options
        progress: Show a progress bar while converting frames

    Returns:
        The pack root and the number of frames written
    """
    validate_name(name)
    if config.face_camera_mode not in FACE_CAMERA_MODES:
        raise ValueError(
            f"Unknown face camera mode: {config.face_camera_mode}. "
            f"Use one of {', '.join(sorted(FACE_CAMERA_MODES))}."
        )
    frames = extract_frames(gif_path)

    layout = PackLayout(output_dir / name)
    layout.create()

    icon = render_pack_icon(name, config.icon_size_factor)
    icon.save(layout.resource_pack / "pack_icon.png", format="PNG")
    icon.save(layout.behavior_pack / "pack_icon.png", format="PNG")

    write_json(layout.resource_pack / "manifest.json", build_manifest(name, config.description, "resources"))
    write_json(layout.behavior_pack / "manifest.json", build_manifest(name, config.description, "data"))

    for index, frame in enumerate(tqdm(frames, desc="Converting frames", unit="frame", disable=not progress)):
        frame_path = layout.textures / f"img_{index}.png"
        try:
            frame.save(frame_path, format="PNG")
        except OSError as exc:
            print(f"{exc} {frame_path}", file=sys.stderr)
        write_json(layout.particles / f"img_{index}.json", build_particle(name, index, config))

    (layout.functions / "loop.mcfunction").write_text(
        "\n".join(loop_commands(name, len(frames), config.auto_replay)), encoding="utf-8"
    )
    (layout.functions / "init.mcfunction").write_text(
        "\n".join(init_commands(name)), encoding="utf-8"
    )
    return PackResult(root=layout.root, frame_count=len(frames))
