"""Unit tests for the particle pack builder."""

import json
from pathlib import Path
from typing import List

import pytest
from PIL import Image

from identicon import generate_identicon
from particle_pack.pack import (
    DEFAULT_PACK_CONFIG,
    PackConfig,
    PackLayout,
    build_manifest,
    build_pack,
    build_particle,
    digest_for_name,
    extract_frames,
    init_commands,
    loop_commands,
    render_pack_icon,
    validate_name,
)


def create_test_gif(path: Path, colors: List[str]) -> Path:
    """Write an animated GIF with one solid frame per color."""
    frames = [Image.new("RGB", (8, 8), color) for color in colors]
    first_frame, *additional_frames = frames
    first_frame.save(
        path,
        format="GIF",
        save_all=True,
        append_images=additional_frames,
        duration=100,
        loop=0,
    )
    return path


class TestPackConfig:
    """Tests for the PackConfig dataclass."""

    def test_default_config_values(self) -> None:
        assert DEFAULT_PACK_CONFIG.width == 2.0
        assert DEFAULT_PACK_CONFIG.height == 1.0
        assert DEFAULT_PACK_CONFIG.face_camera_mode == "lookat_xyz"
        assert DEFAULT_PACK_CONFIG.auto_replay is True
        assert DEFAULT_PACK_CONFIG.icon_size_factor == 128

    def test_config_is_frozen(self) -> None:
        with pytest.raises(AttributeError):
            DEFAULT_PACK_CONFIG.width = 3.0  # type: ignore[misc]

    @pytest.mark.parametrize("width, height", [(-3.0, 1.0), (2.0, 0.0)])
    def test_non_positive_particle_size_raises(self, width: float, height: float) -> None:
        with pytest.raises(ValueError, match="must be positive"):
            PackConfig(width=width, height=height)

    def test_zero_icon_size_factor_raises(self) -> None:
        with pytest.raises(ValueError, match="Icon size factor"):
            PackConfig(icon_size_factor=0)


class TestDigestForName:
    """Tests for digest_for_name function."""

    def test_hex_encoded_sha3(self) -> None:
        digest = digest_for_name("demo")
        assert len(digest) == 64
        assert all(chr(byte) in "0123456789abcdef" for byte in digest)

    def test_deterministic(self) -> None:
        assert digest_for_name("demo") == digest_for_name("demo")
        assert digest_for_name("demo") != digest_for_name("demo2")


class TestRenderPackIcon:
    """Tests for render_pack_icon function."""

    def test_default_size(self) -> None:
        assert render_pack_icon("demo").size == (640, 640)

    def test_matches_generator(self) -> None:
        icon = render_pack_icon("demo", 2)
        assert icon.tobytes() == generate_identicon(digest_for_name("demo"), 2).tobytes()


class TestBuildManifest:
    """Tests for build_manifest function."""

    def test_structure(self) -> None:
        manifest = build_manifest("demo", "A pack", "resources")
        assert manifest["format_version"] == 1
        assert manifest["header"]["name"] == "demo"
        assert manifest["header"]["description"] == "A pack"
        assert manifest["header"]["version"] == [1, 0, 0]
        assert len(manifest["modules"]) == 1
        assert manifest["modules"][0]["type"] == "resources"

    def test_fresh_uuids(self) -> None:
        first = build_manifest("demo", "A pack", "data")
        second = build_manifest("demo", "A pack", "data")
        assert first["header"]["uuid"] != first["modules"][0]["uuid"]
        assert first["header"]["uuid"] != second["header"]["uuid"]
        assert len(first["header"]["uuid"]) == 36


class TestBuildParticle:
    """Tests for build_particle function."""

    def test_identifier_and_texture(self) -> None:
        particle = build_particle("demo", 4)
        description = particle["particle_effect"]["description"]
        assert particle["format_version"] == "1.10.0"
        assert description["identifier"] == "demo:img_4"
        assert description["basic_render_parameters"]["texture"] == "textures/frames/img_4.png"

    def test_billboard_uses_config(self) -> None:
        config = PackConfig(width=3.5, height=1.5, face_camera_mode="rotate_y")
        components = build_particle("demo", 0, config)["particle_effect"]["components"]
        billboard = components["minecraft:particle_appearance_billboard"]
        assert billboard == {"facing_camera_mode": "rotate_y", "size": [3.5, 1.5]}


class TestCommands:
    """Tests for init_commands and loop_commands functions."""

    def test_init_commands(self) -> None:
        assert init_commands("demo") == [
            "scoreboard objectives remove demo",
            "scoreboard objectives add demo dummy demo",
            "scoreboard players add @p demo 0",
        ]

    def test_loop_commands_with_replay(self) -> None:
        commands = loop_commands("demo", 2)
        assert commands == [
            "execute @a[scores={demo=0}] ~ ~ ~ execute @e[type=armor_stand,name=demo] ~ ~ ~ particle demo:img_0 ~ ~ ~",
            "execute @a[scores={demo=1}] ~ ~ ~ execute @e[type=armor_stand,name=demo] ~ ~ ~ particle demo:img_1 ~ ~ ~",
            "execute @p[scores={demo=..2}] ~ ~ ~ scoreboard players add @s demo 1",
            "execute @p[scores={demo=2}] ~ ~ ~ scoreboard players set demo 0",
        ]

    def test_loop_commands_without_replay(self) -> None:
        commands = loop_commands("demo", 3, auto_replay=False)
        assert len(commands) == 4
        assert commands[-1].endswith("scoreboard players add @s demo 1")


class TestValidateName:
    """Tests for validate_name function."""

    def test_valid_name(self) -> None:
        assert validate_name("bad_apple") == "bad_apple"

    @pytest.mark.parametrize("name", ["", "   ", "two words", "a/b", "x=1"])
    def test_invalid_name_raises(self, name: str) -> None:
        with pytest.raises(ValueError, match="Pack name"):
            validate_name(name)


class TestExtractFrames:
    """Tests for extract_frames function."""

    def test_reads_all_frames(self, tmp_path: Path) -> None:
        gif_path = create_test_gif(tmp_path / "anim.gif", ["red", "green", "blue"])
        frames = extract_frames(gif_path)
        assert len(frames) == 3
        assert all(frame.mode == "RGBA" for frame in frames)
        assert frames[0].size == (8, 8)

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="Input GIF not found"):
            extract_frames(tmp_path / "missing.gif")

    def test_not_an_image_raises(self, tmp_path: Path) -> None:
        bogus = tmp_path / "bogus.gif"
        bogus.write_text("not a gif")
        with pytest.raises(ValueError, match="Unable to decode"):
            extract_frames(bogus)

    def test_static_png_rejected(self, tmp_path: Path) -> None:
        png_path = tmp_path / "still.png"
        Image.new("RGB", (8, 8), "red").save(png_path, format="PNG")
        with pytest.raises(ValueError, match="must be a GIF"):
            extract_frames(png_path)


class TestBuildPack:
    """Tests for build_pack function."""

    def test_writes_pack_tree(self, tmp_path: Path) -> None:
        gif_path = create_test_gif(tmp_path / "anim.gif", ["red", "green"])
        config = PackConfig(icon_size_factor=2)
        result = build_pack(gif_path, "demo", tmp_path / "out", config, progress=False)

        layout = PackLayout(tmp_path / "out" / "demo")
        assert result.root == layout.root
        assert result.frame_count == 2
        for pack in (layout.resource_pack, layout.behavior_pack):
            with Image.open(pack / "pack_icon.png") as icon:
                assert icon.size == (10, 10)
        for index in range(2):
            assert (layout.textures / f"img_{index}.png").is_file()
            particle = json.loads((layout.particles / f"img_{index}.json").read_text())
            assert particle["particle_effect"]["description"]["identifier"] == f"demo:img_{index}"

    def test_manifests_and_functions(self, tmp_path: Path) -> None:
        gif_path = create_test_gif(tmp_path / "anim.gif", ["red", "green", "blue"])
        config = PackConfig(description="Test pack", icon_size_factor=1, auto_replay=False)
        build_pack(gif_path, "demo", tmp_path, config, progress=False)

        layout = PackLayout(tmp_path / "demo")
        resources = json.loads((layout.resource_pack / "manifest.json").read_text())
        data = json.loads((layout.behavior_pack / "manifest.json").read_text())
        assert resources["modules"][0]["type"] == "resources"
        assert data["modules"][0]["type"] == "data"
        assert data["header"]["description"] == "Test pack"

        loop_lines = (layout.functions / "loop.mcfunction").read_text().split("\n")
        assert loop_lines == loop_commands("demo", 3, auto_replay=False)
        init_lines = (layout.functions / "init.mcfunction").read_text().split("\n")
        assert init_lines == init_commands("demo")

    def test_unknown_camera_mode_raises(self, tmp_path: Path) -> None:
        gif_path = create_test_gif(tmp_path / "anim.gif", ["red"])
        with pytest.raises(ValueError, match="face camera mode"):
            build_pack(gif_path, "demo", tmp_path, PackConfig(face_camera_mode="spin"), progress=False)
        assert not (tmp_path / "demo").exists()

    def test_failed_frame_save_is_reported(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
    ) -> None:
        gif_path = create_test_gif(tmp_path / "anim.gif", ["red", "green"])
        original_save = Image.Image.save

        def failing_save(image, fp, *args, **kwargs):
            if Path(fp).name == "img_0.png":
                raise OSError("disk full")
            return original_save(image, fp, *args, **kwargs)

        monkeypatch.setattr(Image.Image, "save", failing_save)
        result = build_pack(gif_path, "demo", tmp_path, PackConfig(icon_size_factor=1), progress=False)

        layout = PackLayout(tmp_path / "demo")
        err = capsys.readouterr().err
        assert "disk full" in err
        assert str(layout.textures / "img_0.png") in err
        assert result.frame_count == 2
        assert not (layout.textures / "img_0.png").exists()
        assert (layout.textures / "img_1.png").is_file()
        assert (layout.particles / "img_0.json").is_file()
        assert (layout.functions / "loop.mcfunction").is_file()
