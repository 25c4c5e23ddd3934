"""Unit tests for the command-line interface and runtime setup.

The Taichi runtime is initialized once per test session, so ``main`` is
only exercised in a subprocess; ``render_scene`` runs in-process.
"""

import argparse
import os
import subprocess
import sys
from pathlib import Path

import pytest

from sampletracer.cli import SCENE_NAMES, build_parser, config_overrides
from sampletracer.runtime import DEFAULT_NUM_THREADS, init_runtime


class TestParser:
    """Tests for argument parsing."""

    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.scene == "three-spheres"
        assert args.width is None
        assert args.samples is None
        assert args.max_depth is None
        assert args.threads == DEFAULT_NUM_THREADS
        assert args.seed == 0
        assert args.output == "-"
        assert not args.binary
        assert not args.quiet
        assert args.log_level == "INFO"

    def test_all_options(self):
        args = build_parser().parse_args(
            [
                "--scene",
                "random-spheres",
                "--width",
                "64",
                "--samples",
                "8",
                "--max-depth",
                "4",
                "--threads",
                "2",
                "--seed",
                "9",
                "--output",
                "out.png",
                "--binary",
                "--quiet",
                "--log-level",
                "DEBUG",
            ]
        )
        assert args.scene == "random-spheres"
        assert (args.width, args.samples, args.max_depth) == (64, 8, 4)
        assert args.threads == 2
        assert args.seed == 9
        assert args.output == "out.png"
        assert args.binary
        assert args.quiet
        assert args.log_level == "DEBUG"

    def test_unknown_scene_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--scene", "cornell"])

    def test_scene_names(self):
        assert set(SCENE_NAMES) == {"three-spheres", "random-spheres"}


class TestConfigOverrides:
    """Tests for mapping arguments onto CameraConfig fields."""

    def test_no_overrides(self):
        assert config_overrides(build_parser().parse_args([])) == {}

    def test_overrides(self):
        args = build_parser().parse_args(["--width", "32", "--samples", "5", "--max-depth", "0"])
        assert config_overrides(args) == {
            "image_width": 32,
            "samples_per_pixel": 5,
            "max_depth": 0,
        }

    def test_overrides_apply_to_config(self):
        from sampletracer.camera.config import CameraConfig

        args = argparse.Namespace(width=20, samples=None, max_depth=3)
        config = CameraConfig().with_overrides(**config_overrides(args))
        assert config.image_width == 20
        assert config.samples_per_pixel == 10
        assert config.max_depth == 3


class TestRuntime:
    """Tests for runtime initialization arguments."""

    def test_rejects_zero_threads(self):
        with pytest.raises(ValueError, match="num_threads"):
            init_runtime(num_threads=0)


def _run_cli(*argv):
    """Run ``python -m sampletracer`` in a fresh interpreter."""
    src = Path(__file__).resolve().parents[1] / "src"
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(src), env.get("PYTHONPATH")]))
    return subprocess.run(
        [sys.executable, "-m", "sampletracer", *argv],
        capture_output=True,
        env=env,
        timeout=600,
    )


class TestMain:
    """Tests running the CLI end to end in a subprocess."""

    def test_stdout_holds_only_the_image(self):
        result = _run_cli("--width", "16", "--samples", "2", "--max-depth", "3", "--threads", "2")
        assert result.returncode == 0, result.stderr.decode(errors="replace")

        lines = result.stdout.decode("ascii").splitlines()
        assert lines[0] == "P3"
        width, height = map(int, lines[1].split())
        assert (width, height) == (16, 9)
        assert lines[2] == "255"
        pixels = lines[3:]
        assert len(pixels) == width * height
        for line in pixels:
            values = [int(v) for v in line.split()]
            assert len(values) == 3
            assert all(0 <= v <= 255 for v in values)

    def test_binary_stdout(self):
        result = _run_cli(
            "--width", "4", "--samples", "1", "--max-depth", "2", "--threads", "1", "--binary"
        )
        assert result.returncode == 0, result.stderr.decode(errors="replace")
        header = b"P6\n4 2\n255\n"
        assert result.stdout.startswith(header)
        assert len(result.stdout) == len(header) + 4 * 2 * 3

    def test_invalid_override_exits_with_error(self):
        result = _run_cli("--width", "0", "--quiet")
        assert result.returncode == 1
        assert result.stdout == b""
        assert b"image_width" in result.stderr


class TestRenderScene:
    """Tests rendering a preset to a file with the session runtime."""

    def _args(self, output, binary=False):
        return build_parser().parse_args(
            [
                "--width",
                "4",
                "--samples",
                "1",
                "--max-depth",
                "2",
                "--output",
                str(output),
                "--quiet",
            ]
            + (["--binary"] if binary else [])
        )

    def test_text_ppm_file(self, tmp_path):
        from sampletracer.cli import render_scene

        path = tmp_path / "scene.ppm"
        image = render_scene(self._args(path))
        assert image.shape == (2, 4, 3)
        lines = path.read_text().splitlines()
        assert lines[:3] == ["P3", "4 2", "255"]
        assert len(lines) == 3 + 8

    def test_binary_flag_reaches_file_output(self, tmp_path):
        from sampletracer.cli import render_scene

        path = tmp_path / "scene.ppm"
        render_scene(self._args(path, binary=True))
        assert path.read_bytes().startswith(b"P6\n4 2\n255\n")
