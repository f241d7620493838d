"""
Tests for the command-line entry point.
"""

import pytest
import subprocess
import sys
import os
import json
import cv2

from coin_segmentation.cli import main, setup_argparse, DEFAULT_IMAGE_PATH
from tests.fixtures.coin_fixtures import create_touching_coins, create_single_coin


class TestArgparse:

    def test_default_image_path(self):
        args = setup_argparse().parse_args([])

        assert args.image_path == DEFAULT_IMAGE_PATH
        assert args.output == "visual"
        assert not args.no_display


class TestSegmentCommand:
    """Tests running the CLI in-process."""

    @pytest.fixture
    def coins_path(self, tmp_path):
        """Create a test image file."""
        image_path = tmp_path / "coins.png"
        cv2.imwrite(str(image_path), create_touching_coins())
        yield str(image_path)

    def test_json_output(self, coins_path, capsys):
        exit_code = main([coins_path, "--output", "json"])

        assert exit_code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["image_dimensions"] == {"width": 300, "height": 180}
        assert output["contour_pipeline"]["external_contour_count"] == 1
        assert output["watershed_pipeline"]["external_contour_count"] == 2

    def test_save_dir_writes_every_stage(self, coins_path, tmp_path):
        out_dir = tmp_path / "stages"

        exit_code = main([coins_path, "--no-display", "--save-dir", str(out_dir)])

        assert exit_code == 0
        files = sorted(os.listdir(out_dir))
        assert len(files) == 15
        assert files[0] == "00_original_image.png"
        assert "13_watershed_final_result.png" in files
        assert files[-1] == "14_final_comparison.png"

    def test_missing_image_returns_error(self, tmp_path, capsys):
        exit_code = main([str(tmp_path / "missing.jpg"), "--no-display"])

        assert exit_code == 1
        assert "Image not found" in capsys.readouterr().err

    def test_undecodable_image_returns_error(self, tmp_path, capsys):
        path = tmp_path / "broken.jpg"
        path.write_text("not an image")

        exit_code = main([str(path), "--no-display"])

        assert exit_code == 1
        assert "Could not load image" in capsys.readouterr().err

    def test_invalid_config_returns_error(self, coins_path, tmp_path, capsys):
        config_path = tmp_path / "bad.yaml"
        config_path.write_text("watershed:\n  preprocess:\n    blur_kernel_size: 4\n")

        exit_code = main([coins_path, "--config", str(config_path), "-o", "json"])

        assert exit_code == 1
        assert "Invalid configuration" in capsys.readouterr().err

    @pytest.mark.parametrize("content", [
        "segmentation: [unclosed\n",
        "- a\n- b\n",
        "contour:\n  preprocess:\n    threshold: high\n",
        "watershed: 5\n",
    ], ids=["malformed_yaml", "list_top_level", "wrong_value_type", "scalar_section"])
    def test_unusable_config_returns_error(self, coins_path, tmp_path, capsys, content):
        config_path = tmp_path / "bad.yaml"
        config_path.write_text(content)

        exit_code = main([coins_path, "--config", str(config_path), "-o", "json"])

        assert exit_code == 1
        captured = capsys.readouterr()
        assert "Invalid configuration" in captured.err
        assert captured.out == ""

    def test_config_file_applied(self, tmp_path, capsys):
        image_path = tmp_path / "coin.png"
        cv2.imwrite(str(image_path), create_single_coin())
        config_path = tmp_path / "config.yaml"
        config_path.write_text("contour:\n  preprocess:\n    threshold: 255\n")

        exit_code = main([str(image_path), "--config", str(config_path), "-o", "json"])

        assert exit_code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["contour_pipeline"]["external_contour_count"] == 0


class TestModuleEntryPoint:
    """Tests for python -m coin_segmentation."""

    def test_module_json_output(self, tmp_path):
        image_path = tmp_path / "coins.png"
        cv2.imwrite(str(image_path), create_touching_coins())

        result = subprocess.run(
            [sys.executable, "-m", "coin_segmentation", str(image_path), "-o", "json"],
            capture_output=True,
            text=True,
            cwd=os.path.dirname(os.path.dirname(__file__)),
        )

        assert result.returncode == 0
        output = json.loads(result.stdout)
        assert "watershed_pipeline" in output

    def test_module_invalid_path_returns_error(self):
        result = subprocess.run(
            [sys.executable, "-m", "coin_segmentation", "nonexistent.png", "-o", "json"],
            capture_output=True,
            text=True,
            cwd=os.path.dirname(os.path.dirname(__file__)),
        )

        assert result.returncode != 0
        assert "Error" in result.stderr
