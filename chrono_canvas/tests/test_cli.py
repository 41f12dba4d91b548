"""
Tests for the chrono-canvas-demo command.
"""

import json
from unittest.mock import patch

from click.testing import CliRunner

from chrono_canvas.cli import build_demo_canvas, main
from chrono_canvas.timeline import evaluate


@patch("chrono_canvas.cli.configure_logging")
class TestDemoCommand:
    """Running the demo in zine mode."""

    def test_zine_mode_prints_frames(self, _configure_logging):
        runner = CliRunner()
        result = runner.invoke(main, ["--mode", "zine", "--step", "500"])
        assert result.exit_code == 0, result.output
        lines = result.output.strip().splitlines()
        assert lines[0].startswith("Timeline duration: 60.0s")
        # 6000px of scroll in 500px steps, both ends included
        assert len(lines) == 1 + 13

    def test_zine_mode_json(self, _configure_logging):
        runner = CliRunner()
        result = runner.invoke(main, ["-m", "zine", "--step", "100", "--min-duration", "5", "--json"])
        assert result.exit_code == 0, result.output
        frames = [json.loads(line) for line in result.output.strip().splitlines()[1:]]
        assert frames[0]["position"] == 0.0
        assert frames[0]["elements"]["photo"]["visible"] is False
        assert frames[-1]["elements"]["sticker"]["visible"] is True

    def test_rejects_unknown_mode(self, _configure_logging):
        result = CliRunner().invoke(main, ["--mode", "rewind"])
        assert result.exit_code != 0


class TestDemoCanvas:
    """The sample canvas used by the demo."""

    def test_sticker_persists_after_exit(self):
        sticker = {e.id: e for e in build_demo_canvas()}["sticker"]
        assert evaluate(sticker, 20.0).visible is True

    def test_photo_hidden_after_exit(self):
        photo = {e.id: e for e in build_demo_canvas()}["photo"]
        assert evaluate(photo, 9.0).visible is False
