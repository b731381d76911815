"""Tests for the output writer."""

import io

import pytest
from PIL import Image

from braille_maker.core.writer import (
    render_lines_to_image,
    save_output,
    write_text,
)

LINES = ["⣿⠁", "⠀⣀"]


class TestWriteText:
    def test_each_line_terminated(self):
        stream = io.StringIO()
        write_text(LINES, stream)
        assert stream.getvalue() == "⣿⠁\n⠀⣀\n"

    def test_no_lines_writes_nothing(self):
        stream = io.StringIO()
        write_text([], stream)
        assert stream.getvalue() == ""


class TestRenderLinesToImage:
    def test_produces_image(self):
        img = render_lines_to_image(LINES)
        assert isinstance(img, Image.Image)
        assert img.mode == "RGB"
        # 2 chars of int(14 * 0.6) px, 2 lines of 16 px
        assert img.size == (16, 32)

    def test_empty_lines(self):
        assert render_lines_to_image([]).size == (1, 1)


class TestSaveOutput:
    def test_save_text(self, tmp_path):
        output = tmp_path / "out.txt"
        save_output(LINES, output)
        assert output.read_text(encoding="utf-8") == "⣿⠁\n⠀⣀\n"

    def test_save_png(self, tmp_path):
        output = tmp_path / "out.png"
        save_output(LINES, output, font_size=12)
        img = Image.open(str(output))
        assert img.format == "PNG"

    def test_unsupported_format(self, tmp_path):
        with pytest.raises(ValueError, match="Unsupported"):
            save_output(LINES, tmp_path / "out.pdf")
