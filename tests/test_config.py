"""Tests for config module."""

import dataclasses

import pytest
from ascii_sketch.config import DEFAULT_WIDTH, ConversionConfig, DetailLevel
from ascii_sketch.errors import AsciiSketchError, InvalidDimensionError


class TestDetailLevel:
    @pytest.mark.parametrize("text", ["smooth", "SMOOTH", " Smooth "])
    def test_parse_case_insensitive(self, text):
        assert DetailLevel.parse(text) is DetailLevel.SMOOTH

    def test_parse_passthrough(self):
        assert DetailLevel.parse(DetailLevel.DETAILED) is DetailLevel.DETAILED

    def test_parse_unknown(self):
        with pytest.raises(ValueError):
            DetailLevel.parse("ultra")


class TestConversionConfig:
    def test_defaults(self):
        config = ConversionConfig()
        assert config.width == DEFAULT_WIDTH
        assert config.invert is False
        assert config.detail is DetailLevel.DETAILED

    def test_coerces_detail(self):
        assert ConversionConfig(detail="smooth").detail is DetailLevel.SMOOTH

    @pytest.mark.parametrize("width", [0, -1])
    def test_non_positive_width(self, width):
        with pytest.raises(InvalidDimensionError):
            ConversionConfig(width=width)

    def test_small_widths_allowed(self):
        assert ConversionConfig(width=2).width == 2

    def test_frozen(self):
        config = ConversionConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.width = 10

    def test_error_hierarchy(self):
        assert issubclass(InvalidDimensionError, AsciiSketchError)
        assert issubclass(InvalidDimensionError, ValueError)
