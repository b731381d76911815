"""Tests for the on/off rules and their textual form."""

import numpy as np
import pytest

from braille_maker.core.errors import ConfigError, NumberParseError, RuleParseError
from braille_maker.core.pixels import PixelImage
from braille_maker.core.rules import (
    Border,
    InvertedThreshold,
    Threshold,
    parse_rule,
)


def _solid(width, height, color):
    arr = np.zeros((height, width, len(color)), dtype=np.uint8)
    arr[:, :] = color
    return PixelImage.from_array(arr)


def _random_image(seed, width=9, height=7, channels=4):
    rng = np.random.default_rng(seed)
    return PixelImage.from_array(rng.integers(0, 256, (height, width, channels), dtype=np.uint8))


ALL_RULES = [
    Threshold(100),
    Threshold(0),
    InvertedThreshold(300),
    InvertedThreshold(0),
    Border(30, 1),
    Border(80, 3),
    Border(0, 2),
    Border(10, 0),
]


class TestThreshold:
    def test_on_at_exact_threshold(self):
        img = _solid(1, 1, (10, 20, 30))
        assert Threshold(60).is_on(img, 0, 0) is True
        assert Threshold(61).is_on(img, 0, 0) is False

    def test_sums_alpha_channel(self):
        img = _solid(1, 1, (10, 10, 10, 255))
        assert Threshold(285).is_on(img, 0, 0) is True
        assert Threshold(286).is_on(img, 0, 0) is False

    def test_monotonic_in_channel_sum(self):
        rule = Threshold(200)
        seen_on = False
        for value in range(0, 256, 5):
            on = rule.is_on(_solid(1, 1, (value, value, value)), 0, 0)
            assert not (seen_on and not on)
            seen_on = seen_on or on
        assert seen_on

    def test_grayscale_sums_three_channels(self):
        img = PixelImage.from_array(np.full((1, 1), 40, dtype=np.uint8))
        assert Threshold(120).is_on(img, 0, 0) is True
        assert Threshold(121).is_on(img, 0, 0) is False
        assert Threshold(120).mask(img).tolist() == [[True]]


class TestInvertedThreshold:
    def test_on_at_or_below_threshold(self):
        img = _solid(1, 1, (10, 20, 30))
        assert InvertedThreshold(60).is_on(img, 0, 0) is True
        assert InvertedThreshold(59).is_on(img, 0, 0) is False

    @pytest.mark.parametrize("alpha", [0, 128, 255])
    def test_ignores_alpha(self, alpha):
        img = _solid(1, 1, (10, 20, 30, alpha))
        assert InvertedThreshold(60).is_on(img, 0, 0) is True
        assert InvertedThreshold(59).is_on(img, 0, 0) is False

    def test_grayscale_counts_three_channels(self):
        img = PixelImage.from_array(np.full((1, 1), 20, dtype=np.uint8))
        assert InvertedThreshold(60).is_on(img, 0, 0) is True
        assert InvertedThreshold(59).is_on(img, 0, 0) is False


class TestBorder:
    def test_uniform_image_is_all_off(self):
        img = _solid(6, 5, (40, 80, 120, 255))
        rule = Border(1, 3)
        assert not any(rule.is_on(img, x, y) for y in range(5) for x in range(6))
        assert not rule.mask(img).any()

    def test_zero_distance_is_all_off(self):
        img = _random_image(1)
        rule = Border(1, 0)
        assert not any(rule.is_on(img, x, y) for y in range(7) for x in range(9))

    def test_detects_vertical_edge(self):
        arr = np.zeros((1, 6), dtype=np.uint8)
        arr[0, 3:] = 255
        img = PixelImage.from_array(arr)
        rule = Border(100, 1)
        assert [rule.is_on(img, x, 0) for x in range(6)] == [
            False, False, True, True, False, False,
        ]

    def test_distance_widens_the_edge(self):
        arr = np.zeros((1, 8), dtype=np.uint8)
        arr[0, 4:] = 255
        img = PixelImage.from_array(arr)
        rule = Border(100, 2)
        assert [rule.is_on(img, x, 0) for x in range(8)] == [
            False, False, True, True, True, True, False, False,
        ]

    def test_compares_alpha_channel(self):
        arr = np.zeros((1, 2, 4), dtype=np.uint8)
        arr[0, 1, 3] = 200
        img = PixelImage.from_array(arr)
        assert Border(200, 1).is_on(img, 0, 0) is True
        assert Border(201, 1).is_on(img, 0, 0) is False

    def test_uses_max_channel_difference(self):
        arr = np.array([[[0, 0, 0], [50, 90, 10]]], dtype=np.uint8)
        img = PixelImage.from_array(arr)
        assert Border(90, 1).is_on(img, 0, 0) is True
        assert Border(91, 1).is_on(img, 0, 0) is False

    def test_zero_threshold_compares_clamped_edge_pixel(self):
        # The left/up neighbour of (0, 0) clamps back onto (0, 0) itself
        img = _solid(1, 1, (7, 7, 7))
        assert Border(0, 1).is_on(img, 0, 0) is True
        assert Border(0, 1).mask(img).tolist() == [[True]]

    def test_huge_distance(self):
        arr = np.zeros((3, 3), dtype=np.uint8)
        arr[2, 2] = 255
        img = PixelImage.from_array(arr)
        rule = Border(100, 2_000_000_000)
        assert rule.is_on(img, 2, 0) is True
        assert rule.is_on(img, 1, 1) is False
        assert rule.mask(img)[1, 1] == False  # noqa: E712


class TestAllRules:
    @pytest.mark.parametrize("rule", ALL_RULES, ids=str)
    @pytest.mark.parametrize("coord", [(-1, 0), (0, -1), (9, 0), (0, 7), (100, 100), (-5, -5)])
    def test_out_of_bounds_is_off(self, rule, coord):
        img = _solid(9, 7, (255, 255, 255, 255))
        assert rule.is_on(img, *coord) is False

    @pytest.mark.parametrize("rule", ALL_RULES, ids=str)
    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_mask_matches_is_on(self, rule, seed):
        img = _random_image(seed)
        expected = [[rule.is_on(img, x, y) for x in range(img.width)] for y in range(img.height)]
        assert rule.mask(img).tolist() == expected

    @pytest.mark.parametrize("rule", ALL_RULES, ids=str)
    def test_mask_matches_is_on_grayscale(self, rule):
        rng = np.random.default_rng(7)
        img = PixelImage.from_array(rng.integers(0, 256, (5, 4), dtype=np.uint8))
        expected = [[rule.is_on(img, x, y) for x in range(4)] for y in range(5)]
        assert rule.mask(img).tolist() == expected

    def test_rules_are_frozen(self):
        rule = Threshold(5)
        with pytest.raises(AttributeError):
            rule.threshold = 6


class TestParseRule:
    def test_threshold(self):
        assert parse_rule("Threshold(100)") == Threshold(100)

    def test_inverted_threshold(self):
        assert parse_rule("InvertedThreshold(42)") == InvertedThreshold(42)

    def test_border(self):
        assert parse_rule("Border(40,2)") == Border(40, 2)

    @pytest.mark.parametrize(
        "text", ["Threshold(0)", "InvertedThreshold(765)", "Border(12,3)"]
    )
    def test_str_round_trips(self, text):
        assert str(parse_rule(text)) == text

    def test_largest_i32_accepted(self):
        assert parse_rule("Threshold(2147483647)") == Threshold(2147483647)

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "threshold(5)",
            "Threshold()",
            "Threshold(-1)",
            "Threshold(+1)",
            "Threshold( 5)",
            "Threshold(5) ",
            "Threshold(5)\n",
            "Border(1)",
            "Border(1, 2)",
            "Border(1,2,3)",
            "Inverted(5)",
        ],
    )
    def test_unknown_format(self, text):
        with pytest.raises(RuleParseError) as exc_info:
            parse_rule(text)
        assert exc_info.value.value == text
        assert f"`{text}`" in str(exc_info.value)

    @pytest.mark.parametrize(
        "text",
        ["Threshold(2147483648)", "Border(1,99999999999)", "InvertedThreshold(٣)"],
    )
    def test_bad_number(self, text):
        with pytest.raises(NumberParseError):
            parse_rule(text)

    def test_errors_are_config_errors(self):
        with pytest.raises(ConfigError):
            parse_rule("nope")
        with pytest.raises(ValueError):
            parse_rule("Threshold(9999999999)")
