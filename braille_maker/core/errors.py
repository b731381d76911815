"""Configuration errors raised while parsing rule and size strings."""

from __future__ import annotations


class ConfigError(ValueError):
    """Invalid configuration text. ``value`` holds the offending literal."""

    def __init__(self, message: str, value: str) -> None:
        super().__init__(message)
        self.value = value


class RuleParseError(ConfigError):
    def __init__(self, value: str) -> None:
        super().__init__(f"unknown format for on off rule: `{value}`", value)


class SizeParseError(ConfigError):
    def __init__(self, value: str, reason: str = "unknown size format") -> None:
        super().__init__(f"{reason} `{value}`", value)


class NumberParseError(ConfigError):
    def __init__(self, value: str, bits: int, signed: bool) -> None:
        kind = f"{'i' if signed else 'u'}{bits}"
        super().__init__(f"couldn't parse `{value}` as {kind}", value)


def parse_int(text: str, bits: int = 32, signed: bool = True) -> int:
    """Parse ASCII digits, optionally led by a single ``+``, into a fixed-width integer.

    Raises NumberParseError for empty text, a minus sign, non-ASCII digits,
    or values outside the integer range.
    """
    digits = text[1:] if text.startswith("+") else text
    if not digits or not digits.isascii() or not digits.isdigit():
        raise NumberParseError(text, bits, signed)
    value = int(digits)
    limit = 2 ** (bits - 1) - 1 if signed else 2**bits - 1
    if value > limit:
        raise NumberParseError(text, bits, signed)
    return value
