"""Commands module."""

from .parsing import (
    detect_locale,
    is_cancel,
    is_confirm,
    normalize_digits,
    parse_price,
    parse_strict_price,
    parse_yes_no,
)
from .router import CommandRouter, ICommandRouter

__all__ = [
    "CommandRouter",
    "ICommandRouter",
    "detect_locale",
    "is_cancel",
    "is_confirm",
    "normalize_digits",
    "parse_price",
    "parse_strict_price",
    "parse_yes_no",
]
