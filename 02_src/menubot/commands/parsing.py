"""Value parsing for free-text commands and dialogue answers."""

import re
import unicodedata
from decimal import Decimal, InvalidOperation

ARABIC_DECIMAL_SEPARATOR = "٫"

YES_WORDS = frozenset({"yes", "y", "نعم"})
NO_WORDS = frozenset({"no", "n", "لا"})
CONFIRM_WORDS = frozenset({"confirm", "تأكيد", "تاكيد"})
CANCEL_WORDS = frozenset({"cancel", "إلغاء", "الغاء"})

_ARABIC_LETTER = re.compile(r"[ء-ي]")
_DECIMAL = re.compile(r"[0-9]+(?:\.[0-9]+)?")


def _normalize_word(text: str) -> str:
    return text.strip().casefold()


def normalize_digits(text: str) -> str:
    """Map every Unicode decimal digit (Arabic-Indic, Persian, ...) to ASCII."""
    chars = []
    for ch in text:
        if ch == ARABIC_DECIMAL_SEPARATOR:
            chars.append(".")
        elif not ch.isascii() and unicodedata.decimal(ch, None) is not None:
            chars.append(str(unicodedata.decimal(ch)))
        else:
            chars.append(ch)
    return "".join(chars)


def parse_price(text: str) -> Decimal | None:
    """Lenient price parsing: keep digits and a single decimal point.

    "25 QAR" -> 25, "٢٥٫٥" -> 25.5, "abc" -> None, "1.2.3" -> None.
    """
    cleaned = re.sub(r"[^0-9.]", "", normalize_digits(text))
    if not cleaned or cleaned.count(".") > 1 or cleaned == ".":
        return None
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def parse_strict_price(text: str) -> Decimal | None:
    """Price token that must be a plain non-negative number (digits may be localized)."""
    normalized = normalize_digits(text.strip())
    if not _DECIMAL.fullmatch(normalized):
        return None
    return Decimal(normalized)


def parse_yes_no(text: str) -> bool | None:
    """True/False for a recognized answer, None for anything else."""
    word = _normalize_word(text)
    if word in YES_WORDS:
        return True
    if word in NO_WORDS:
        return False
    return None


def is_confirm(text: str) -> bool:
    return _normalize_word(text) in CONFIRM_WORDS


def is_cancel(text: str) -> bool:
    return _normalize_word(text) in CANCEL_WORDS


def detect_locale(text: str) -> str:
    return "ar" if _ARABIC_LETTER.search(text) else "en"
