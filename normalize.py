# sms-expense-parser/normalize.py
"""
Text normalization helpers shared by the SMS parser and the classifiers
"""

import re
from typing import Iterable, Optional

_WHITESPACE_RE = re.compile(r"\s+")
_SENDER_PREFIX_RE = re.compile(r"^[A-Z]{2}-(?=[A-Z0-9]{3,})")

SHORT_KEYWORD_LENGTH = 4


def normalize_text(text: Optional[str]) -> str:
    """Lowercase, trim and collapse runs of whitespace (None becomes '')"""
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text).strip().lower()


def clean_sender_id(sender_id: str) -> str:
    """
    Strip the two-letter operator prefix from a sender id

    "VM-HDFCBK" -> "HDFCBK", "ad-sbiinb-s" -> "SBIINB-S"
    """
    return _SENDER_PREFIX_RE.sub("", sender_id.strip().upper())


def contains_keyword(text: str, keyword: str, whole_word: Optional[bool] = None) -> bool:
    """
    Check whether a normalized text contains a keyword

    Args:
        text: Normalized (lowercase) text
        keyword: Lowercase keyword or phrase
        whole_word: Require letter boundaries around the match. Defaults to
            True for short keywords, where substring hits are mostly noise.

    Returns:
        True when the keyword occurs in the text
    """
    if whole_word is None:
        whole_word = len(keyword) <= SHORT_KEYWORD_LENGTH
    if not whole_word:
        return keyword in text
    return keyword_position(text, keyword) is not None


def keyword_position(text: str, keyword: str) -> Optional[int]:
    """Index of the first whole-word occurrence of keyword, or None"""
    match = re.search(rf"(?<![a-z0-9]){re.escape(keyword)}(?![a-z0-9])", text)
    return match.start() if match else None


def first_keyword(text: str, keywords: Iterable[str], whole_word: Optional[bool] = None) -> Optional[str]:
    """Return the first keyword (in iteration order) found in text"""
    for keyword in keywords:
        if contains_keyword(text, keyword, whole_word):
            return keyword
    return None


def parse_amount(raw: Optional[str], decimal_mark: str = ".", positive: bool = True) -> Optional[float]:
    """
    Convert a matched numeric string into a float

    Supports "1,234.56" and Indian grouping "1,25,000.00" when decimal_mark
    is ".", and "1.234,56" when decimal_mark is ",".

    Zero is rejected unless positive is False, which balances need.

    Returns:
        The amount, or None when the string is malformed or not positive
    """
    if not raw:
        return None

    group_mark = "," if decimal_mark == "." else "."
    cleaned = raw.strip().replace(" ", "").replace(group_mark, "")
    if cleaned.count(decimal_mark) > 1:
        return None
    cleaned = cleaned.replace(decimal_mark, ".")
    if not cleaned or not re.fullmatch(r"\d+(?:\.\d+)?", cleaned):
        return None

    amount = float(cleaned)
    if positive and amount <= 0:
        return None
    return amount
