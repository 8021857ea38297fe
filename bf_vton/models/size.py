"""Garment size codes."""

from enum import Enum


class SizeCode(str, Enum):
    """Closed set of recommendable sizes, in search order."""
    XS = "XS"
    S = "S"
    M = "M"
    L = "L"
    XL = "XL"
    XXL = "XXL"


DEFAULT_SIZE = SizeCode.M

# Matching walks this order; the first code found as a standalone token wins.
SIZE_SEARCH_ORDER: tuple[SizeCode, ...] = tuple(SizeCode)


def size_options() -> str:
    """Comma-separated size list for prompts."""
    return ", ".join(code.value for code in SIZE_SEARCH_ORDER)
