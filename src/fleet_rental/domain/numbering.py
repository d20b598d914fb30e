"""Year-scoped sequential document numbers."""

from __future__ import annotations

from typing import Iterable

INVOICE_SEQUENCE_WIDTH = 5
PAYMENT_SEQUENCE_WIDTH = 4


def next_sequence_number(existing: Iterable[str], prefix: str, width: int) -> str:
    """Return ``prefix`` followed by the next zero-padded sequence.

    Only numbers starting with ``prefix`` are considered. They are scanned in
    descending lexical order and the numeric suffix of the first parseable one
    is incremented; the sequence starts at 1. Nothing is reserved, so two
    callers reading the same state compute the same number.
    """
    candidates = sorted(
        (number for number in existing if number and number.startswith(prefix)),
        reverse=True,
    )
    last = 0
    for number in candidates:
        suffix = number[len(prefix):]
        if suffix.isdigit():
            last = int(suffix)
            break
    return f"{prefix}{last + 1:0{width}d}"


def next_invoice_number(existing: Iterable[str], year: int) -> str:
    return next_sequence_number(existing, f"{year}-", INVOICE_SEQUENCE_WIDTH)


def next_payment_number(existing: Iterable[str], year: int) -> str:
    return next_sequence_number(existing, f"REG{year}-", PAYMENT_SEQUENCE_WIDTH)
