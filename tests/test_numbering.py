from __future__ import annotations

from fleet_rental.domain.numbering import next_invoice_number, next_payment_number


def test_next_invoice_number_follows_highest():
    assert next_invoice_number(["2025-00001", "2025-00003"], 2025) == "2025-00004"


def test_first_invoice_number_of_year():
    assert next_invoice_number([], 2025) == "2025-00001"


def test_other_years_are_ignored():
    assert next_invoice_number(["2024-00042"], 2025) == "2025-00001"


def test_unparseable_numbers_are_skipped():
    assert next_invoice_number(["2025-draft", "2025-00007"], 2025) == "2025-00008"


def test_payment_number_format():
    assert next_payment_number([], 2025) == "REG2025-0001"
    assert next_payment_number(["REG2025-0009", "REG2024-0100"], 2025) == "REG2025-0010"
