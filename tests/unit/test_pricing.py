import re

from src.application.payment_service import calculate_totals, generate_transaction_id


def test_quote_applies_service_fee_then_tax():
    totals = calculate_totals(1000)

    assert totals == {
        "subtotal": 1000,
        "service_fee": 20.0,
        "tax": 81.6,
        "total": 1101.6,
    }


def test_quote_rounds_to_cents():
    totals = calculate_totals(333.33)

    assert totals["service_fee"] == 6.67
    assert totals["tax"] == 27.2
    assert totals["total"] == 367.2


def test_zero_subtotal():
    assert calculate_totals(0)["total"] == 0


def test_transaction_id_format():
    for _ in range(20):
        assert re.fullmatch(r"TXN_[A-Z0-9]{9}", generate_transaction_id())
