from datetime import date

from services.currency import convert_to_rupees, format_event_date, format_price_in_rupees


def test_convert_to_rupees():
    assert convert_to_rupees(100) == 8300
    assert convert_to_rupees("1.2") == 100
    assert convert_to_rupees(None) == 0
    assert convert_to_rupees("abc") == 0


def test_indian_grouping():
    assert format_price_in_rupees(100) == "₹8,300"
    assert format_price_in_rupees(10, rate=10000) == "₹1,00,000"
    assert format_price_in_rupees(5, rate=1) == "₹5"
    assert format_price_in_rupees(0) == "N/A"
    assert format_price_in_rupees("") == "N/A"


def test_format_event_date():
    assert format_event_date("2024-07-15") == "Mon, 15 Jul 2024"
    assert format_event_date("July 15, 2024") == "Mon, 15 Jul 2024"
    assert format_event_date(date(2024, 10, 12)) == "Sat, 12 Oct 2024"
    assert format_event_date("not a date") == "not a date"
    assert format_event_date(None) == ""


def test_non_finite_prices_are_not_converted():
    for value in (float("inf"), float("-inf"), float("nan"), "Infinity", 1e308):
        assert convert_to_rupees(value) == 0
        assert format_price_in_rupees(value) == "N/A"
