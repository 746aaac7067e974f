from receiptbox.domain.record import UNKNOWN_DATE, UNKNOWN_STORE, UNKNOWN_TIME, LineItem
from receiptbox.receipt.receipt_parser import build_record, parse_receipt_text
from receiptbox.receipt.text_parser import (
    ITEM_RULES,
    SegmenterState,
    extract_date,
    extract_items,
    extract_store,
    extract_time,
    first_match,
    looks_like_date,
    match_item_line,
    normalize_lines,
    step,
)
from receiptbox.receipt.text_parser.patterns import DATE_PATTERNS

MEGA_MART_TEXT = """MEGA MART
456 Oak Avenue
Tel: 555-1234
Date: 03/20/2023 Time: 2:45 PM
ITEM            PRICE
Bananas         1.29
Chicken Breast  8.99
Orange Juice    4.49
SUBTOTAL       14.77
TAX             1.18
TOTAL          15.95
VISA ****1234  15.95
THANK YOU
"""


def _pairs(items: list[LineItem]) -> list[tuple[str, str]]:
    return [(item.name, item.price) for item in items]


def test_parse_grocery_receipt(grocery_text: str) -> None:
    parsed = parse_receipt_text(grocery_text)

    assert parsed.store == "Grocery Store"
    assert parsed.date == "03/15/2023"
    assert parsed.time == "14:30"
    assert _pairs(parsed.items) == [("Apples", "5.99"), ("Milk", "3.49"), ("Bread", "2.99")]


def test_parse_store_only_uses_sentinels() -> None:
    parsed = parse_receipt_text("Corner Shop")

    assert parsed.store == "Corner Shop"
    assert parsed.date == UNKNOWN_DATE
    assert parsed.time == UNKNOWN_TIME
    assert parsed.items == []


def test_parse_empty_text() -> None:
    parsed = parse_receipt_text("")

    assert parsed.store == UNKNOWN_STORE
    assert parsed.date == UNKNOWN_DATE
    assert parsed.time == UNKNOWN_TIME
    assert parsed.items == []


def test_comma_decimal_price_is_normalized() -> None:
    parsed = parse_receipt_text("Cafe\nCoffee     3,75")

    assert _pairs(parsed.items) == [("Coffee", "3.75")]


def test_dollar_sign_is_stripped_from_price() -> None:
    assert _pairs(extract_items(["Soap $4.25"])) == [("Soap", "4.25")]


def test_mega_mart_receipt_stops_at_totals() -> None:
    parsed = parse_receipt_text(MEGA_MART_TEXT)

    assert parsed.store == "MEGA MART"
    assert parsed.date == "03/20/2023"
    assert parsed.time == "2:45 PM"
    assert _pairs(parsed.items) == [
        ("Bananas", "1.29"),
        ("Chicken Breast", "8.99"),
        ("Orange Juice", "4.49"),
    ]


def test_build_record_carries_image_reference(grocery_text: str) -> None:
    record = build_record(grocery_text, image_reference="receipt_1.jpg")

    assert record.store == "Grocery Store"
    assert record.image_reference == "receipt_1.jpg"
    assert len(record.items) == 3
    assert round(record.total, 2) == 12.47


# --- normalize_lines ---


def test_normalize_lines_handles_all_line_endings() -> None:
    assert normalize_lines("a\r\nb\rc\n\n   \n  d  ") == ["a", "b", "c", "d"]


def test_normalize_lines_empty() -> None:
    assert normalize_lines("") == []
    assert normalize_lines("\n\n  \n") == []


# --- store ---


def test_extract_store_strips_boilerplate_prefix() -> None:
    assert extract_store(["WELCOME TO Fresh Foods"]) == "Fresh Foods"
    assert extract_store(["Receipt Corner Deli"]) == "Corner Deli"
    assert extract_store(["Thank you for shopping at Bob's"]) == "Bob's"


def test_extract_store_empty_lines() -> None:
    assert extract_store([]) == UNKNOWN_STORE


# --- date/time ---


def test_extract_date_formats() -> None:
    assert extract_date(["5-10-2023"]) == "5-10-2023"
    assert extract_date(["Sold 05/10/23 at register"]) == "05/10/23"
    assert extract_date(["Mar 15, 2023"]) == "Mar 15, 2023"
    assert extract_date(["15 Mar 2023"]) == "15 Mar 2023"


def test_extract_date_first_line_wins() -> None:
    assert extract_date(["Shop", "01/02/2023", "03/04/2024"]) == "01/02/2023"


def test_numeric_pattern_is_tried_before_short_year() -> None:
    assert first_match(["05/10/23"], DATE_PATTERNS) == ("numeric", "05/10/23")


def test_extract_time_formats() -> None:
    assert extract_time(["14:30:05"]) == "14:30:05"
    assert extract_time(["at 2:30pm"]) == "2:30pm"
    assert extract_time(["Heure 14h30"]) == "14h30"
    assert extract_time(["14h30min"]) == "14h30min"
    assert extract_time(["no time here"]) == UNKNOWN_TIME


def test_looks_like_date() -> None:
    assert looks_like_date("03/20/2023")
    assert looks_like_date("15 Mar 2023")
    assert not looks_like_date("Mar 15, 2023")
    assert looks_like_date("15 Mar")
    assert not looks_like_date("Apples")


# --- item segmentation ---


def test_step_transitions() -> None:
    assert step(SegmenterState.BEFORE_HEADER, "Apples 1.00") == (SegmenterState.BEFORE_HEADER, True)
    assert step(SegmenterState.BEFORE_HEADER, "Item Price") == (SegmenterState.CAPTURING, False)
    assert step(SegmenterState.CAPTURING, "Apples 1.00") == (SegmenterState.CAPTURING, True)
    assert step(SegmenterState.CAPTURING, "Total 1.00") == (SegmenterState.AFTER_TOTAL, False)
    assert step(SegmenterState.AFTER_TOTAL, "Change 1.00") == (SegmenterState.AFTER_TOTAL, False)
    assert step(SegmenterState.AFTER_TOTAL, "QTY DESCRIPTION") == (SegmenterState.CAPTURING, False)


def test_total_line_is_never_an_item() -> None:
    assert extract_items(["TOTAL 5.00"]) == []
    assert extract_items(["Subtotal 5.00", "Apples 1.00"]) == []


def test_header_after_total_resumes_capture() -> None:
    lines = ["Apples 1.00", "TOTAL 1.00", "ITEMS", "Pears 2.00"]

    assert _pairs(extract_items(lines)) == [("Apples", "1.00"), ("Pears", "2.00")]


def test_date_only_line_is_not_an_item() -> None:
    assert extract_items(["03/20/2023"]) == []
    assert extract_items(["03/20/2023  4.99"]) == []
    assert extract_items(["15 Mar 4.99"]) == []


def test_rejected_match_stops_at_first_pattern() -> None:
    assert match_item_line("03/20/2023  4.99") == ("trailing_price", None)


def test_quantity_line_is_recognized_but_not_an_item() -> None:
    assert match_item_line("Eggs 2x3.00=6.00") == ("quantity", None)
    assert extract_items(["Eggs 2x3.00=6.00"]) == []


def test_quantity_match_shadows_later_patterns() -> None:
    quantity_then_gap = [ITEM_RULES[1], ITEM_RULES[2]]

    assert match_item_line("Eggs 2 x 3.00  6.00", quantity_then_gap) == ("quantity", None)
    assert match_item_line("Eggs 2 x 3.00  6.00", [ITEM_RULES[2]]) == (
        "column_gap",
        LineItem("Eggs 2 x 3.00", "6.00"),
    )


def test_trailing_unit_marker_is_allowed() -> None:
    assert _pairs(extract_items(["Paper Towels 12.49 EA"])) == [("Paper Towels", "12.49")]


def test_digits_inside_name_are_kept() -> None:
    assert _pairs(extract_items(["Coke 2L 3.99"])) == [("Coke 2L", "3.99")]


def test_line_without_price_is_ignored() -> None:
    assert match_item_line("123 Main St") is None
    assert extract_items(["Thank you", "Come again"]) == []


def test_month_first_date_in_name_is_still_an_item() -> None:
    assert _pairs(extract_items(["Gift Card Mar 15, 2023 5.00"])) == [("Gift Card Mar 15, 2023", "5.00")]
