"""Ordered pattern tables for receipt text extraction.

Order matters in every table: the first entry that matches wins, so entries
must not be re-sorted.
"""

import re

MONTHS = "Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec"

# Prefixes stripped from the first line before it is used as the store name.
STORE_PREFIXES: tuple[str, ...] = (
    "RECEIPT",
    "INVOICE",
    "WELCOME TO",
    "THANK YOU FOR SHOPPING AT",
)

# (label, pattern). The whole matched substring becomes the date value.
DATE_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    # MM/DD/YYYY, DD/MM/YYYY, 5-10-2023, 05/10/23
    ("numeric", re.compile(r"(\d{1,2}[/-]\d{1,2}[/-]\d{2,4})")),
    # MM/DD/YY or DD/MM/YY
    ("numeric_short_year", re.compile(r"(\d{1,2}[/-]\d{1,2}[/-]\d{2})")),
    # Mar 15, 2023
    ("month_day_year", re.compile(rf"({MONTHS})\s+\d{{1,2}},?\s+\d{{4}}")),
    # 15 Mar 2023
    ("day_month_year", re.compile(rf"\d{{1,2}}\s+({MONTHS})\s+\d{{4}}")),
)

# A day followed by a month name, year optional. Only used to reject item names.
DAY_MONTH_PATTERN = re.compile(rf"\d{{1,2}}\s+({MONTHS})")

# Item names matching any of these are treated as dates. A "Mar 15, 2023"
# name is not, so it can still be an item.
ITEM_NAME_DATE_PATTERNS: tuple[re.Pattern[str], ...] = (
    DATE_PATTERNS[0][1],
    DAY_MONTH_PATTERN,
)

TIME_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    # 14:30, 14:30:05, 2:30PM, 2:30 pm
    ("clock", re.compile(r"(\d{1,2}:\d{2}(?::\d{2})?(?:\s*[APMapm]{2})?)")),
    # 14h30, 14h30min
    ("european", re.compile(r"(\d{1,2}[h]\d{2}(?:min)?)")),
)

# Uppercased-line keywords driving the item segmenter.
HEADER_KEYWORDS: tuple[str, ...] = ("ITEM", "DESCRIPTION", "QTY")
TOTAL_KEYWORDS: tuple[str, ...] = ("TOTAL", "SUBTOTAL", "AMOUNT")

_PRICE = r"\$?\d+(?:[.,]\d+)?"

# Name + trailing price, e.g. "Apples 5.99", "Paper Towels 12.49 EA"
TRAILING_PRICE_PATTERN = re.compile(rf"^(.*?)\s+({_PRICE})(?:\s*\w{{0,2}})?\s*$")
# Name + quantity x unit price = extended price, e.g. "Eggs 2 x 3.00 = 6.00"
QUANTITY_PATTERN = re.compile(rf"^(.*?)\s+(\d+)\s*[xX]\s*({_PRICE})\s*=?\s*({_PRICE})")
# Name and price separated by a wide gap or a tab
COLUMN_GAP_PATTERN = re.compile(rf"^(.*?)(?:\s{{2,}}|\t)({_PRICE})\s*$")
