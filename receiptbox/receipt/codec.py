"""Line encoding for the records file and the digital-items export.

Records file row:

    id,store,date,time,<name:price>[; <name:price>...],image_reference

Digital-items row (one per item):

    name,price,store,date,image_reference

Fields are written verbatim. There is no quoting or escaping, so a ``,`` in
any field (or ``:`` / ``;`` in an item) shifts columns when the row is read
back. Decoding reads fixed positions and silently drops what doesn't fit.
"""

from __future__ import annotations

import uuid

from receiptbox.domain.record import LineItem, Record

RECORDS_HEADER = "id,store,date,time,items,image_reference"
DIGITAL_ITEMS_HEADER = "itemName,itemPrice,store,date,image_reference"

COLUMN_SEPARATOR = ","
ITEM_SEPARATOR = ";"
ITEM_JOINER = "; "
NAME_PRICE_SEPARATOR = ":"
RECORD_COLUMNS = 6


def encode_item(item: LineItem) -> str:
    return f"{item.name}{NAME_PRICE_SEPARATOR}{item.price}"


def decode_item(piece: str) -> LineItem | None:
    """Decode one ``name:price`` piece; anything without exactly one colon is dropped."""
    parts = piece.split(NAME_PRICE_SEPARATOR)
    if len(parts) != 2:
        return None
    return LineItem(name=parts[0].strip(), price=parts[1].strip())


def encode_items(items: list[LineItem]) -> str:
    return ITEM_JOINER.join(encode_item(item) for item in items)


def decode_items(blob: str) -> list[LineItem]:
    items = []
    for piece in blob.split(ITEM_SEPARATOR):
        item = decode_item(piece.strip())
        if item is not None:
            items.append(item)
    return items


def encode_record(record: Record) -> str:
    """Encode a record as one newline-terminated row of the records file."""
    columns = [
        str(record.id).upper(),
        record.store,
        record.date,
        record.time,
        encode_items(record.items),
        record.image_reference,
    ]
    return COLUMN_SEPARATOR.join(columns) + "\n"


def _parse_id(text: str) -> uuid.UUID:
    try:
        return uuid.UUID(text.strip())
    except ValueError:
        return uuid.uuid4()


def decode_record(line: str) -> Record | None:
    """
    Decode one row of the records file.

    Returns None for rows with fewer than six columns. Columns past the sixth
    are ignored, and an unreadable id is replaced by a fresh one so the row
    still loads.
    """
    columns = line.rstrip("\r\n").split(COLUMN_SEPARATOR)
    if len(columns) < RECORD_COLUMNS:
        return None

    record_id, store, date, time, items_blob, image_reference = columns[:RECORD_COLUMNS]
    return Record(
        id=_parse_id(record_id),
        store=store,
        date=date,
        time=time,
        items=decode_items(items_blob),
        image_reference=image_reference,
    )


def encode_digital_items(record: Record) -> str:
    """Encode one digital-items row per item of the record (empty for no items)."""
    rows = []
    for item in record.items:
        columns = [item.name, item.price, record.store, record.date, record.image_reference]
        rows.append(COLUMN_SEPARATOR.join(columns) + "\n")
    return "".join(rows)
