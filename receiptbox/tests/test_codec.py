import uuid

from receiptbox.domain.record import LineItem, Record
from receiptbox.receipt.codec import (
    DIGITAL_ITEMS_HEADER,
    RECORDS_HEADER,
    decode_item,
    decode_items,
    decode_record,
    encode_digital_items,
    encode_items,
    encode_record,
)

RECORD_ID = uuid.UUID("a1b2c3d4-e5f6-4789-abcd-ef0123456789")


def _record(**overrides: object) -> Record:
    fields: dict[str, object] = {
        "id": RECORD_ID,
        "store": "Grocery Store",
        "date": "03/15/2023",
        "time": "14:30",
        "items": [LineItem("Apples", "5.99"), LineItem("Milk", "3.49")],
        "image_reference": "receipt_1.jpg",
    }
    fields.update(overrides)
    return Record(**fields)  # type: ignore[arg-type]


def test_headers() -> None:
    assert RECORDS_HEADER == "id,store,date,time,items,image_reference"
    assert DIGITAL_ITEMS_HEADER == "itemName,itemPrice,store,date,image_reference"


def test_encode_record_row() -> None:
    assert encode_record(_record()) == (
        "A1B2C3D4-E5F6-4789-ABCD-EF0123456789,Grocery Store,03/15/2023,14:30,"
        "Apples:5.99; Milk:3.49,receipt_1.jpg\n"
    )


def test_encode_record_without_items_or_image() -> None:
    row = encode_record(_record(items=[], image_reference=""))

    assert row == "A1B2C3D4-E5F6-4789-ABCD-EF0123456789,Grocery Store,03/15/2023,14:30,,\n"


def test_decode_record_round_trip() -> None:
    original = _record()
    decoded = decode_record(encode_record(original))

    assert decoded == original


def test_decode_record_accepts_lowercase_id_and_crlf() -> None:
    decoded = decode_record(f"{RECORD_ID},Shop,01/01/2023,09:00,Tea:2.00,img.jpg\r\n")

    assert decoded is not None
    assert decoded.id == RECORD_ID
    assert decoded.image_reference == "img.jpg"


def test_decode_record_rejects_short_rows() -> None:
    assert decode_record("only,five,columns,here,x") is None
    assert decode_record("") is None


def test_decode_record_ignores_extra_columns() -> None:
    decoded = decode_record(f"{RECORD_ID},Shop,01/01/2023,09:00,Tea:2.00,img.jpg,extra,more")

    assert decoded is not None
    assert decoded.image_reference == "img.jpg"
    assert decoded.items == [LineItem("Tea", "2.00")]


def test_comma_in_store_shifts_columns() -> None:
    decoded = decode_record(encode_record(_record(store="Smith, Co")))

    assert decoded is not None
    assert decoded.store == "Smith"
    assert decoded.date == " Co"


def test_decode_record_replaces_bad_id() -> None:
    decoded = decode_record("not-a-uuid,Shop,01/01/2023,09:00,,")

    assert decoded is not None
    assert isinstance(decoded.id, uuid.UUID)
    assert decoded.store == "Shop"


def test_decode_item_requires_exactly_one_colon() -> None:
    assert decode_item(" Apples : 5.99 ") == LineItem("Apples", "5.99")
    assert decode_item("Apples") is None
    assert decode_item("Time: 14:30") is None


def test_decode_items_drops_malformed_pieces() -> None:
    items = decode_items("Apples:5.99; broken; A:B:C;Milk:3.49;")

    assert items == [LineItem("Apples", "5.99"), LineItem("Milk", "3.49")]


def test_encode_items_joins_with_semicolon_space() -> None:
    assert encode_items([LineItem("A", "1"), LineItem("B", "2")]) == "A:1; B:2"
    assert encode_items([]) == ""


def test_encode_digital_items_one_row_per_item() -> None:
    assert encode_digital_items(_record()) == (
        "Apples,5.99,Grocery Store,03/15/2023,receipt_1.jpg\n"
        "Milk,3.49,Grocery Store,03/15/2023,receipt_1.jpg\n"
    )
    assert encode_digital_items(_record(items=[])) == ""
