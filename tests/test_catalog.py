import io

import pytest

from core.catalog import CatalogError, CatalogFormatError, load_items, load_items_from_path
from core.models import UNRESOLVED


CATALOG = (
    "Description\tQty\tBanggood\tAliExpress\n"
    "  USB cable \t2\t https://www.banggood.com/cable \thttps://www.aliexpress.com/item/1.html\n"
    "Fan\t1\thttps://www.banggood.com/fan\thttps://www.aliexpress.com/item/2.html\n"
)


def test_load_items():
    items = load_items(io.StringIO(CATALOG))

    assert [i.description for i in items] == ["USB cable", "Fan"]
    assert [i.quantity for i in items] == [2, 1]

    cable = items[0]
    assert [vi.vendor_name for vi in cable.vendor_items] == ["Banggood", "AliExpress"]
    assert cable.vendor_items[0].url == "https://www.banggood.com/cable"
    assert all(vi.price == UNRESOLVED and vi.shipping == UNRESOLVED for vi in cable.vendor_items)


def test_line_with_two_fields_reports_line_number():
    text = "Description\tQty\tA\nWidget\t1\thttps://a.example\nBroken\t3\n"
    with pytest.raises(CatalogFormatError) as exc:
        load_items(io.StringIO(text))
    assert exc.value.line_num == 3
    assert str(exc.value) == "line 3: need at least 3 columns, only found 2"


def test_short_header_is_rejected():
    with pytest.raises(CatalogFormatError, match="line 1: need at least 3 columns, only found 2"):
        load_items(io.StringIO("Description\tQty\n"))


def test_bad_quantity_reports_line_number():
    text = "Description\tQty\tA\nWidget\tlots\thttps://a.example\n"
    with pytest.raises(CatalogFormatError, match=r"^line 2: cannot parse quantity: "):
        load_items(io.StringIO(text))


def test_non_positive_quantity():
    text = "Description\tQty\tA\nWidget\t0\thttps://a.example\n"
    with pytest.raises(CatalogFormatError, match="line 2: quantity must be positive"):
        load_items(io.StringIO(text))


def test_trailing_blank_lines_are_ignored():
    text = "Description\tQty\tA\nWidget\t1\thttps://a.example\n\n  \n"
    [item] = load_items(io.StringIO(text))
    assert item.vendor_items[0].url == "https://a.example"


def test_missing_trailing_newline():
    [item] = load_items(io.StringIO("Description\tQty\tA\nWidget\t1\thttps://a.example"))
    assert item.quantity == 1


def test_interior_blank_line_is_a_format_error():
    text = "Description\tQty\tA\n\nWidget\t1\thttps://a.example\n"
    with pytest.raises(CatalogFormatError, match="line 2: need at least 3 columns, only found 1") as exc:
        load_items(io.StringIO(text))
    assert exc.value.line_num == 2


@pytest.mark.parametrize("qty", ["1_000", "٣", "1.0", "2 3", ""])
def test_quantity_must_be_plain_decimal_digits(qty):
    text = f"Description\tQty\tA\nWidget\t{qty}\thttps://a.example\n"
    with pytest.raises(CatalogFormatError, match="line 2: cannot parse quantity"):
        load_items(io.StringIO(text))


def test_quantity_with_sign_and_spaces():
    [item] = load_items(io.StringIO("Description\tQty\tA\nWidget\t +4 \thttps://a.example\n"))
    assert item.quantity == 4


def test_extra_columns_named_by_position():
    text = "Description\tQty\tA\nWidget\t1\thttps://a.example\thttps://b.example\n"
    [item] = load_items(io.StringIO(text))
    assert [vi.vendor_name for vi in item.vendor_items] == ["A", "column 4"]


def test_missing_file(tmp_path):
    with pytest.raises(CatalogError, match="opening"):
        load_items_from_path(str(tmp_path / "nope.tsv"))
