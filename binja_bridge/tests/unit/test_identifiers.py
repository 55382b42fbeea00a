import pytest

from binja_bridge.utils.identifiers import IdentifierKind, classify


@pytest.mark.parametrize(
    "raw",
    ["0x401000", "0X401000", "  0xdeadbeef  ", "4198400", "0", "0xZZ"],
)
def test_addresses(raw: str) -> None:
    ident = classify(raw)
    assert ident.kind is IdentifierKind.ADDRESS
    assert ident.normalized == raw.strip()
    assert ident.param() == ("address", raw.strip())


@pytest.mark.parametrize(
    "raw",
    ["main", "sub_401000", "401000h", "-12", "1 2", "", "   ", "٣٤"],
)
def test_names(raw: str) -> None:
    ident = classify(raw)
    assert ident.kind is IdentifierKind.NAME
    assert not ident.is_address


def test_name_key_varies_per_endpoint() -> None:
    assert classify(" main ").param("functionName") == ("functionName", "main")
    assert classify("0x10").param("functionName") == ("address", "0x10")
