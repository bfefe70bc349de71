"""Tests for OidKey parsing and ordering."""

import pytest

from passpersist.oid import OidKey, sort_oids


def test_sort_is_numeric_not_lexicographic() -> None:
    assert sort_oids([".1.2.10", ".1.2.9", ".1.2.1"]) == [".1.2.1", ".1.2.9", ".1.2.10"]


def test_prefix_sorts_before_its_children() -> None:
    assert sort_oids([".1.2.0", ".1.3", ".1.2"]) == [".1.2", ".1.2.0", ".1.3"]


def test_sort_keeps_original_spelling() -> None:
    assert sort_oids(["1.3", ".1.2"]) == [".1.2", "1.3"]


@pytest.mark.parametrize("text", [".1.3.6.1", "1.3.6.1", " .1.3.6.1 "])
def test_canonical_form_has_leading_dot(text: str) -> None:
    assert OidKey.canonical(text) == ".1.3.6.1"


def test_key_from_int_sequence() -> None:
    key = OidKey((1, 3, 6))
    assert str(key) == ".1.3.6"
    assert key.parts == (1, 3, 6)
    assert len(key) == 3
    assert OidKey(key) == key


@pytest.mark.parametrize("bad", ["", ".", "1.a.3", "1..3", ".1.3.", "-1.2", "1.2.-3"])
def test_invalid_oids_raise_value_error(bad: str) -> None:
    with pytest.raises(ValueError):
        OidKey(bad)


def test_negative_component_in_sequence_rejected() -> None:
    with pytest.raises(ValueError):
        OidKey((1, -2))


def test_three_way_compare() -> None:
    a, b = OidKey(".1.2.9"), OidKey(".1.2.10")
    assert a.compare(b) == -1
    assert b.compare(a) == 1
    assert a.compare(OidKey("1.2.9")) == 0
    assert a < b <= OidKey(".1.2.10")
    assert b > a


def test_equal_keys_hash_alike() -> None:
    assert {OidKey("1.3.6"), OidKey(".1.3.6")} == {OidKey(".1.3.6")}
    assert OidKey(".1.3") != ".1.3"


def test_startswith_is_dotted_prefix() -> None:
    oid = OidKey(".1.3.6.1")
    assert oid.startswith(".1.3")
    assert oid.startswith(OidKey(".1.3.6.1"))
    assert not OidKey(".1.30").startswith(".1.3")
