"""Tests for custom encoder dispatch."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from query_values import FieldDescriptor, QueryValues, ValuesEncoder
from query_values.hooks import dispatch_custom_encoder, implements_encoder


@dataclass
class Point:
    x: int = 0
    y: int = 0

    def encode_values(self, key: str, values: QueryValues) -> None:
        values.add(key, f"{self.x},{self.y}")


class Silent:
    def encode_values(self, key: str, values: QueryValues) -> None:
        return None


class Radius:
    def __init__(self, metres: int) -> None:
        self.metres = metres

    def encode_values(self, key: str, values: QueryValues) -> None:
        values.add(key, str(self.metres))


# -- implements_encoder --------------------------------------------------------


def test_protocol_is_structural():
    assert isinstance(Point(), ValuesEncoder)
    assert not isinstance("text", ValuesEncoder)


def test_implements_encoder():
    assert implements_encoder(Point)
    assert implements_encoder(Silent)
    assert not implements_encoder(int)
    assert not implements_encoder(list[str])
    assert not implements_encoder(None)
    assert not implements_encoder("Point")


# -- dispatch_custom_encoder ---------------------------------------------------


def test_dispatch_ignores_plain_values():
    values = QueryValues()
    desc = FieldDescriptor("n", declared_type=int)
    assert dispatch_custom_encoder(desc, 5, "n", values) is False
    assert values == {}


def test_dispatch_calls_encoder_with_key():
    values = QueryValues()
    desc = FieldDescriptor("origin", declared_type=Point)
    assert dispatch_custom_encoder(desc, Point(1, 2), "shape[origin]", values) is True
    assert values == {"shape[origin]": ["1,2"]}


def test_dispatch_materialises_zero_value_for_none():
    values = QueryValues()
    desc = FieldDescriptor("center", declared_type=Point)
    assert dispatch_custom_encoder(desc, None, "center", values) is True
    assert values == {"center": ["0,0"]}


def test_dispatch_none_without_encoder_type():
    values = QueryValues()
    desc = FieldDescriptor("ref", declared_type=str)
    assert dispatch_custom_encoder(desc, None, "ref", values) is False


def test_dispatch_uses_runtime_value_when_type_unknown():
    values = QueryValues()
    desc = FieldDescriptor("anything")
    assert dispatch_custom_encoder(desc, Point(3, 4), "anything", values) is True
    assert values == {"anything": ["3,4"]}


def test_dispatch_skips_encoder_classes():
    values = QueryValues()
    desc = FieldDescriptor("kind")
    assert dispatch_custom_encoder(desc, Point, "kind", values) is False


def test_encoder_may_add_nothing():
    values = QueryValues()
    desc = FieldDescriptor("quiet", declared_type=Silent)
    assert dispatch_custom_encoder(desc, Silent(), "quiet", values) is True
    assert values == {}


def test_none_needs_no_argument_constructor():
    desc = FieldDescriptor("radius", declared_type=Radius)
    assert dispatch_custom_encoder(desc, Radius(5), "radius", QueryValues()) is True
    with pytest.raises(TypeError):
        dispatch_custom_encoder(desc, None, "radius", QueryValues())


def test_protocol_documents_constructor_requirement():
    assert "without arguments" in (ValuesEncoder.__doc__ or "")
