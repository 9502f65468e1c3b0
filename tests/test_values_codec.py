"""Wire values and their XML encoding."""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from rtorrent_rpc.core.codec.values import decode_value, encode_value, expect
from rtorrent_rpc.core.domain.values import (
    Array,
    Base64,
    Boolean,
    Double,
    Integer,
    Nil,
    String,
    Struct,
    from_wire,
    to_wire,
)
from rtorrent_rpc.core.errors import DecodeError, MalformedError, TypeMismatchError

_xml_chars = st.characters(min_codepoint=0x20, max_codepoint=0xD7FF) | st.sampled_from("\t\n\r")
_text = st.text(alphabet=_xml_chars, max_size=40)

_scalars = st.one_of(
    st.integers(min_value=-(2**63), max_value=2**63 - 1).map(Integer),
    st.floats(allow_nan=False, allow_infinity=False).map(Double),
    st.booleans().map(Boolean),
    _text.map(String),
    st.binary(max_size=64).map(Base64),
    st.just(Nil()),
)

wire_values = st.recursive(
    _scalars,
    lambda children: st.one_of(
        st.lists(children, max_size=5).map(lambda items: Array(tuple(items))),
        st.dictionaries(_text, children, max_size=5).map(Struct),
    ),
    max_leaves=25,
)


@given(wire_values)
@settings(max_examples=300)
def test_encode_then_decode_is_identity(value):
    assert decode_value(encode_value(value)) == value


def test_integer_uses_i4_until_it_overflows_32_bits():
    assert encode_value(Integer(2**31 - 1)) == b"<value><i4>2147483647</i4></value>"
    assert encode_value(Integer(2**31)) == b"<value><i8>2147483648</i8></value>"
    assert encode_value(Integer(-(2**31) - 1)) == b"<value><i8>-2147483649</i8></value>"


def test_string_escapes_markup_and_carriage_return():
    encoded = encode_value(String("a<b & c>\r\n"))
    assert encoded == b"<value><string>a&lt;b &amp; c&gt;&#13;\n</string></value>"
    assert decode_value(encoded) == String("a<b & c>\r\n")


def test_string_with_control_characters_is_rejected():
    with pytest.raises(ValueError):
        encode_value(String("bell\x07"))


def test_nested_containers_keep_order():
    value = Struct(
        (
            ("z", Array((Integer(3), Integer(1), Integer(2)))),
            ("a", Struct({"inner": Nil()})),
        )
    )
    decoded = decode_value(encode_value(value))
    assert decoded.keys() == ["z", "a"]
    assert [item.value for item in decoded.get("z")] == [3, 1, 2]


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        ("<value>plain text</value>", String("plain text")),
        ("<value></value>", String("")),
        ("<value><int>7</int></value>", Integer(7)),
        ("<value><i8>-9223372036854775808</i8></value>", Integer(-(2**63))),
        ("<value><boolean>1</boolean></value>", Boolean(True)),
        ("<value><double>1.5</double></value>", Double(1.5)),
        ("<value><base64>aGVsbG8=</base64></value>", Base64(b"hello")),
        ("<value><array><data/></array></value>", Array(())),
        ("<value><struct/></value>", Struct(())),
        ("<value><nil/></value>", Nil()),
        (
            '<value><ex:nil xmlns:ex="http://ws.apache.org/xmlrpc/namespaces/extensions"/></value>',
            Nil(),
        ),
    ],
)
def test_decode_accepts_daemon_forms(payload, expected):
    assert decode_value(payload) == expected


@pytest.mark.parametrize(
    "payload",
    [
        "<value><i4>12",
        "not xml at all",
        "<value><i4>abc</i4></value>",
        "<value><i4>1.0</i4></value>",
        "<value><i8>9223372036854775808</i8></value>",
        "<value><double>nan</double></value>",
        "<value><double>inf</double></value>",
        "<value><double>x</double></value>",
        "<value><boolean>2</boolean></value>",
        "<value><base64>!!!</base64></value>",
        "<value><dateTime.iso8601>20240101T00:00:00</dateTime.iso8601></value>",
        "<value><unknown/></value>",
        "<value><i4>1</i4><i4>2</i4></value>",
        "<value>text<i4>1</i4></value>",
        "<value><array></array></value>",
        "<value><struct><member><name>a</name></member></struct></value>",
        "<value><struct>"
        "<member><name>a</name><value>1</value></member>"
        "<member><name>a</name><value>2</value></member>"
        "</struct></value>",
        "<string>outside a value</string>",
    ],
)
def test_decode_rejects_malformed_payloads(payload):
    with pytest.raises(MalformedError):
        decode_value(payload)


def test_deep_nesting_is_malformed_not_a_crash():
    depth = 5000
    payload = "<value><array><data>" * depth + "</data></array></value>" * depth
    with pytest.raises(DecodeError):
        decode_value(payload)


def test_expect_reports_the_actual_variant():
    with pytest.raises(TypeMismatchError) as excinfo:
        expect(String("x"), Integer)
    assert excinfo.value.expected == "Integer"
    assert excinfo.value.actual == String("x")
    assert expect(Integer(1), Integer) == Integer(1)


def test_constructors_validate_their_payload():
    with pytest.raises(ValueError):
        Integer(2**63)
    with pytest.raises(TypeError):
        Integer(True)
    with pytest.raises(ValueError):
        Double(float("inf"))
    with pytest.raises(TypeError):
        Array((1, 2))
    with pytest.raises(ValueError):
        Struct((("a", Nil()), ("a", Nil())))


def test_native_conversion_both_ways():
    native = {"name": "x", "flags": [True, 0, 1.5, None, b"\x00"]}
    wire = to_wire(native)
    assert wire == Struct(
        {
            "name": String("x"),
            "flags": Array((Boolean(True), Integer(0), Double(1.5), Nil(), Base64(b"\x00"))),
        }
    )
    assert from_wire(wire) == native
    with pytest.raises(TypeError):
        to_wire(object())
