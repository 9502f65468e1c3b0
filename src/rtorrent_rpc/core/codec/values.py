"""Codec XML-RPC para `WireValue`.

Encoding:
- Cada variante tiene un wrapper fijo (`<i4>`/`<i8>`, `<double>`, `<boolean>`,
  `<string>`, `<base64>`, `<array>`, `<struct>`, `<nil/>`).
- `&`, `<`, `>` se escapan; `\\r` se escribe como `&#13;` para que el parser
  no lo normalice a `\\n`.

Decoding:
- Valida la estructura, decodifica arrays/structs recursivamente en orden y
  lanza `MalformedError` ante tags desconocidos, literales inválidos o
  XML truncado.
"""

from __future__ import annotations

import base64
import binascii
import re
import xml.etree.ElementTree as ET
from typing import Callable, TypeVar

from rtorrent_rpc.core.domain.values import (
    Array,
    Base64,
    Boolean,
    Double,
    Integer,
    Nil,
    String,
    Struct,
    WireValue,
)
from rtorrent_rpc.core.errors import MalformedError, TypeMismatchError

_NIL_EXT_TAG = "{http://ws.apache.org/xmlrpc/namespaces/extensions}nil"
_INT_LITERAL_RE = re.compile(r"^[+-]?[0-9]+$")
_XML_INVALID_RE = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")

W = TypeVar("W", Integer, Double, Boolean, String, Base64, Array, Struct, Nil)


def escape_text(text: str) -> str:
    if _XML_INVALID_RE.search(text):
        raise ValueError("string contains characters that XML 1.0 cannot carry")
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace("\r", "&#13;")
    )


def value_to_xml(value: WireValue) -> str:
    """Serializa un valor como fragmento `<value>…</value>`."""

    out: list[str] = []
    _write(value, out)
    return "".join(out)


def encode_value(value: WireValue) -> bytes:
    return value_to_xml(value).encode("utf-8")


def _write(value: WireValue, out: list[str]) -> None:
    out.append("<value>")
    if isinstance(value, Integer):
        tag = "i4" if value.fits_i4 else "i8"
        out.append(f"<{tag}>{value.value}</{tag}>")
    elif isinstance(value, Boolean):
        out.append(f"<boolean>{1 if value.value else 0}</boolean>")
    elif isinstance(value, Double):
        out.append(f"<double>{value.value!r}</double>")
    elif isinstance(value, String):
        out.append(f"<string>{escape_text(value.value)}</string>")
    elif isinstance(value, Base64):
        out.append(f"<base64>{base64.b64encode(value.value).decode('ascii')}</base64>")
    elif isinstance(value, Array):
        out.append("<array><data>")
        for item in value.items:
            _write(item, out)
        out.append("</data></array>")
    elif isinstance(value, Struct):
        out.append("<struct>")
        for name, member in value.members:
            out.append(f"<member><name>{escape_text(name)}</name>")
            _write(member, out)
            out.append("</member>")
        out.append("</struct>")
    elif isinstance(value, Nil):
        out.append("<nil/>")
    else:
        raise TypeError(f"not a wire value: {type(value).__name__}")
    out.append("</value>")


def parse_xml(data: bytes | str) -> ET.Element:
    """Parsea un documento completo; cualquier error de sintaxis es `MalformedError`."""

    try:
        return ET.fromstring(data)
    except ET.ParseError as exc:
        raise MalformedError(f"unparsable XML: {exc}") from exc


def decode_value(data: bytes | str) -> WireValue:
    root = parse_xml(data)
    return element_to_value(root)


def element_to_value(elem: ET.Element) -> WireValue:
    """Decodifica un elemento `<value>` ya parseado."""

    try:
        return _read_value(elem)
    except RecursionError as exc:
        raise MalformedError("value nesting is too deep") from exc


def _read_value(elem: ET.Element) -> WireValue:
    if elem.tag != "value":
        raise MalformedError(f"expected <value>, found <{elem.tag}>")
    children = list(elem)
    if not children:
        # Sin tipo explícito el contenido es un string.
        return String(elem.text or "")
    if len(children) != 1:
        raise MalformedError("<value> must hold exactly one typed element")
    child = children[0]
    if _has_text(elem.text) or _has_text(child.tail):
        raise MalformedError("<value> mixes text and a typed element")
    decoder = _DECODERS.get(child.tag)
    if decoder is None:
        raise MalformedError(f"unknown value type <{child.tag}>")
    return decoder(child)


def _has_text(text: str | None) -> bool:
    return bool(text and text.strip())


def _scalar_text(elem: ET.Element) -> str:
    if len(elem):
        raise MalformedError(f"<{elem.tag}> must not contain child elements")
    return elem.text or ""


def _element_children(elem: ET.Element, tag: str) -> list[ET.Element]:
    if _has_text(elem.text):
        raise MalformedError(f"unexpected text inside <{elem.tag}>")
    children = list(elem)
    for child in children:
        if child.tag != tag:
            raise MalformedError(f"unexpected <{child.tag}> inside <{elem.tag}>")
        if _has_text(child.tail):
            raise MalformedError(f"unexpected text inside <{elem.tag}>")
    return children


def _read_int(elem: ET.Element) -> Integer:
    text = _scalar_text(elem).strip()
    if not _INT_LITERAL_RE.match(text):
        raise MalformedError(f"invalid integer literal {text!r}")
    try:
        return Integer(int(text))
    except ValueError as exc:
        raise MalformedError(str(exc)) from exc


def _read_boolean(elem: ET.Element) -> Boolean:
    text = _scalar_text(elem).strip()
    if text not in ("0", "1"):
        raise MalformedError(f"invalid boolean literal {text!r}")
    return Boolean(text == "1")


def _read_double(elem: ET.Element) -> Double:
    text = _scalar_text(elem).strip()
    try:
        return Double(float(text))
    except ValueError as exc:
        raise MalformedError(f"invalid double literal {text!r}") from exc


def _read_string(elem: ET.Element) -> String:
    return String(_scalar_text(elem))


def _read_base64(elem: ET.Element) -> Base64:
    text = "".join(_scalar_text(elem).split())
    try:
        return Base64(base64.b64decode(text, validate=True))
    except binascii.Error as exc:
        raise MalformedError(f"invalid base64 payload: {exc}") from exc


def _read_array(elem: ET.Element) -> Array:
    data = _element_children(elem, "data")
    if len(data) != 1:
        raise MalformedError("<array> must hold exactly one <data>")
    return Array(tuple(_read_value(item) for item in _element_children(data[0], "value")))


def _read_struct(elem: ET.Element) -> Struct:
    members: list[tuple[str, WireValue]] = []
    seen: set[str] = set()
    for member in _element_children(elem, "member"):
        if _has_text(member.text):
            raise MalformedError("unexpected text inside <member>")
        parts = {child.tag: child for child in member}
        if len(member) != 2 or set(parts) != {"name", "value"}:
            raise MalformedError("<member> must hold one <name> and one <value>")
        name = _scalar_text(parts["name"])
        if name in seen:
            raise MalformedError(f"duplicate struct member {name!r}")
        seen.add(name)
        members.append((name, _read_value(parts["value"])))
    return Struct(tuple(members))


def _read_nil(elem: ET.Element) -> Nil:
    if _scalar_text(elem).strip():
        raise MalformedError("<nil/> must be empty")
    return Nil()


_DECODERS: dict[str, Callable[[ET.Element], WireValue]] = {
    "int": _read_int,
    "i4": _read_int,
    "i8": _read_int,
    "boolean": _read_boolean,
    "double": _read_double,
    "string": _read_string,
    "base64": _read_base64,
    "array": _read_array,
    "struct": _read_struct,
    "nil": _read_nil,
    _NIL_EXT_TAG: _read_nil,
}


def expect(value: WireValue, kind: type[W]) -> W:
    """Exige que `value` sea de la variante `kind` (si no, `TypeMismatchError`)."""

    if not isinstance(value, kind):
        raise TypeMismatchError(kind.__name__, value)
    return value
