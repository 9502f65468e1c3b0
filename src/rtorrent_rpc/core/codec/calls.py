"""Codec de envelopes XML-RPC (`methodCall` / `methodResponse`).

- `encode_call` / `decode_response`: lado cliente.
- `decode_call` / `encode_response` / `encode_fault`: lado daemon; los usan
  los dobles de test y la salida de depuración del CLI.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET

from rtorrent_rpc.core.codec.values import element_to_value, escape_text, parse_xml, value_to_xml
from rtorrent_rpc.core.domain.calls import CallOutcome, Fault, MethodCall, Success
from rtorrent_rpc.core.domain.values import Integer, String, Struct, WireValue
from rtorrent_rpc.core.errors import ProtocolViolationError

XML_DECLARATION = '<?xml version="1.0"?>\n'


def encode_call(call: MethodCall) -> bytes:
    params = "".join(f"<param>{value_to_xml(arg)}</param>" for arg in call.arguments)
    body = (
        f"{XML_DECLARATION}<methodCall>"
        f"<methodName>{escape_text(call.name)}</methodName>"
        f"<params>{params}</params>"
        "</methodCall>"
    )
    return body.encode("utf-8")


def decode_response(data: bytes | str) -> CallOutcome:
    """Decodifica un `methodResponse` en `Success` o `Fault`.

    Reglas:
    - `<fault>` debe traer un struct con `faultCode` (int) y `faultString` (string).
    - `<params>` debe traer exactamente un valor (convención de retorno único).
    - Cualquier otra forma es `ProtocolViolationError`.
    """

    root = parse_xml(data)
    if root.tag != "methodResponse":
        raise ProtocolViolationError(f"expected <methodResponse>, found <{root.tag}>")
    body = _only_child(root)
    if body.tag == "fault":
        return _read_fault(body)
    if body.tag == "params":
        return Success(_read_single_param(body))
    raise ProtocolViolationError(f"unexpected <{body.tag}> in <methodResponse>")


def decode_call(data: bytes | str) -> MethodCall:
    root = parse_xml(data)
    if root.tag != "methodCall":
        raise ProtocolViolationError(f"expected <methodCall>, found <{root.tag}>")
    children = _children(root)
    if not children or children[0].tag != "methodName":
        raise ProtocolViolationError("<methodCall> must start with <methodName>")
    name = (children[0].text or "").strip()
    arguments: list[WireValue] = []
    if len(children) == 2 and children[1].tag == "params":
        for param in _children(children[1]):
            if param.tag != "param":
                raise ProtocolViolationError(f"unexpected <{param.tag}> in <params>")
            arguments.append(element_to_value(_only_child(param)))
    elif len(children) != 1:
        raise ProtocolViolationError("unexpected content in <methodCall>")
    try:
        return MethodCall(name, tuple(arguments))
    except ValueError as exc:
        raise ProtocolViolationError(str(exc)) from exc


def encode_response(value: WireValue) -> bytes:
    body = (
        f"{XML_DECLARATION}<methodResponse>"
        f"<params><param>{value_to_xml(value)}</param></params>"
        "</methodResponse>"
    )
    return body.encode("utf-8")


def encode_fault(code: int, message: str) -> bytes:
    fault = Struct((("faultCode", Integer(code)), ("faultString", String(message))))
    body = f"{XML_DECLARATION}<methodResponse><fault>{value_to_xml(fault)}</fault></methodResponse>"
    return body.encode("utf-8")


def fault_from_struct(value: WireValue) -> Fault | None:
    """Interpreta un struct `{faultCode, faultString}`; `None` si no lo es."""

    if not isinstance(value, Struct):
        return None
    code = value.get("faultCode")
    message = value.get("faultString")
    if not isinstance(code, Integer) or not isinstance(message, String):
        return None
    return Fault(code.value, message.value)


def _children(elem: ET.Element) -> list[ET.Element]:
    if elem.text and elem.text.strip():
        raise ProtocolViolationError(f"unexpected text inside <{elem.tag}>")
    children = list(elem)
    for child in children:
        if child.tail and child.tail.strip():
            raise ProtocolViolationError(f"unexpected text inside <{elem.tag}>")
    return children


def _only_child(elem: ET.Element) -> ET.Element:
    children = _children(elem)
    if len(children) != 1:
        raise ProtocolViolationError(f"<{elem.tag}> must hold exactly one element, found {len(children)}")
    return children[0]


def _read_single_param(params: ET.Element) -> WireValue:
    items = _children(params)
    if len(items) != 1:
        raise ProtocolViolationError(f"response must carry exactly one value, found {len(items)}")
    param = items[0]
    if param.tag != "param":
        raise ProtocolViolationError(f"unexpected <{param.tag}> in <params>")
    return element_to_value(_only_child(param))


def _read_fault(body: ET.Element) -> Fault:
    fault = fault_from_struct(element_to_value(_only_child(body)))
    if fault is None:
        raise ProtocolViolationError("fault must be a struct with integer faultCode and string faultString")
    return fault
