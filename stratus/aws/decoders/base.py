"""Streaming XML response decoders.

A decoder turns the raw body of one action's response into an immutable,
typed record.  It walks start/end element events from
:class:`xml.etree.ElementTree.XMLPullParser`, keeping a stack of open
elements:

* leaving a leaf element commits its text, typed by element name, into
  the enclosing record;
* leaving an element that had children commits the nested record;
* list items (``<item>``, ``<Error>``) accumulate, in document order, into
  a tuple stored under the enclosing set element.

Subclasses only declare which element names carry integers, booleans or
timestamps, which set elements may be empty, and which top-level fields
must be present.
"""

from __future__ import annotations

from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, ClassVar, Mapping
from xml.etree.ElementTree import ParseError, XMLPullParser

from stratus.base.exceptions import DecodeError, ProviderError

DecodedResponse = Mapping[str, Any]

_TIME_FORMATS = ("%Y-%m-%dT%H:%M:%S.%fZ", "%Y-%m-%dT%H:%M:%SZ")
_BOOLEANS = {"true": True, "false": False}


def parse_time(text: str) -> datetime:
    """Parse a provider timestamp such as ``2009-04-04T11:51:50.000Z`` (UTC)."""
    for fmt in _TIME_FORMATS:
        try:
            return datetime.strptime(text, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    raise DecodeError(f"Unrecognised timestamp: {text!r}")


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


class _Frame:
    """One open element on the decoder stack."""

    __slots__ = ("name", "fields", "items")

    def __init__(self, name: str) -> None:
        self.name = name
        self.fields: dict[str, Any] = {}
        self.items: list[Any] | None = None


class Decoder:
    """Base decoder: element structure in, read-only typed record out.

    Attributes:
        integers: Element names whose text is parsed as ``int``.
        booleans: Element names whose text is ``true`` / ``false``.
        timestamps: Element names whose text is a provider timestamp.
        sequences: Set elements that decode to ``()`` when they are empty.
        required: Top-level fields that must be present and non-empty.
    """

    integers: ClassVar[frozenset[str]] = frozenset()
    booleans: ClassVar[frozenset[str]] = frozenset()
    timestamps: ClassVar[frozenset[str]] = frozenset()
    sequences: ClassVar[frozenset[str]] = frozenset()
    required: ClassVar[frozenset[str]] = frozenset()

    item_tags: ClassVar[frozenset[str]] = frozenset({"item", "Error"})

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    def decode(self, body: bytes | str) -> DecodedResponse:
        """Decode a complete response body.

        Raises:
            ProviderError: If the body is a provider fault payload.
            DecodeError: If the body does not have the expected shape.
        """
        record = self._parse(body)
        if "Errors" in record:
            if not record["Errors"]:
                raise DecodeError("Response carries an empty <Errors> element")
            raise fault_from_record(record)
        missing = sorted(
            name for name in self.required if record.get(name) in (None, "")
        )
        if missing:
            raise DecodeError(
                f"{type(self).__name__}: missing required field(s) {', '.join(missing)}"
            )
        return record

    # ── state machine ─────────────────────────────────────────────────

    def _parse(self, body: bytes | str) -> DecodedResponse:
        parser = XMLPullParser(events=("start", "end"))
        stack: list[_Frame] = []
        root: DecodedResponse | None = None
        try:
            parser.feed(body)
            parser.close()
            for event, elem in parser.read_events():
                if event == "start":
                    stack.append(_Frame(_local_name(elem.tag)))
                    continue
                frame = stack.pop()
                value = self._value(frame, elem.text)
                elem.clear()
                if not stack:
                    root = value
                elif frame.name in self.item_tags:
                    self._append(stack[-1], value)
                else:
                    self._assign(stack[-1], frame.name, value)
        except ParseError as e:
            raise DecodeError(f"Malformed response body: {e}") from e
        if not isinstance(root, Mapping):
            raise DecodeError("Response root element has no fields")
        return root

    def _append(self, parent: _Frame, value: Any) -> None:
        if parent.fields:
            raise DecodeError(f"<{parent.name}> mixes list items and fields")
        if parent.items is None:
            parent.items = []
        parent.items.append(value)

    def _assign(self, parent: _Frame, name: str, value: Any) -> None:
        if parent.items is not None:
            raise DecodeError(f"<{parent.name}> mixes list items and fields")
        if name in parent.fields:
            raise DecodeError(f"Unexpected repeated element <{name}> in <{parent.name}>")
        parent.fields[name] = value

    def _value(self, frame: _Frame, text: str | None) -> Any:
        if frame.items is not None:
            return tuple(frame.items)
        if frame.fields:
            return MappingProxyType(frame.fields)
        text = (text or "").strip()
        if frame.name in self.sequences:
            if text:
                raise DecodeError(f"<{frame.name}> expected list items, got text")
            return ()
        return self.convert(frame.name, text)

    def convert(self, name: str, text: str) -> Any:
        """Type the text of leaf element *name*."""
        if name in self.integers:
            if not text:
                return None
            try:
                return int(text)
            except ValueError:
                raise DecodeError(f"<{name}> is not an integer: {text!r}") from None
        if name in self.booleans:
            if not text:
                return None
            try:
                return _BOOLEANS[text.lower()]
            except KeyError:
                raise DecodeError(f"<{name}> is not a boolean: {text!r}") from None
        if name in self.timestamps:
            return parse_time(text) if text else None
        return text


class BasicDecoder(Decoder):
    """Shared decoder for actions answering with a success flag only.

    ``<Response><return>true</return><requestId>...</requestId></Response>``
    decodes to ``{"return": True, "requestId": "..."}``.
    """

    booleans = frozenset({"return"})
    required = frozenset({"return"})


class ErrorDecoder(Decoder):
    """Decoder for fault payloads (``<Response><Errors><Error>...``)."""

    sequences = frozenset({"Errors"})

    def decode(self, body: bytes | str) -> DecodedResponse:
        return self._parse(body)


def fault_from_record(
    record: DecodedResponse, status: int | None = None
) -> ProviderError:
    """Build a :class:`ProviderError` from a decoded fault payload."""
    errors = record.get("Errors") or ()
    first: Mapping[str, Any] = errors[0] if errors else {}
    if not isinstance(first, Mapping):
        first = {}
    return ProviderError(
        first.get("Code"),
        first.get("Message"),
        status=status,
        request_id=record.get("RequestID") or record.get("RequestId"),
    )
