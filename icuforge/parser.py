"""ICU MessageFormat parser.

Turns a message string into a flat tuple of typed elements. Plural, select
and selectordinal bodies are kept as raw strings on the tree; call
:func:`parse` again on a variant's ``text`` to inspect nested structure.
Bodies are still validated while parsing, so a message either parses
completely or raises :class:`~icuforge.errors.ParseError`.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional

from .cursor import Cursor
from .errors import ParseError
from .structures import (
    ArgumentElement,
    Element,
    ParsedMessage,
    PluralElement,
    PluralVariant,
    SelectElement,
    SelectOption,
    SelectOrdinalElement,
    TextElement,
)

PATTERN_MARKERS = (
    ", plural,",
    ",plural,",
    ", select,",
    ",select,",
    ", selectordinal,",
    ",selectordinal,",
)

SIMPLE_ARGUMENT_PATTERN = re.compile(r"^\{[a-zA-Z_][a-zA-Z0-9_]*\}$")


class _MessageParser:
    """Recursive-descent parser over a single message or nested body."""

    def __init__(
        self,
        text: str,
        *,
        origin: Optional[str] = None,
        base: int = 0,
        variables: Optional[Dict[str, None]] = None,
    ) -> None:
        self.cursor = Cursor(text)
        self.origin = text if origin is None else origin
        self.base = base
        self.variables: Dict[str, None] = {} if variables is None else variables
        self.has_plurals = False
        self.has_select = False

    def error(self, message: str, position: Optional[int] = None) -> ParseError:
        local = self.cursor.position if position is None else position
        return ParseError(message, self.origin, self.base + local)

    def parse_elements(self) -> List[Element]:
        elements: List[Element] = []
        cursor = self.cursor
        while not cursor.is_end():
            char = cursor.peek()
            if char == "{":
                elements.append(self._parse_placeholder())
            elif char == "}":
                raise self.error("Unmatched braces in message")
            else:
                elements.append(self._parse_text())
        return elements

    def _parse_text(self) -> TextElement:
        cursor = self.cursor
        start = cursor.position
        parts: List[str] = []
        while not cursor.is_end():
            char = cursor.peek()
            if char in ("{", "}"):
                break
            if char == "'" and cursor.peek(1) == "'":
                parts.append("'")
                cursor.advance()
                cursor.advance()
            elif cursor.starts_quote():
                parts.append(cursor.read_quoted())
            else:
                parts.append(cursor.advance())  # type: ignore[arg-type]
        return TextElement(value="".join(parts), start=start, end=cursor.position)

    def _parse_placeholder(self) -> Element:
        cursor = self.cursor
        start = cursor.position
        cursor.advance()  # consume '{'
        cursor.skip_whitespace()

        name = cursor.read_identifier()
        if not name:
            raise self.error("Expected identifier in argument", start)
        self.variables.setdefault(name, None)
        cursor.skip_whitespace()

        char = cursor.peek()
        if char == "}":
            cursor.advance()
            return ArgumentElement(name=name, start=start, end=cursor.position)
        if char is None:
            raise self.error("Unmatched braces in message")
        if char != ",":
            raise self.error(f"Unexpected character '{char}' in argument")

        cursor.advance()  # consume ','
        cursor.skip_whitespace()
        keyword = cursor.read_identifier()
        cursor.skip_whitespace()

        if keyword in ("plural", "selectordinal"):
            self.has_plurals = True
            return self._parse_plural(name, start, ordinal=keyword == "selectordinal")
        if keyword == "select":
            self.has_select = True
            return self._parse_select(name, start)
        if not keyword:
            raise self.error("Expected argument type")
        return self._parse_typed_argument(name, keyword, start)

    def _parse_typed_argument(self, name: str, arg_type: str, start: int) -> ArgumentElement:
        cursor = self.cursor
        format_value: Optional[str] = None
        if cursor.peek() == ",":
            cursor.advance()
            cursor.skip_whitespace()
            format_value = cursor.read_until("}", raw=True).strip() or None

        cursor.skip_whitespace()
        if cursor.is_end():
            raise self.error("Unmatched braces in message")
        if cursor.peek() != "}":
            raise self.error("Expected } after argument")
        cursor.advance()

        return ArgumentElement(
            name=name,
            arg_type=arg_type,
            format_style=format_value,
            start=start,
            end=cursor.position,
        )

    def _parse_offset(self) -> Optional[int]:
        cursor = self.cursor
        mark = cursor.position
        if cursor.read_identifier() != "offset":
            cursor.position = mark
            return None
        cursor.skip_whitespace()
        if cursor.peek() != ":":
            cursor.position = mark
            return None
        cursor.advance()
        cursor.skip_whitespace()

        value_start = cursor.position
        raw_value = cursor.read_identifier()
        try:
            return int(raw_value)
        except ValueError:
            raise self.error("Invalid offset value", value_start) from None

    def _parse_plural(self, name: str, start: int, *, ordinal: bool) -> Element:
        cursor = self.cursor
        offset: Optional[int] = None
        if cursor.peek() == ",":
            cursor.advance()
            cursor.skip_whitespace()
            offset = self._parse_offset()

        variants: List[PluralVariant] = []
        while True:
            cursor.skip_whitespace()
            char = cursor.peek()
            if char is None:
                raise self.error("Unmatched braces in message")
            if char == "}":
                cursor.advance()
                break

            if char == "=":
                cursor.advance()
                literal = cursor.read_identifier()
                category = f"={literal}" if literal else ""
            else:
                category = cursor.read_identifier()
            if not category:
                raise self.error("Expected plural category")

            cursor.skip_whitespace()
            if cursor.peek() != "{":
                raise self.error("Expected { after plural category")
            cursor.advance()

            variants.append(PluralVariant(category=category, text=self._read_body()))

        if ordinal:
            return SelectOrdinalElement(
                name=name,
                variants=tuple(variants),
                start=start,
                end=cursor.position,
            )
        return PluralElement(
            name=name,
            variants=tuple(variants),
            offset=offset,
            start=start,
            end=cursor.position,
        )

    def _parse_select(self, name: str, start: int) -> SelectElement:
        cursor = self.cursor
        if cursor.peek() == ",":
            cursor.advance()

        options: List[SelectOption] = []
        while True:
            cursor.skip_whitespace()
            char = cursor.peek()
            if char is None:
                raise self.error("Unmatched braces in message")
            if char == "}":
                cursor.advance()
                break

            key = cursor.read_identifier()
            if not key:
                raise self.error("Expected select key")

            cursor.skip_whitespace()
            if cursor.peek() != "{":
                raise self.error("Expected { after select key")
            cursor.advance()

            options.append(SelectOption(key=key, value=self._read_body()))

        return SelectElement(
            name=name,
            options=tuple(options),
            start=start,
            end=cursor.position,
        )

    def _read_body(self) -> str:
        """Read a variant or option body and validate its nested content."""

        body_start = self.cursor.position
        body = self.cursor.read_balanced()
        if body is None:
            raise self.error("Unmatched braces in message")

        nested = _MessageParser(
            body,
            origin=self.origin,
            base=self.base + body_start,
            variables=self.variables,
        )
        nested.parse_elements()
        self.has_plurals = self.has_plurals or nested.has_plurals
        self.has_select = self.has_select or nested.has_select
        return body


def parse(message: str) -> ParsedMessage:
    """Parse an ICU message into a :class:`ParsedMessage`."""

    parser = _MessageParser(message)
    elements = parser.parse_elements()
    return ParsedMessage(
        original=message,
        elements=tuple(elements),
        has_plurals=parser.has_plurals,
        has_select=parser.has_select,
        variables=tuple(parser.variables),
    )


def has_patterns(message: str) -> bool:
    """Quick check for plural, select or selectordinal constructs."""

    if "{" not in message:
        return False
    return any(marker in message for marker in PATTERN_MARKERS)


def is_simple_argument(message: str) -> bool:
    return bool(SIMPLE_ARGUMENT_PATTERN.match(message.strip()))


def extract_variables(message: str) -> List[str]:
    return list(parse(message).variables)
