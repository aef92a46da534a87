"""Character cursor used by the ICU message parser."""

from __future__ import annotations

from typing import Iterable, List, Optional

# Characters that an apostrophe can quote. Any other apostrophe is literal.
SYNTAX_CHARS = frozenset("{}#|")

_IDENTIFIER_EXTRA = frozenset("_-")


def _is_identifier_char(char: str) -> bool:
    return char in _IDENTIFIER_EXTRA or (char.isascii() and char.isalnum())


class Cursor:
    """A position-based cursor over a message string.

    The cursor knows about brace nesting and ICU apostrophe quoting:
    ``''`` is a literal apostrophe, and an apostrophe directly followed by a
    syntax character opens a quoted span that runs to the next lone
    apostrophe.
    """

    def __init__(self, source: str) -> None:
        self.source = source
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    @position.setter
    def position(self, value: int) -> None:
        self._pos = max(0, min(value, len(self.source)))

    def peek(self, offset: int = 0) -> Optional[str]:
        index = self._pos + offset
        if 0 <= index < len(self.source):
            return self.source[index]
        return None

    def advance(self) -> Optional[str]:
        char = self.peek()
        if char is not None:
            self._pos += 1
        return char

    def is_end(self) -> bool:
        return self._pos >= len(self.source)

    def starts_quote(self) -> bool:
        """Return True when the cursor sits on a quote-opening apostrophe."""

        following = self.peek(1)
        return self.peek() == "'" and following is not None and following in SYNTAX_CHARS

    def read_quoted(self, *, raw: bool = False) -> str:
        """Consume a quoted span starting at the opening apostrophe.

        Returns the quoted content with ``''`` decoded, or the exact source
        characters (both apostrophes included) when ``raw`` is set. An
        unterminated span runs to the end of the input.
        """

        start = self._pos
        self._pos += 1
        content: List[str] = []
        while not self.is_end():
            char = self.source[self._pos]
            if char == "'":
                if self.peek(1) == "'":
                    content.append("'")
                    self._pos += 2
                    continue
                self._pos += 1
                break
            content.append(char)
            self._pos += 1
        if raw:
            return self.source[start:self._pos]
        return "".join(content)

    def read_identifier(self) -> str:
        start = self._pos
        while not self.is_end() and _is_identifier_char(self.source[self._pos]):
            self._pos += 1
        return self.source[start:self._pos]

    def skip_whitespace(self) -> None:
        while not self.is_end() and self.source[self._pos].isspace():
            self._pos += 1

    def read_until(self, stop_chars: Iterable[str], *, raw: bool = False) -> str:
        """Read up to the first stop character outside nested braces.

        A ``}`` at depth zero always ends the read since it closes the
        enclosing construct. Quoted spans never terminate the read; they are
        decoded unless ``raw`` is set.
        """

        stops = frozenset(stop_chars)
        result: List[str] = []
        depth = 0
        while not self.is_end():
            char = self.source[self._pos]
            if char == "'":
                if self.peek(1) == "'":
                    result.append("''" if raw else "'")
                    self._pos += 2
                    continue
                if self.starts_quote():
                    result.append(self.read_quoted(raw=raw))
                    continue
            elif char == "{":
                depth += 1
            elif char == "}":
                if depth == 0:
                    break
                depth -= 1
            elif depth == 0 and char in stops:
                break
            result.append(char)
            self._pos += 1
        return "".join(result)

    def read_balanced(self) -> Optional[str]:
        """Read a brace-balanced body whose opening ``{`` was consumed.

        Nested braces are counted, quoted braces are not. The closing ``}``
        is consumed but not returned and the body is returned verbatim.
        Returns None when the input ends before the braces balance.
        """

        start = self._pos
        depth = 1
        while not self.is_end():
            char = self.source[self._pos]
            if char == "'":
                if self.peek(1) == "'":
                    self._pos += 2
                    continue
                if self.starts_quote():
                    self.read_quoted(raw=True)
                    continue
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    body = self.source[start:self._pos]
                    self._pos += 1
                    return body
            self._pos += 1
        return None
