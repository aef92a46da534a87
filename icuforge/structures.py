"""Core data structures for icuforge."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .errors import TranslationInputError


@dataclass(frozen=True)
class PluralVariant:
    """One branch of a plural or selectordinal construct."""

    category: str
    text: str

    @property
    def is_exact_match(self) -> bool:
        return self.category.startswith("=")


@dataclass(frozen=True)
class SelectOption:
    """One branch of a select construct."""

    key: str
    value: str


@dataclass(frozen=True)
class TextElement:
    """Literal text with ICU quoting already resolved."""

    value: str
    start: int
    end: int


@dataclass(frozen=True)
class ArgumentElement:
    """A placeholder such as ``{name}`` or ``{amount, number, currency}``."""

    name: str
    start: int
    end: int
    arg_type: Optional[str] = None
    format_style: Optional[str] = None


@dataclass(frozen=True)
class PluralElement:
    name: str
    variants: Tuple[PluralVariant, ...]
    start: int
    end: int
    offset: Optional[int] = None


@dataclass(frozen=True)
class SelectOrdinalElement:
    name: str
    variants: Tuple[PluralVariant, ...]
    start: int
    end: int


@dataclass(frozen=True)
class SelectElement:
    name: str
    options: Tuple[SelectOption, ...]
    start: int
    end: int


Element = Union[
    TextElement,
    ArgumentElement,
    PluralElement,
    SelectOrdinalElement,
    SelectElement,
]


@dataclass(frozen=True)
class ParsedMessage:
    """Result of parsing a single ICU message.

    ``elements`` are in source order with non-overlapping spans.
    ``variables`` lists every distinct argument, plural and select name in
    first-seen order, including names found inside nested variant bodies.
    """

    original: str
    elements: Tuple[Element, ...]
    has_plurals: bool
    has_select: bool
    variables: Tuple[str, ...]

    @property
    def is_complex(self) -> bool:
        return self.has_plurals or self.has_select


@dataclass(frozen=True)
class Segment:
    """A translatable fragment of a parsed message."""

    index: int
    text: str
    context: Optional[str] = None


@dataclass(frozen=True)
class ReconstructOptions:
    target_language: str = "en"
    validate_categories: bool = False
    preserve_exact_matches: bool = True


@dataclass
class Translations:
    """Externally supplied translations routed back into a parsed message.

    Plain text is keyed by element index; plural, selectordinal and select
    replacements are keyed by variable name. ``plural_elements`` and
    ``select_elements`` are keyed by element index and take precedence, for
    messages that use the same variable in more than one construct.
    """

    text: Dict[int, str] = field(default_factory=dict)
    plurals: Dict[str, List[PluralVariant]] = field(default_factory=dict)
    selects: Dict[str, List[SelectOption]] = field(default_factory=dict)
    plural_elements: Dict[int, List[PluralVariant]] = field(default_factory=dict)
    select_elements: Dict[int, List[SelectOption]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Translations":
        """Build translations from a JSON-friendly mapping.

        Plural and select entries may be lists of objects
        (``{"category": ..., "text": ...}`` / ``{"key": ..., "value": ...}``)
        or ordered ``{category: text}`` mappings.
        """

        if not isinstance(data, Mapping):
            raise TranslationInputError(
                "Translations must be an object with optional 'text', "
                "'plurals' and 'selects' entries."
            )

        text: Dict[int, str] = {}
        for raw_index, value in (data.get("text") or {}).items():
            try:
                index = int(raw_index)
            except (TypeError, ValueError) as exc:
                raise TranslationInputError(
                    f"Text translation key '{raw_index}' is not an element index."
                ) from exc
            if not isinstance(value, str):
                raise TranslationInputError(
                    f"Text translation for element {index} must be a string."
                )
            text[index] = value

        plurals = {
            name: [
                PluralVariant(category=key, text=value)
                for key, value in _pairs(entries, "category", "text", name)
            ]
            for name, entries in (data.get("plurals") or {}).items()
        }
        selects = {
            name: [
                SelectOption(key=key, value=value)
                for key, value in _pairs(entries, "key", "value", name)
            ]
            for name, entries in (data.get("selects") or {}).items()
        }
        return cls(text=text, plurals=plurals, selects=selects)


def _pairs(
    entries: Any,
    key_field: str,
    value_field: str,
    variable: str,
) -> List[Tuple[str, str]]:
    """Normalise list-of-objects or mapping entries into ordered pairs."""

    if isinstance(entries, Mapping):
        items = list(entries.items())
    elif isinstance(entries, list):
        items = []
        for entry in entries:
            if not isinstance(entry, Mapping):
                raise TranslationInputError(
                    f"Entries for variable {{{variable}}} must be objects."
                )
            items.append((entry.get(key_field), entry.get(value_field)))
    else:
        raise TranslationInputError(
            f"Entries for variable {{{variable}}} must be a list or an object."
        )

    for key, value in items:
        if not isinstance(key, str) or not isinstance(value, str):
            raise TranslationInputError(
                f"Entries for variable {{{variable}}} need string "
                f"'{key_field}' and '{value_field}' values."
            )
    return items


@dataclass
class TextSegment:
    """A routed translation segment derived from a MessageUnit.

    ``kind`` is ``text``, ``plural``, ``select`` or ``opaque``; plural and
    select segments carry the variable name and the category or key.
    """

    segment_id: str
    unit_id: str
    text: str
    order: int
    kind: str = "text"
    element_index: Optional[int] = None
    variable: Optional[str] = None
    key: Optional[str] = None
    context: Optional[str] = None


@dataclass
class MessageUnit:
    """A single source message ready for translation.

    Opaque units failed to parse and are translated as one plain string.
    """

    unit_id: str
    source: str
    parsed: Optional[ParsedMessage] = None
    segments: List[TextSegment] = field(default_factory=list)

    @property
    def opaque(self) -> bool:
        return self.parsed is None
