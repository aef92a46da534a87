"""CLDR plural category requirements per language.

Languages differ in the plural categories their messages must provide:
English needs ``one`` and ``other``, Russian needs ``one``, ``few``,
``many`` and ``other``, Arabic uses all six, and Japanese only ``other``.
The table below records which categories a translation into a language must
cover, for cardinal and ordinal use, together with example numbers that are
useful when asking a translator for each form.

See: https://cldr.unicode.org/index/cldr-spec/plural-rules
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

Number = Union[int, float]


class PluralCategory(str, Enum):
    """CLDR plural categories in canonical order."""

    ZERO = "zero"
    ONE = "one"
    TWO = "two"
    FEW = "few"
    MANY = "many"
    OTHER = "other"


CATEGORY_ORDER: Tuple[PluralCategory, ...] = tuple(PluralCategory)

CATEGORY_DESCRIPTIONS: Mapping[PluralCategory, str] = MappingProxyType(
    {
        PluralCategory.ZERO: "Used for zero quantity",
        PluralCategory.ONE: "Used for singular (typically 1)",
        PluralCategory.TWO: "Used for dual (typically 2)",
        PluralCategory.FEW: "Used for small numbers",
        PluralCategory.MANY: "Used for larger numbers",
        PluralCategory.OTHER: "Default/fallback form",
    }
)

MAX_DESCRIBED_EXAMPLES = 5


@dataclass(frozen=True)
class PluralRuleSet:
    """Plural categories a language requires, with example numbers."""

    cardinal_categories: Tuple[PluralCategory, ...]
    ordinal_categories: Tuple[PluralCategory, ...]
    cardinal_examples: Mapping[PluralCategory, Tuple[Number, ...]]
    ordinal_examples: Mapping[PluralCategory, Tuple[Number, ...]]


def _examples(raw: Mapping[str, Sequence[Number]]) -> Mapping[PluralCategory, Tuple[Number, ...]]:
    if "other" not in raw:
        raise ValueError("A plural rule set must always define 'other'.")
    return MappingProxyType(
        {
            category: tuple(raw[category.value])
            for category in CATEGORY_ORDER
            if category.value in raw
        }
    )


def _rule_set(
    cardinal: Mapping[str, Sequence[Number]],
    ordinal: Mapping[str, Sequence[Number]],
) -> PluralRuleSet:
    cardinal_examples = _examples(cardinal)
    ordinal_examples = _examples(ordinal)
    return PluralRuleSet(
        cardinal_categories=tuple(cardinal_examples),
        ordinal_categories=tuple(ordinal_examples),
        cardinal_examples=cardinal_examples,
        ordinal_examples=ordinal_examples,
    )


_ONE_OTHER = {"one": [1], "other": [0, 2, 3, 4, 5, 10, 100]}
_OTHER_ONLY = {"other": [0, 1, 2, 3, 4, 5, 10, 100]}
_ORDINAL_OTHER = {"other": [1, 2, 3, 4, 5, 10, 100]}

_EAST_SLAVIC = {
    "one": [1, 21, 31, 41, 51, 61],
    "few": [2, 3, 4, 22, 23, 24, 32, 33, 34],
    "many": [0, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15, 16, 17, 18, 19, 20],
    "other": [1.5, 2.5],
}
_WEST_SLAVIC = {
    "one": [1],
    "few": [2, 3, 4],
    "many": [1.5, 2.5],
    "other": [0, 5, 6, 7, 8, 9, 10, 11, 100],
}
_SOUTH_SLAVIC = {
    "one": [1, 21, 31, 41],
    "few": [2, 3, 4, 22, 23, 24],
    "other": [0, 5, 6, 7, 8, 9, 10, 11],
}
_ROMANCE = {
    "one": [1],
    "many": [1000000],
    "other": [0, 2, 3, 4, 5, 10, 100],
}
_INDIC_ORDINAL = {
    "one": [1],
    "two": [2, 3],
    "few": [4],
    "many": [6],
    "other": [5, 7, 8, 9, 10, 100],
}


def _build_table() -> Mapping[str, PluralRuleSet]:
    table: Dict[str, PluralRuleSet] = {}

    # Two-category cardinal languages without ordinal distinctions.
    for language in ("de", "nl", "da", "nb", "fi", "et", "el", "tr"):
        table[language] = _rule_set(_ONE_OTHER, _ORDINAL_OTHER)

    table["en"] = _rule_set(
        _ONE_OTHER,
        {
            "one": [1, 21, 31, 41],
            "two": [2, 22, 32, 42],
            "few": [3, 23, 33, 43],
            "other": [4, 5, 6, 7, 8, 9, 10, 11, 12, 13],
        },
    )
    table["sv"] = _rule_set(
        _ONE_OTHER,
        {"one": [1, 2, 21, 22, 31, 32], "other": [3, 4, 5, 10, 100]},
    )
    table["hu"] = _rule_set(
        _ONE_OTHER,
        {"one": [1, 5], "other": [2, 3, 4, 6, 7, 8, 9, 10]},
    )
    table["fa"] = _rule_set(
        {"one": [0, 1], "other": [2, 3, 4, 5, 10, 100]},
        _ORDINAL_OTHER,
    )
    table["hi"] = _rule_set(
        {"one": [0, 1], "other": [2, 3, 4, 5, 10, 100]},
        _INDIC_ORDINAL,
    )
    table["bn"] = _rule_set(
        {"one": [0, 1], "other": [2, 3, 4, 5, 10, 100]},
        {
            "one": [1, 5, 7, 8, 9, 10],
            "two": [2, 3],
            "few": [4],
            "many": [6],
            "other": [0, 11, 12, 13, 14],
        },
    )

    # Romance languages mark large round numbers ("un million de").
    table["fr"] = _rule_set(
        {"one": [0, 1], "many": [1000000], "other": [2, 3, 4, 5, 10, 100]},
        {"one": [1], "other": [2, 3, 4, 5, 10, 100]},
    )
    table["es"] = _rule_set(_ROMANCE, _ORDINAL_OTHER)
    table["pt"] = _rule_set(_ROMANCE, _ORDINAL_OTHER)
    table["it"] = _rule_set(
        _ROMANCE,
        {"many": [8, 11, 80, 800], "other": [1, 2, 3, 4, 5, 10, 100]},
    )
    table["ro"] = _rule_set(
        {"one": [1], "few": [0, 2, 3, 4, 5, 16, 101], "other": [20, 21, 22, 100]},
        {"one": [1], "other": [0, 2, 3, 4, 5]},
    )

    # Slavic and Baltic languages.
    table["ru"] = _rule_set(_EAST_SLAVIC, _ORDINAL_OTHER)
    table["uk"] = _rule_set(
        {**_EAST_SLAVIC, "one": [1, 21, 31, 41]},
        {"few": [3, 23, 33, 43], "other": [1, 2, 4, 5, 10, 100]},
    )
    table["be"] = _rule_set(
        {**_EAST_SLAVIC, "one": [1, 21, 31, 41]},
        {"few": [2, 3, 22, 23], "other": [0, 1, 4, 5, 10, 100]},
    )
    table["pl"] = _rule_set(
        {
            "one": [1],
            "few": [2, 3, 4, 22, 23, 24, 32, 33, 34],
            "many": [0, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15, 16, 17, 18, 19, 20, 25],
            "other": [1.5, 2.5],
        },
        _ORDINAL_OTHER,
    )
    for language in ("cs", "sk"):
        table[language] = _rule_set(_WEST_SLAVIC, _ORDINAL_OTHER)
    for language in ("hr", "sr", "bs"):
        table[language] = _rule_set(_SOUTH_SLAVIC, _ORDINAL_OTHER)
    table["sl"] = _rule_set(
        {
            "one": [1, 101, 201],
            "two": [2, 102, 202],
            "few": [3, 4, 103, 104],
            "other": [0, 5, 6, 7, 8, 9, 10],
        },
        _ORDINAL_OTHER,
    )
    table["lt"] = _rule_set(
        {
            "one": [1, 21, 31, 41],
            "few": [2, 3, 4, 5, 6, 7, 8, 9, 22],
            "many": [0.1, 0.5, 1.5],
            "other": [0, 10, 11, 12, 20, 30],
        },
        _ORDINAL_OTHER,
    )
    table["lv"] = _rule_set(
        {
            "zero": [0, 10, 11, 12, 20, 30],
            "one": [1, 21, 31, 41],
            "other": [2, 3, 4, 5, 22],
        },
        _ORDINAL_OTHER,
    )

    table["he"] = _rule_set(
        {
            "one": [1],
            "two": [2],
            "many": [20, 30, 100],
            "other": [0, 3, 4, 5, 10, 11, 12],
        },
        _ORDINAL_OTHER,
    )
    table["ga"] = _rule_set(
        {
            "one": [1],
            "two": [2],
            "few": [3, 4, 5, 6],
            "many": [7, 8, 9, 10],
            "other": [0, 11, 12, 20],
        },
        {"one": [1], "other": [0, 2, 3, 4, 5]},
    )

    # Six-category languages.
    table["ar"] = _rule_set(
        {
            "zero": [0],
            "one": [1],
            "two": [2],
            "few": [3, 4, 5, 6, 7, 8, 9, 10, 103, 104, 105],
            "many": [11, 12, 13, 14, 15, 16, 17, 18, 19, 99, 111, 112],
            "other": [100, 101, 102, 200, 201, 202],
        },
        _ORDINAL_OTHER,
    )
    table["cy"] = _rule_set(
        {
            "zero": [0],
            "one": [1],
            "two": [2],
            "few": [3],
            "many": [6],
            "other": [4, 5, 7, 8, 9, 10],
        },
        {
            "zero": [0, 7, 8, 9],
            "one": [1],
            "two": [2],
            "few": [3, 4],
            "many": [5, 6],
            "other": [10, 11, 12, 13],
        },
    )

    # Languages without grammatical number.
    for language in ("ja", "zh", "ko", "th", "id"):
        table[language] = _rule_set(_OTHER_ONLY, _ORDINAL_OTHER)
    table["vi"] = _rule_set(
        _OTHER_ONLY,
        {"one": [1], "other": [2, 3, 4, 5, 10, 100]},
    )

    return MappingProxyType(table)


PLURAL_RULES: Mapping[str, PluralRuleSet] = _build_table()

DEFAULT_RULES = _rule_set(_ONE_OTHER, _ORDINAL_OTHER)

_SUBTAG_SEPARATOR = re.compile(r"[-_]")


def normalise_language(language: str) -> str:
    """Return the lowercase primary subtag of a language tag."""

    return _SUBTAG_SEPARATOR.split(language.strip().lower(), maxsplit=1)[0]


def get_plural_rules(language: str) -> PluralRuleSet:
    """Return the rule set for a tag such as ``en``, ``en-US`` or ``zh-Hans``."""

    normalised = normalise_language(language or "")
    if not normalised:
        return DEFAULT_RULES
    return PLURAL_RULES.get(normalised, DEFAULT_RULES)


def get_cardinal_categories(language: str) -> Tuple[PluralCategory, ...]:
    return get_plural_rules(language).cardinal_categories


def get_ordinal_categories(language: str) -> Tuple[PluralCategory, ...]:
    return get_plural_rules(language).ordinal_categories


def coerce_category(category: Union[str, PluralCategory]) -> Optional[PluralCategory]:
    """Map a category name to :class:`PluralCategory`, or None if unknown."""

    try:
        return PluralCategory(category)
    except ValueError:
        return None


def get_category_examples(
    language: str,
    category: Union[str, PluralCategory],
    ordinal: bool = False,
) -> List[Number]:
    """Return example numbers for a category, empty if the language lacks it."""

    rules = get_plural_rules(language)
    examples = rules.ordinal_examples if ordinal else rules.cardinal_examples
    resolved = coerce_category(category)
    if resolved is None:
        return []
    return list(examples.get(resolved, ()))


def format_category_description(
    category: Union[str, PluralCategory],
    language: str,
    ordinal: bool = False,
) -> str:
    """Describe a category for translator prompts, with up to five examples."""

    resolved = coerce_category(category)
    if resolved is None:
        raise ValueError(f"Unknown plural category '{category}'.")

    examples = get_category_examples(language, resolved, ordinal)
    example_text = ""
    if examples:
        shown = ", ".join(str(number) for number in examples[:MAX_DESCRIBED_EXAMPLES])
        example_text = f" (e.g., {shown})"
    return f"{resolved.value}: {CATEGORY_DESCRIPTIONS[resolved]}{example_text}"
