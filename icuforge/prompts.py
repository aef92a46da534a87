"""Translator instructions derived from parsed messages and plural rules."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .errors import ParseError
from .parser import parse
from .plurals import (
    PluralCategory,
    format_category_description,
    get_cardinal_categories,
    get_ordinal_categories,
)
from .structures import PluralElement, PluralVariant, SelectElement, SelectOrdinalElement

PLACEHOLDER_PATTERN = re.compile(r"\{[^}]+\}|<[^>]+>|</[^>]+>")
BARE_PLACEHOLDER_PATTERN = re.compile(r"^\{[^}]+\}$")


@dataclass
class TranslationCheck:
    valid: bool
    issues: List[str] = field(default_factory=list)


def build_icu_instructions(source: str, target_language: str) -> Optional[str]:
    """Describe how to translate the ICU constructs in ``source``.

    Returns None when the message cannot be parsed or has no plural or
    select constructs.
    """

    try:
        parsed = parse(source)
    except ParseError:
        return None

    if not parsed.is_complex:
        return None

    instructions: List[str] = []

    if any(isinstance(element, PluralElement) for element in parsed.elements):
        categories = get_cardinal_categories(target_language)
        instructions.append(
            f"This contains plural forms. Target language ({target_language}) "
            f"requires: {_join(categories)}. "
            "Provide translations for each required plural category. "
            f"Categories: {_describe(categories, target_language, False)}."
        )

    if any(isinstance(element, SelectOrdinalElement) for element in parsed.elements):
        categories = get_ordinal_categories(target_language)
        instructions.append(
            f"This contains ordinal forms. Target language ({target_language}) "
            f"requires: {_join(categories)}. "
            f"Categories: {_describe(categories, target_language, True)}."
        )

    if any(isinstance(element, SelectElement) for element in parsed.elements):
        instructions.append(
            "This contains select patterns. Translate each option value "
            "while keeping option keys unchanged."
        )

    # Plurals nested inside select options have no top-level element.
    top_level_plural = any(
        isinstance(element, (PluralElement, SelectOrdinalElement))
        for element in parsed.elements
    )
    if parsed.has_plurals and not top_level_plural:
        categories = get_cardinal_categories(target_language)
        instructions.append(
            f"This contains nested plural forms. Target language ({target_language}) "
            f"requires: {_join(categories)}."
        )

    return " ".join(instructions) or None


def build_plural_prompt(
    variable: str,
    source_variants: Sequence[PluralVariant],
    source_language: str,
    target_language: str,
    target_categories: Sequence[PluralCategory],
) -> str:
    """Build a prompt asking for one translation per target category."""

    lines = [
        f'Translate the following plural forms for the variable "{{{variable}}}" '
        f"from {source_language} to {target_language}.",
        "",
        f"The target language ({target_language}) requires these plural categories:",
    ]
    lines.extend(
        f"- {format_category_description(category, target_language)}"
        for category in target_categories
    )
    lines.append("")
    lines.append("Source plural forms:")
    lines.extend(f'- {variant.category}: "{variant.text}"' for variant in source_variants)
    lines.extend(
        [
            "",
            "IMPORTANT:",
            f"- Keep the placeholder {{{variable}}} or # (which represents the count) "
            "in all translations",
            "- Translate ONLY the text, not the ICU syntax",
            "- Provide a translation for EACH required category",
            "",
            "Respond with JSON:",
            '{"plurals": [{"category": "one", "translation": "..."}, '
            '{"category": "other", "translation": "..."}]}',
        ]
    )
    return "\n".join(lines)


def validate_translation(
    source: str,
    translation: str,
    *,
    preserve_placeholders: bool = True,
) -> TranslationCheck:
    """Check that a translation kept placeholders and actually changed."""

    issues: List[str] = []

    if preserve_placeholders:
        source_placeholders = set(PLACEHOLDER_PATTERN.findall(source))
        translated_placeholders = set(PLACEHOLDER_PATTERN.findall(translation))
        for placeholder in sorted(source_placeholders - translated_placeholders):
            issues.append(f"Missing placeholder: {placeholder}")
        for placeholder in sorted(translated_placeholders - source_placeholders):
            issues.append(f"Unexpected placeholder: {placeholder}")

    if not translation.strip():
        issues.append("Translation is empty")

    if (
        source == translation
        and len(source) > 3
        and not BARE_PLACEHOLDER_PATTERN.match(source)
    ):
        issues.append("Translation appears to be identical to source")

    return TranslationCheck(valid=not issues, issues=issues)


def _join(categories: Sequence[PluralCategory]) -> str:
    return ", ".join(category.value for category in categories)


def _describe(
    categories: Sequence[PluralCategory],
    language: str,
    ordinal: bool,
) -> str:
    return "; ".join(
        format_category_description(category, language, ordinal)
        for category in categories
    )
