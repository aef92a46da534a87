"""Rebuild valid ICU messages from a parsed tree and translated parts."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from .plurals import (
    CATEGORY_ORDER,
    PluralCategory,
    coerce_category,
    get_cardinal_categories,
    get_ordinal_categories,
)
from .structures import (
    ArgumentElement,
    ParsedMessage,
    PluralElement,
    PluralVariant,
    ReconstructOptions,
    SelectElement,
    SelectOption,
    SelectOrdinalElement,
    TextElement,
    Translations,
)

QUOTABLE_AFTER_APOSTROPHE = frozenset("'{}#|")


def reconstruct(
    parsed: ParsedMessage,
    translations: Optional[Translations] = None,
    options: Optional[ReconstructOptions] = None,
) -> str:
    """Reassemble a message, substituting any supplied translations.

    Untranslated text is copied from the original source so that a message
    without translations comes back unchanged. Arguments are re-emitted in
    canonical form, so ``{ name }`` comes back as ``{name}``.
    """

    translations = translations or Translations()
    options = options or ReconstructOptions()

    parts: List[str] = []
    for index, element in enumerate(parsed.elements):
        if isinstance(element, TextElement):
            translated = translations.text.get(index)
            if translated is None:
                parts.append(parsed.original[element.start:element.end])
            else:
                parts.append(escape_text(translated))
        elif isinstance(element, ArgumentElement):
            parts.append(
                reconstruct_argument(element.name, element.arg_type, element.format_style)
            )
        elif isinstance(element, PluralElement):
            variants = _choose_variants(
                element.variants,
                translations.plural_elements.get(index)
                or translations.plurals.get(element.name),
                options,
            )
            parts.append(
                reconstruct_plural(element.name, variants, element.offset, options)
            )
        elif isinstance(element, SelectOrdinalElement):
            variants = _choose_variants(
                element.variants,
                translations.plural_elements.get(index)
                or translations.plurals.get(element.name),
                options,
            )
            parts.append(reconstruct_selectordinal(element.name, variants, options))
        elif isinstance(element, SelectElement):
            chosen = _choose_options(
                element.options,
                translations.select_elements.get(index)
                or translations.selects.get(element.name),
            )
            parts.append(reconstruct_select(element.name, chosen))
        else:
            raise TypeError(f"Unsupported message element: {element!r}")
    return "".join(parts)


def reconstruct_argument(
    name: str,
    arg_type: Optional[str] = None,
    format_style: Optional[str] = None,
) -> str:
    if not arg_type:
        return f"{{{name}}}"
    if not format_style:
        return f"{{{name}, {arg_type}}}"
    return f"{{{name}, {arg_type}, {format_style}}}"


def reconstruct_plural(
    name: str,
    variants: Sequence[PluralVariant],
    offset: Optional[int] = None,
    options: Optional[ReconstructOptions] = None,
) -> str:
    if options is not None and options.validate_categories:
        variants = validate_plural_variants(variants, options.target_language, False)

    head = f"{{{name}, plural,"
    if offset is not None and offset > 0:
        head += f" offset:{offset}"
    return head + _render_variants(variants) + "}"


def reconstruct_selectordinal(
    name: str,
    variants: Sequence[PluralVariant],
    options: Optional[ReconstructOptions] = None,
) -> str:
    if options is not None and options.validate_categories:
        variants = validate_plural_variants(variants, options.target_language, True)
    return f"{{{name}, selectordinal," + _render_variants(variants) + "}"


def reconstruct_select(name: str, options: Sequence[SelectOption]) -> str:
    body = "".join(f" {option.key} {{{option.value}}}" for option in options)
    return f"{{{name}, select,{body}}}"


def _render_variants(variants: Sequence[PluralVariant]) -> str:
    return "".join(f" {variant.category} {{{variant.text}}}" for variant in variants)


def _choose_variants(
    original: Sequence[PluralVariant],
    translated: Optional[Sequence[PluralVariant]],
    options: ReconstructOptions,
) -> List[PluralVariant]:
    if not translated:
        return list(original)

    chosen = _first_per_category(translated)
    if options.preserve_exact_matches:
        present = {variant.category for variant in chosen}
        carried = [
            variant
            for variant in original
            if variant.is_exact_match and variant.category not in present
        ]
        chosen = carried + chosen
    return chosen


def _first_per_category(variants: Sequence[PluralVariant]) -> List[PluralVariant]:
    seen: Dict[str, PluralVariant] = {}
    for variant in variants:
        seen.setdefault(variant.category, variant)
    return list(seen.values())


def _choose_options(
    original: Sequence[SelectOption],
    translated: Optional[Sequence[SelectOption]],
) -> List[SelectOption]:
    if not translated:
        return list(original)

    by_key: Dict[str, SelectOption] = {}
    for option in translated:
        by_key.setdefault(option.key, option)

    chosen = [by_key.pop(option.key) for option in original if option.key in by_key]
    # Keys the source never had are kept after the known ones.
    chosen.extend(by_key.values())
    return chosen


def _variant_sort_key(variant: PluralVariant) -> Tuple[int, int, str]:
    if variant.is_exact_match:
        return (0, 0, "")
    category = coerce_category(variant.category)
    if category is not None:
        return (1, CATEGORY_ORDER.index(category), "")
    return (2, 0, variant.category)


def validate_plural_variants(
    variants: Sequence[PluralVariant],
    target_language: str,
    ordinal: bool,
) -> List[PluralVariant]:
    """Complete and order variants for the target language.

    Only the first variant of each category is kept. A missing ``other``
    copies the first variant that is not an exact match, or the first
    variant when there are only exact matches; every other category the
    language requires copies ``other``. Exact matches come first, then
    CLDR categories in canonical order, then unknown names alphabetically.
    """

    required = (
        get_ordinal_categories(target_language)
        if ordinal
        else get_cardinal_categories(target_language)
    )

    result = _first_per_category(variants)
    present = {variant.category for variant in result}

    if PluralCategory.OTHER.value not in present and result:
        source = next(
            (variant for variant in result if not variant.is_exact_match),
            result[0],
        )
        result.append(PluralVariant(category=PluralCategory.OTHER.value, text=source.text))
        present.add(PluralCategory.OTHER.value)

    other_text = next(
        (variant.text for variant in result if variant.category == PluralCategory.OTHER.value),
        "",
    )
    for category in required:
        if category.value not in present:
            result.append(PluralVariant(category=category.value, text=other_text))
            present.add(category.value)

    return sorted(result, key=_variant_sort_key)


def create_target_plural_variants(
    source_variants: Sequence[PluralVariant],
    target_language: str,
    ordinal: bool,
) -> List[PluralVariant]:
    """Plan the variants a translation into ``target_language`` must provide.

    Exact matches are kept from the source; each required category reuses the
    source text of the same category, else ``other``, else the first variant
    that is not an exact match.
    """

    targets = (
        get_ordinal_categories(target_language)
        if ordinal
        else get_cardinal_categories(target_language)
    )
    unique = _first_per_category(source_variants)
    by_category = {variant.category: variant.text for variant in unique}
    first = next(
        (variant for variant in unique if not variant.is_exact_match),
        unique[0] if unique else None,
    )
    fallback = by_category.get(
        PluralCategory.OTHER.value,
        first.text if first is not None else "",
    )

    result = [variant for variant in unique if variant.is_exact_match]
    for category in targets:
        result.append(
            PluralVariant(
                category=category.value,
                text=by_category.get(category.value, fallback),
            )
        )
    return result


def escape_text(text: str) -> str:
    """Quote literal text so it reads back unchanged as ICU message text.

    Runs of braces are wrapped in apostrophes; an apostrophe is doubled when
    it would otherwise start a quote, including at the end of the text where
    the next element may begin with ``{``.
    """

    out: List[str] = []
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        if char in "{}":
            end = index
            while end < length and text[end] in "{}":
                end += 1
            out.append(f"'{text[index:end]}'")
            index = end
            continue
        if char == "'":
            following = text[index + 1] if index + 1 < length else None
            if following is None or following in QUOTABLE_AFTER_APOSTROPHE:
                out.append("''")
            else:
                out.append("'")
        else:
            out.append(char)
        index += 1
    return "".join(out)
