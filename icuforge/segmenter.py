"""Translatable segment extraction for parsed messages."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .structures import (
    ArgumentElement,
    MessageUnit,
    ParsedMessage,
    PluralElement,
    Segment,
    SelectElement,
    SelectOrdinalElement,
    TextElement,
    TextSegment,
)


def plural_context(category: str, name: str) -> str:
    return f'Plural form "{category}" for variable {{{name}}}'


def select_context(key: str, name: str) -> str:
    return f'Select option "{key}" for variable {{{name}}}'


def extract_segments(parsed: ParsedMessage) -> List[Segment]:
    """List every independently translatable fragment of a message.

    Text elements yield their literal value; plural and selectordinal
    variants and select options yield their body together with a context
    line naming the category or key. ``index`` is the owning element's
    position in ``parsed.elements``.
    """

    segments: List[Segment] = []
    for index, element in enumerate(parsed.elements):
        if isinstance(element, TextElement):
            segments.append(Segment(index=index, text=element.value))
        elif isinstance(element, (PluralElement, SelectOrdinalElement)):
            for variant in element.variants:
                segments.append(
                    Segment(
                        index=index,
                        text=variant.text,
                        context=plural_context(variant.category, element.name),
                    )
                )
        elif isinstance(element, SelectElement):
            for option in element.options:
                segments.append(
                    Segment(
                        index=index,
                        text=option.value,
                        context=select_context(option.key, element.name),
                    )
                )
        elif not isinstance(element, ArgumentElement):
            raise TypeError(f"Unsupported message element: {element!r}")
    return segments


class Segmenter:
    """Turns message units into routed translation segments."""

    def segment_units(self, units: Sequence[MessageUnit]) -> List[TextSegment]:
        segments: List[TextSegment] = []
        for unit in units:
            unit.segments = []
            if unit.parsed is None:
                if unit.source:
                    unit.segments.append(
                        TextSegment(
                            segment_id=f"{unit.unit_id}#seg0",
                            unit_id=unit.unit_id,
                            text=unit.source,
                            order=0,
                            kind="opaque",
                        )
                    )
                segments.extend(unit.segments)
                continue

            for order, (segment, kind, variable, key) in enumerate(_routed(unit.parsed)):
                unit.segments.append(
                    TextSegment(
                        segment_id=f"{unit.unit_id}#seg{order}",
                        unit_id=unit.unit_id,
                        text=segment.text,
                        order=order,
                        kind=kind,
                        element_index=segment.index,
                        variable=variable,
                        key=key,
                        context=segment.context,
                    )
                )
            segments.extend(unit.segments)
        return segments


_Route = Tuple[Segment, str, Optional[str], Optional[str]]


def _routed(parsed: ParsedMessage) -> List[_Route]:
    """Pair each extracted segment with its kind, variable and category/key."""

    branch_keys: List[Tuple[str, str, str]] = []
    for element in parsed.elements:
        if isinstance(element, (PluralElement, SelectOrdinalElement)):
            branch_keys.extend(("plural", element.name, v.category) for v in element.variants)
        elif isinstance(element, SelectElement):
            branch_keys.extend(("select", element.name, o.key) for o in element.options)

    # extract_segments walks elements in the same order as above.
    branches = iter(branch_keys)
    routed: List[_Route] = []
    for segment in extract_segments(parsed):
        if segment.context is None:
            routed.append((segment, "text", None, None))
        else:
            kind, variable, key = next(branches)
            routed.append((segment, kind, variable, key))
    return routed
