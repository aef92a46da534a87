"""Batch-level orchestration of parsing, segmentation and reconstruction."""

from __future__ import annotations

import json
import sys
import time
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .errors import ErrorCategory, ErrorRecord, ParseError
from .parser import parse
from .reconstructor import reconstruct
from .segmenter import Segmenter
from .structures import (
    MessageUnit,
    PluralVariant,
    ReconstructOptions,
    SelectOption,
    TextSegment,
    Translations,
)


@dataclass
class WorkflowSummary:
    """Report returned after a batch has been reconstructed."""

    target_language: str
    total_units: int
    icu_units: int
    opaque_units: int
    total_segments: int
    total_errors: int
    elapsed_seconds: float
    error_messages: List[str] = field(default_factory=list)


class MessageWorkflow:
    """Coordinates parsing, segment routing and reconstruction for a batch.

    A message that fails to parse never stops the batch: it is recorded and
    handled as opaque text translated in one piece.
    """

    def __init__(
        self,
        *,
        target_language: str,
        options: Optional[ReconstructOptions] = None,
        verbose: bool = False,
        debug: bool = False,
    ) -> None:
        self.target_language = target_language
        self.options = replace(
            options or ReconstructOptions(),
            target_language=target_language,
            validate_categories=True,
        )
        self.verbose = verbose
        self.debug = debug
        self.records: List[ErrorRecord] = []
        self._units: List[MessageUnit] = []
        self._segments: List[TextSegment] = []
        self._started = time.time()

    def prepare(self, messages: Mapping[str, str]) -> List[MessageUnit]:
        """Parse each message and assign routed segments."""

        units: List[MessageUnit] = []
        for unit_id, source in messages.items():
            unit = MessageUnit(unit_id=unit_id, source=source)
            try:
                unit.parsed = parse(source)
            except ParseError as exc:
                self._record(
                    ErrorCategory.PARSE,
                    f"Message {unit_id} is not valid ICU; translating it as plain text.",
                    str(exc),
                )
            units.append(unit)

        segments = Segmenter().segment_units(units)
        self._units = units
        self._segments = segments

        if self.verbose:
            opaque = sum(1 for unit in units if unit.opaque)
            print(
                f"Prepared {len(units)} messages ({opaque} opaque), "
                f"{len(segments)} segments."
            )
        self._log_debug(
            "workflow.segments",
            [
                {"id": segment.segment_id, "text": segment.text, "context": segment.context}
                for segment in segments
            ],
        )
        return units

    def apply(
        self,
        units: Sequence[MessageUnit],
        mapping: Mapping[str, str],
    ) -> Dict[str, str]:
        """Route translated segments back and rebuild every message."""

        results: Dict[str, str] = {}
        for unit in units:
            if unit.parsed is None:
                results[unit.unit_id] = self._apply_opaque(unit, mapping)
                continue

            translations = self._collect_translations(unit, mapping)
            self._log_debug(
                "workflow.translations",
                {
                    "unit": unit.unit_id,
                    "text": translations.text,
                    "plurals": {
                        index: [[v.category, v.text] for v in variants]
                        for index, variants in translations.plural_elements.items()
                    },
                    "selects": {
                        index: [[o.key, o.value] for o in options]
                        for index, options in translations.select_elements.items()
                    },
                },
            )
            results[unit.unit_id] = reconstruct(unit.parsed, translations, self.options)

        if self.verbose:
            print(f"Reconstructed {len(results)} messages for {self.target_language}.")
        return results

    def summary(self) -> WorkflowSummary:
        return WorkflowSummary(
            target_language=self.target_language,
            total_units=len(self._units),
            icu_units=sum(1 for unit in self._units if unit.parsed and unit.parsed.is_complex),
            opaque_units=sum(1 for unit in self._units if unit.opaque),
            total_segments=len(self._segments),
            total_errors=len(self.records),
            elapsed_seconds=time.time() - self._started,
            error_messages=[record.message for record in self.records],
        )

    def _apply_opaque(self, unit: MessageUnit, mapping: Mapping[str, str]) -> str:
        if not unit.segments:
            return unit.source
        segment = unit.segments[0]
        translated = mapping.get(segment.segment_id)
        if translated is None:
            self._record_missing(segment)
            return unit.source
        return translated

    def _collect_translations(
        self,
        unit: MessageUnit,
        mapping: Mapping[str, str],
    ) -> Translations:
        translations = Translations()
        for segment in unit.segments:
            translated = mapping.get(segment.segment_id)
            if translated is None:
                self._record_missing(segment)
                translated = segment.text

            # A variable may drive more than one construct.
            if segment.kind == "select" and segment.element_index is not None and segment.key:
                translations.select_elements.setdefault(segment.element_index, []).append(
                    SelectOption(key=segment.key, value=translated)
                )
            elif segment.kind == "plural" and segment.element_index is not None and segment.key:
                translations.plural_elements.setdefault(segment.element_index, []).append(
                    PluralVariant(category=segment.key, text=translated)
                )
            elif segment.element_index is not None and translated != segment.text:
                translations.text[segment.element_index] = translated
        return translations

    def _record_missing(self, segment: TextSegment) -> None:
        self._record(
            ErrorCategory.TRANSLATION,
            f"Translation missing for segment {segment.segment_id}. "
            "Keeping the source text.",
        )

    def _record(
        self,
        category: ErrorCategory,
        message: str,
        details: Optional[str] = None,
    ) -> None:
        self.records.append(ErrorRecord(category=category, message=message, details=details))
        print(message if details is None else f"{message} ({details})")

    def _log_debug(self, label: str, payload: Any) -> None:
        """Emit structured debug information when enabled."""

        if not self.debug:
            return
        try:
            message = json.dumps(payload, ensure_ascii=False, indent=2, default=str)
        except (TypeError, ValueError):
            message = repr(payload)
        print(f"[icuforge][debug] {label}:\n{message}", file=sys.stderr)
