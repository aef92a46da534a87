from __future__ import annotations

from icuforge.errors import ErrorCategory
from icuforge.structures import ReconstructOptions
from icuforge.workflow import MessageWorkflow


MESSAGES = {
    "greeting": "Hello, {name}!",
    "files": "{count, plural, one {# file} other {# files}}",
    "broken": "Hello {name",
}


def _segment_ids(units):
    return {unit.unit_id: [segment.segment_id for segment in unit.segments] for unit in units}


def test_prepare_parses_and_segments_messages():
    workflow = MessageWorkflow(target_language="ru")

    units = workflow.prepare(MESSAGES)

    assert [unit.unit_id for unit in units] == ["greeting", "files", "broken"]
    assert _segment_ids(units) == {
        "greeting": ["greeting#seg0", "greeting#seg1"],
        "files": ["files#seg0", "files#seg1"],
        "broken": ["broken#seg0"],
    }
    assert units[2].opaque is True
    assert units[2].segments[0].kind == "opaque"


def test_parse_failure_is_recorded_not_raised(capsys):
    workflow = MessageWorkflow(target_language="ru")

    workflow.prepare(MESSAGES)

    assert len(workflow.records) == 1
    record = workflow.records[0]
    assert record.category is ErrorCategory.PARSE
    assert record.message == "Message broken is not valid ICU; translating it as plain text."
    assert record.details == "Unmatched braces in message at position 11"
    assert "Message broken is not valid ICU" in capsys.readouterr().out


def test_apply_rebuilds_every_message():
    workflow = MessageWorkflow(target_language="ru")
    units = workflow.prepare(MESSAGES)

    results = workflow.apply(
        units,
        {
            "greeting#seg0": "Привет, ",
            "greeting#seg1": "!",
            "files#seg0": "# файл",
            "files#seg1": "# файлов",
            "broken#seg0": "Привет {name",
        },
    )

    assert results == {
        "greeting": "Привет, {name}!",
        "files": "{count, plural, one {# файл} few {# файлов} many {# файлов} other {# файлов}}",
        "broken": "Привет {name",
    }


def test_select_segments_route_by_key():
    workflow = MessageWorkflow(target_language="fr")
    units = workflow.prepare({"left": "{gender, select, male {He} other {They}} left."})

    results = workflow.apply(
        units,
        {"left#seg0": "Il", "left#seg1": "Iel", "left#seg2": " est parti."},
    )

    assert results == {"left": "{gender, select, male {Il} other {Iel}} est parti."}


def test_missing_segments_keep_source_text():
    workflow = MessageWorkflow(target_language="de")
    units = workflow.prepare({"greeting": "Hello, {name}!", "broken": "oops }"})

    results = workflow.apply(units, {"greeting#seg0": "Hallo, "})

    assert results == {"greeting": "Hallo, {name}!", "broken": "oops }"}
    missing = [r for r in workflow.records if r.category is ErrorCategory.TRANSLATION]
    assert [r.message for r in missing] == [
        "Translation missing for segment greeting#seg1. Keeping the source text.",
        "Translation missing for segment broken#seg0. Keeping the source text.",
    ]


def test_repeated_variable_keeps_each_construct():
    workflow = MessageWorkflow(target_language="en")
    units = workflow.prepare(
        {"pair": "{n, plural, one {a} other {b}} / {n, plural, one {c} other {d}}"}
    )

    results = workflow.apply(
        units,
        {
            "pair#seg0": "A",
            "pair#seg1": "B",
            "pair#seg2": " / ",
            "pair#seg3": "C",
            "pair#seg4": "D",
        },
    )

    assert results == {
        "pair": "{n, plural, one {A} other {B}} / {n, plural, one {C} other {D}}"
    }


def test_exact_matches_survive_translation():
    workflow = MessageWorkflow(target_language="ru")
    units = workflow.prepare(
        {"items": "{count, plural, offset:1 =0 {No items} one {One item} other {# items}}"}
    )

    results = workflow.apply(
        units,
        {"items#seg0": "Нет", "items#seg1": "Один", "items#seg2": "# штук"},
    )

    assert results["items"] == (
        "{count, plural, offset:1 =0 {Нет} one {Один} few {# штук} many {# штук} other {# штук}}"
    )


def test_options_keep_exact_match_setting():
    workflow = MessageWorkflow(
        target_language="pt_BR",
        options=ReconstructOptions(preserve_exact_matches=False),
    )

    assert workflow.options.target_language == "pt_BR"
    assert workflow.options.validate_categories is True
    assert workflow.options.preserve_exact_matches is False


def test_summary_counts():
    workflow = MessageWorkflow(target_language="ru")
    units = workflow.prepare(MESSAGES)
    workflow.apply(units, {})

    summary = workflow.summary()

    assert summary.target_language == "ru"
    assert summary.total_units == 3
    assert summary.icu_units == 1
    assert summary.opaque_units == 1
    assert summary.total_segments == 5
    assert summary.total_errors == 6
    assert summary.elapsed_seconds >= 0
    assert summary.error_messages[0].startswith("Message broken")


def test_verbose_and_debug_output(capsys):
    workflow = MessageWorkflow(target_language="en", verbose=True, debug=True)
    units = workflow.prepare({"greeting": "Hello, {name}!"})
    workflow.apply(units, {"greeting#seg0": "Hi, ", "greeting#seg1": "!"})

    captured = capsys.readouterr()
    assert "Prepared 1 messages (0 opaque), 2 segments." in captured.out
    assert "Reconstructed 1 messages for en." in captured.out
    assert "[icuforge][debug] workflow.segments:" in captured.err
    assert "[icuforge][debug] workflow.translations:" in captured.err
