from __future__ import annotations

import pytest

from icuforge.errors import TranslationInputError
from icuforge.parser import parse
from icuforge.plurals import get_cardinal_categories
from icuforge.reconstructor import (
    create_target_plural_variants,
    escape_text,
    reconstruct,
    reconstruct_argument,
    reconstruct_plural,
    reconstruct_select,
    reconstruct_selectordinal,
    validate_plural_variants,
)
from icuforge.structures import (
    ParsedMessage,
    PluralVariant,
    ReconstructOptions,
    SelectOption,
    Translations,
)


def _pairs(variants):
    return [(variant.category, variant.text) for variant in variants]


class TestRoundTrip:
    @pytest.mark.parametrize(
        "message",
        [
            "Hello, World!",
            "Hello, {name}!",
            "Total: {amount, number, currency}",
            "{count, plural, offset:1 =0 {No items} one {One item} other {# items}}",
            "{pos, selectordinal, one {#st} two {#nd} few {#rd} other {#th}}",
            "{gender, select, male {He} female {She} other {They}} left.",
            "It''s '{literal}' text for {name}",
        ],
    )
    def test_without_translations_returns_original(self, message):
        assert reconstruct(parse(message)) == message

    def test_nested_select_round_trips(self, nested_select):
        assert reconstruct(parse(nested_select)) == nested_select

    def test_spaced_argument_is_canonicalised(self):
        assert reconstruct(parse("Hi { name }!")) == "Hi {name}!"


class TestTranslatedReconstruction:
    def test_translated_text_is_escaped(self):
        parsed = parse("Hello, {name}!")
        translations = Translations(text={0: "Bonjour {cher} ", 2: " !"})

        result = reconstruct(parsed, translations)

        assert result == "Bonjour '{'cher'}' {name} !"
        assert parse(result).elements[0].value == "Bonjour {cher} "

    def test_plural_completed_for_target_language(self, plural_with_offset):
        translations = Translations(
            plurals={
                "count": [
                    PluralVariant(category="one", text="<one>"),
                    PluralVariant(category="other", text="<other>"),
                ]
            }
        )
        options = ReconstructOptions(target_language="ru", validate_categories=True)

        result = reconstruct(parse(plural_with_offset), translations, options)

        assert result == (
            "{count, plural, offset:1 =0 {No items} one {<one>} few {<other>} "
            "many {<other>} other {<other>}}"
        )

    def test_exact_matches_can_be_dropped(self, plural_with_offset):
        translations = Translations(
            plurals={
                "count": [
                    PluralVariant(category="one", text="<one>"),
                    PluralVariant(category="other", text="<other>"),
                ]
            }
        )
        options = ReconstructOptions(preserve_exact_matches=False)

        result = reconstruct(parse(plural_with_offset), translations, options)

        assert result == "{count, plural, offset:1 one {<one>} other {<other>}}"

    def test_translated_exact_match_is_not_duplicated(self, plural_with_offset):
        translations = Translations(
            plurals={
                "count": [
                    PluralVariant(category="=0", text="Aucun"),
                    PluralVariant(category="other", text="# articles"),
                ]
            }
        )

        result = reconstruct(parse(plural_with_offset), translations)

        assert result == "{count, plural, offset:1 =0 {Aucun} other {# articles}}"

    def test_empty_translated_variants_keep_original(self, plural_with_offset):
        translations = Translations(plurals={"count": []})

        assert reconstruct(parse(plural_with_offset), translations) == plural_with_offset

    def test_select_keys_follow_original_order(self):
        parsed = parse("{gender, select, male {He} female {She} other {They}} left.")
        translations = Translations(
            selects={
                "gender": [
                    SelectOption(key="other", value="Iel"),
                    SelectOption(key="neutral", value="Ni"),
                    SelectOption(key="male", value="Il"),
                ]
            }
        )

        result = reconstruct(parsed, translations)

        assert result == "{gender, select, male {Il} other {Iel} neutral {Ni}} left."

    def test_selectordinal_validation(self):
        parsed = parse("{pos, selectordinal, one {#st} other {#th}}")
        options = ReconstructOptions(target_language="en", validate_categories=True)

        assert reconstruct(parsed, options=options) == (
            "{pos, selectordinal, one {#st} two {#th} few {#th} other {#th}}"
        )

    def test_duplicate_translated_categories_keep_first(self):
        translations = Translations(
            plurals={
                "count": [
                    PluralVariant(category="one", text="A"),
                    PluralVariant(category="one", text="B"),
                    PluralVariant(category="other", text="C"),
                ]
            }
        )

        result = reconstruct(parse("{count, plural, one {# item} other {# items}}"), translations)

        assert result == "{count, plural, one {A} other {C}}"

    def test_element_translations_take_precedence(self):
        parsed = parse("{n, plural, one {a} other {b}} / {n, plural, one {c} other {d}}")
        translations = Translations(
            plurals={"n": [PluralVariant(category="other", text="ignored")]},
            plural_elements={
                0: [
                    PluralVariant(category="one", text="A"),
                    PluralVariant(category="other", text="B"),
                ],
                2: [
                    PluralVariant(category="one", text="C"),
                    PluralVariant(category="other", text="D"),
                ],
            },
        )

        assert reconstruct(parsed, translations) == (
            "{n, plural, one {A} other {B}} / {n, plural, one {C} other {D}}"
        )

    def test_missing_other_ignores_carried_exact_match(self):
        parsed = parse("{count, plural, =0 {No items} one {One item} other {# items}}")
        translations = Translations(
            plurals={"count": [PluralVariant(category="one", text="Un article")]}
        )
        options = ReconstructOptions(target_language="fr", validate_categories=True)

        assert reconstruct(parsed, translations, options) == (
            "{count, plural, =0 {No items} one {Un article} many {Un article} "
            "other {Un article}}"
        )

    def test_unknown_element_type_is_rejected(self):
        parsed = ParsedMessage(
            original="x",
            elements=(object(),),  # type: ignore[arg-type]
            has_plurals=False,
            has_select=False,
            variables=(),
        )

        with pytest.raises(TypeError):
            reconstruct(parsed)


class TestBuilders:
    @pytest.mark.parametrize(
        "args, expected",
        [
            (("name",), "{name}"),
            (("when", "date"), "{when, date}"),
            (("amount", "number", "currency"), "{amount, number, currency}"),
        ],
    )
    def test_reconstruct_argument(self, args, expected):
        assert reconstruct_argument(*args) == expected

    def test_reconstruct_plural_omits_zero_offset(self):
        variants = [PluralVariant(category="other", text="# items")]

        assert reconstruct_plural("n", variants, offset=0) == "{n, plural, other {# items}}"
        assert reconstruct_plural("n", variants, offset=2) == (
            "{n, plural, offset:2 other {# items}}"
        )

    def test_reconstruct_selectordinal_without_validation(self):
        variants = [PluralVariant(category="other", text="#.")]

        assert reconstruct_selectordinal("pos", variants) == "{pos, selectordinal, other {#.}}"

    def test_reconstruct_select(self):
        options = [SelectOption(key="a", value="A"), SelectOption(key="other", value="B")]

        assert reconstruct_select("type", options) == "{type, select, a {A} other {B}}"


class TestValidation:
    def test_missing_other_copies_first_variant(self):
        result = validate_plural_variants(
            [PluralVariant(category="one", text="# file")], "en", ordinal=False
        )

        assert _pairs(result) == [("one", "# file"), ("other", "# file")]

    def test_required_categories_copy_other(self):
        result = validate_plural_variants(
            [
                PluralVariant(category="other", text="# файлов"),
                PluralVariant(category="one", text="# файл"),
            ],
            "ru",
            ordinal=False,
        )

        assert _pairs(result) == [
            ("one", "# файл"),
            ("few", "# файлов"),
            ("many", "# файлов"),
            ("other", "# файлов"),
        ]

    def test_sort_order(self):
        result = validate_plural_variants(
            [
                PluralVariant(category="other", text="o"),
                PluralVariant(category="zzz", text="z"),
                PluralVariant(category="aaa", text="a"),
                PluralVariant(category="=1", text="e"),
            ],
            "ja",
            ordinal=False,
        )

        assert [variant.category for variant in result] == ["=1", "other", "aaa", "zzz"]

    def test_existing_categories_are_kept(self):
        variants = [
            PluralVariant(category="one", text="a"),
            PluralVariant(category="few", text="b"),
            PluralVariant(category="other", text="c"),
        ]

        result = validate_plural_variants(variants, "en", ordinal=False)

        assert _pairs(result) == [("one", "a"), ("few", "b"), ("other", "c")]

    def test_missing_other_skips_exact_matches(self):
        result = validate_plural_variants(
            [
                PluralVariant(category="=0", text="No items"),
                PluralVariant(category="one", text="Un article"),
            ],
            "fr",
            ordinal=False,
        )

        assert _pairs(result) == [
            ("=0", "No items"),
            ("one", "Un article"),
            ("many", "Un article"),
            ("other", "Un article"),
        ]

    def test_only_exact_matches_fall_back_to_first(self):
        result = validate_plural_variants(
            [PluralVariant(category="=1", text="just one")], "en", ordinal=False
        )

        assert _pairs(result) == [
            ("=1", "just one"),
            ("one", "just one"),
            ("other", "just one"),
        ]

    def test_duplicate_categories_keep_first(self):
        result = validate_plural_variants(
            [
                PluralVariant(category="one", text="A"),
                PluralVariant(category="one", text="C"),
                PluralVariant(category="other", text="B"),
                PluralVariant(category="other", text="D"),
            ],
            "en",
            ordinal=False,
        )

        assert _pairs(result) == [("one", "A"), ("other", "B")]

    def test_exact_matches_supplied_last_are_sorted_first(self):
        result = validate_plural_variants(
            [
                PluralVariant(category="other", text="c"),
                PluralVariant(category="one", text="a"),
                PluralVariant(category="=5", text="five"),
                PluralVariant(category="=0", text="none"),
            ],
            "en",
            ordinal=False,
        )

        assert [variant.category for variant in result] == ["=5", "=0", "one", "other"]

    @pytest.mark.parametrize(
        "language, expected",
        [
            ("en", ["=0", "one", "other"]),
            ("ru", ["=0", "one", "few", "many", "other"]),
            ("pl", ["=0", "one", "few", "many", "other"]),
            ("ar", ["=0", "zero", "one", "two", "few", "many", "other"]),
            ("ja", ["=0", "one", "other"]),
        ],
    )
    def test_every_required_category_appears_once(self, language, expected):
        result = validate_plural_variants(
            [
                PluralVariant(category="=0", text="none"),
                PluralVariant(category="one", text="# thing"),
                PluralVariant(category="other", text="# things"),
            ],
            language,
            ordinal=False,
        )
        categories = [variant.category for variant in result]

        assert categories == expected
        for category in get_cardinal_categories(language):
            assert categories.count(category.value) == 1
        filled = [v.text for v in result if v.category not in ("=0", "one")]
        assert set(filled) == {"# things"}


class TestTargetVariants:
    SOURCE = [
        PluralVariant(category="=0", text="none"),
        PluralVariant(category="one", text="# item"),
        PluralVariant(category="other", text="# items"),
    ]

    def test_for_russian(self):
        result = create_target_plural_variants(self.SOURCE, "ru", ordinal=False)

        assert _pairs(result) == [
            ("=0", "none"),
            ("one", "# item"),
            ("few", "# items"),
            ("many", "# items"),
            ("other", "# items"),
        ]

    def test_for_japanese(self):
        result = create_target_plural_variants(self.SOURCE, "ja", ordinal=False)

        assert _pairs(result) == [("=0", "none"), ("other", "# items")]

    def test_without_other_uses_first_variant(self):
        source = [PluralVariant(category="one", text="#st")]

        result = create_target_plural_variants(source, "en", ordinal=True)

        assert _pairs(result) == [
            ("one", "#st"),
            ("two", "#st"),
            ("few", "#st"),
            ("other", "#st"),
        ]

    def test_fallback_skips_exact_matches(self):
        source = [
            PluralVariant(category="=0", text="none"),
            PluralVariant(category="one", text="#st"),
        ]

        result = create_target_plural_variants(source, "en", ordinal=True)

        assert _pairs(result) == [
            ("=0", "none"),
            ("one", "#st"),
            ("two", "#st"),
            ("few", "#st"),
            ("other", "#st"),
        ]


class TestEscapeText:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("plain", "plain"),
            ("a {b} c", "a '{'b'}' c"),
            ("{{}}", "'{{}}'"),
            ("it's", "it's"),
            ("l'", "l''"),
            ("'{", "'''{'"),
        ],
    )
    def test_escape(self, text, expected):
        assert escape_text(text) == expected

    @pytest.mark.parametrize(
        "text",
        ["a {b} c", "it's", "'{", "quote '' twice", "50% #1 | 2", "l'"],
    )
    def test_escaped_text_parses_back(self, text):
        parsed = parse(escape_text(text))

        assert "".join(element.value for element in parsed.elements) == text


class TestTranslationsInput:
    def test_from_dict_accepts_both_entry_shapes(self):
        translations = Translations.from_dict(
            {
                "text": {"1": " est parti."},
                "plurals": {"count": {"one": "# fichier", "other": "# fichiers"}},
                "selects": {"gender": [{"key": "male", "value": "Il"}]},
            }
        )

        assert translations.text == {1: " est parti."}
        assert translations.plurals["count"] == [
            PluralVariant(category="one", text="# fichier"),
            PluralVariant(category="other", text="# fichiers"),
        ]
        assert translations.selects["gender"] == [SelectOption(key="male", value="Il")]

    def test_from_dict_empty(self):
        assert Translations.from_dict({}) == Translations()

    @pytest.mark.parametrize(
        "data",
        [
            ["not", "a", "mapping"],
            {"text": {"first": "x"}},
            {"text": {"0": 3}},
            {"plurals": {"count": "one"}},
            {"plurals": {"count": [{"category": "one"}]}},
            {"selects": {"gender": ["male"]}},
        ],
    )
    def test_from_dict_rejects_malformed_input(self, data):
        with pytest.raises(TranslationInputError):
            Translations.from_dict(data)
