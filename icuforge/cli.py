"""Command line interface for icuforge."""

from __future__ import annotations

import argparse
import json
import pathlib
import sys
from dataclasses import asdict, replace
from typing import Any, Callable, Dict, Iterable, Optional

from .configuration import IcuforgeConfig, get_settings
from .errors import ConfigurationError, ParseError, TranslationInputError
from .parser import has_patterns, parse
from .plurals import (
    format_category_description,
    get_cardinal_categories,
    get_ordinal_categories,
    normalise_language,
)
from .reconstructor import reconstruct
from .segmenter import extract_segments
from .structures import (
    ArgumentElement,
    Element,
    PluralElement,
    SelectElement,
    SelectOrdinalElement,
    TextElement,
    Translations,
)

ELEMENT_TYPES = {
    TextElement: "text",
    ArgumentElement: "argument",
    PluralElement: "plural",
    SelectOrdinalElement: "selectordinal",
    SelectElement: "select",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="icuforge",
        description=(
            "Parse ICU MessageFormat strings, list their translatable segments "
            "and rebuild them with complete plural categories."
        ),
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show detailed progress information.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log intermediate structures to stderr for troubleshooting.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    parse_cmd = commands.add_parser("parse", help="Print the parsed element tree as JSON.")
    parse_cmd.add_argument("message", help="ICU message to parse.")

    segments_cmd = commands.add_parser(
        "segments",
        help="Print the translatable segments of a message as JSON.",
    )
    segments_cmd.add_argument("message", help="ICU message to segment.")

    reconstruct_cmd = commands.add_parser(
        "reconstruct",
        help="Rebuild a message, optionally applying translations.",
    )
    reconstruct_cmd.add_argument("message", help="Source ICU message.")
    reconstruct_cmd.add_argument(
        "-t",
        "--target-language",
        help="Target language tag (default: ICUFORGE_TARGET_LANGUAGE or en).",
    )
    reconstruct_cmd.add_argument(
        "--translations",
        help="JSON file with 'text', 'plurals' and 'selects' entries.",
    )
    reconstruct_cmd.add_argument(
        "--validate",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Add plural categories the target language requires.",
    )

    rules_cmd = commands.add_parser(
        "rules",
        help="Show the plural categories a language requires.",
    )
    rules_cmd.add_argument("language", help="Language tag such as en, ru or pt-BR.")
    rules_cmd.add_argument(
        "--ordinal",
        action="store_true",
        help="Show ordinal (1st, 2nd, ...) categories instead of cardinal ones.",
    )
    return parser


def describe_element(element: Element) -> Dict[str, Any]:
    """Return a JSON-friendly description of a parsed element."""

    payload = {"type": ELEMENT_TYPES[type(element)]}
    payload.update(asdict(element))
    return payload


def load_translations(path: str) -> Translations:
    file_path = pathlib.Path(path).expanduser()
    try:
        data = json.loads(file_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise TranslationInputError(
            f"Translations file {file_path} could not be read: {exc}"
        ) from exc
    except json.JSONDecodeError as exc:
        raise TranslationInputError(
            f"Translations file {file_path} is not valid JSON: {exc}"
        ) from exc
    return Translations.from_dict(data)


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _debug(enabled: bool, label: str, payload: Any) -> None:
    if enabled:
        print(
            f"[icuforge][debug] {label}:\n"
            f"{json.dumps(payload, ensure_ascii=False, indent=2, default=str)}",
            file=sys.stderr,
        )


def run_parse(args: argparse.Namespace, settings: IcuforgeConfig, debug: bool) -> int:
    parsed = parse(args.message)
    _print_json(
        {
            "original": parsed.original,
            "has_plurals": parsed.has_plurals,
            "has_select": parsed.has_select,
            "is_complex": parsed.is_complex,
            "variables": list(parsed.variables),
            "elements": [describe_element(element) for element in parsed.elements],
        }
    )
    return 0


def run_segments(args: argparse.Namespace, settings: IcuforgeConfig, debug: bool) -> int:
    parsed = parse(args.message)
    _print_json([asdict(segment) for segment in extract_segments(parsed)])
    return 0


def run_reconstruct(args: argparse.Namespace, settings: IcuforgeConfig, debug: bool) -> int:
    options = settings.reconstruct_options()
    if args.target_language:
        options = replace(options, target_language=args.target_language)
    if args.validate is not None:
        options = replace(options, validate_categories=args.validate)

    if args.verbose and not has_patterns(args.message):
        print("Message has no plural or select constructs.", file=sys.stderr)

    parsed = parse(args.message)
    translations = load_translations(args.translations) if args.translations else None
    _debug(debug, "cli.options", asdict(options))
    if translations is not None:
        _debug(debug, "cli.translations", asdict(translations))

    print(reconstruct(parsed, translations, options))
    return 0


def run_rules(args: argparse.Namespace, settings: IcuforgeConfig, debug: bool) -> int:
    categories = (
        get_ordinal_categories(args.language)
        if args.ordinal
        else get_cardinal_categories(args.language)
    )
    kind = "ordinal" if args.ordinal else "cardinal"
    print(f"{normalise_language(args.language) or args.language} ({kind}):")
    for category in categories:
        print(f"  {format_category_description(category, args.language, args.ordinal)}")
    return 0


COMMANDS: Dict[str, Callable[[argparse.Namespace, IcuforgeConfig, bool], int]] = {
    "parse": run_parse,
    "segments": run_segments,
    "reconstruct": run_reconstruct,
    "rules": run_rules,
}


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        settings = get_settings()
    except ConfigurationError as exc:
        print(exc)
        return 1
    debug = bool(args.debug or settings.ICUFORGE_DEBUG)

    try:
        return COMMANDS[args.command](args, settings, debug)
    except ParseError as exc:
        print(f"Could not parse message: {exc}")
        return 1
    except TranslationInputError as exc:
        print(exc)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
