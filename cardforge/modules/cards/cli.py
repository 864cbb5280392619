from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from cardforge.core.config import settings
from cardforge.core.logging import setup_logging
from cardforge.modules.cards.classifier import category_label, classify
from cardforge.modules.cards.errors import CardForgeError, display_message
from cardforge.modules.cards.main import CardGenerator
from cardforge.modules.cards.models import Card, ExternalSchema, GenerationResult
from cardforge.modules.cards.prompt import ACTIONS
from cardforge.modules.cards.store import map_result
from cardforge.modules.cards.templates import TEMPLATE_IDS

_schemas_adapter = TypeAdapter(list[ExternalSchema])
_cards_adapter = TypeAdapter(list[Card])


def _load_text(args: argparse.Namespace) -> str:
    if args.text and args.text_file:
        raise SystemExit("Provide either --text or --text-file, not both")
    if args.text_file:
        return Path(args.text_file).read_text(encoding="utf-8")
    if args.text:
        return args.text
    raise SystemExit("--text or --text-file is required")


def _read_json(path: str):
    return json.loads(Path(path).read_text(encoding="utf-8"))


def _emit(payload) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _add_text_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--text", "-t", help="Source text")
    p.add_argument("--text-file", help="Path to a file containing the source text")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cardforge", description="Turn study notes into flashcards"
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    sub = parser.add_subparsers(dest="cmd", required=True)

    c = sub.add_parser("classify", help="Detect the content category of some text")
    _add_text_args(c)

    g = sub.add_parser("generate", help="Generate cards from text")
    _add_text_args(g)
    g.add_argument("--action", choices=ACTIONS, default="generate")
    g.add_argument("--count", type=int, default=None, help="Cards to request (generate)")
    g.add_argument("--mode", choices=("auto", "basic", "cloze"), default="auto",
                   help="Target shape (convert)")
    g.add_argument("--template", choices=TEMPLATE_IDS, default=None)

    s = sub.add_parser("score", help="Score cards from a JSON file")
    s.add_argument("cards_file", help="JSON list of cards")
    s.add_argument("--note-type", choices=("BASIC", "CLOZE"), default=None)

    m = sub.add_parser("map", help="Map a generation result onto store schemas")
    m.add_argument("result_file", help="JSON generation result")
    m.add_argument("schemas_file", help="JSON list of schemas {name, type, fields}")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level or settings.log_level)

    try:
        if args.cmd == "classify":
            category = classify(_load_text(args))
            _emit({"category": category.value, "label": category_label(category)})
            return 0
        if args.cmd == "generate":
            svc = CardGenerator()
            result, category = svc.run_sync(
                args.action,
                _load_text(args),
                count=args.count,
                convert_mode=args.mode,
                template=args.template,
            )
            _emit({"category": category.value, **result.model_dump(by_alias=True, exclude_none=True)})
            return 0
        if args.cmd == "score":
            cards = _cards_adapter.validate_python(_read_json(args.cards_file))
            scores = CardGenerator().score_sync(cards, args.note_type)
            _emit({"scores": [s.model_dump(by_alias=True, exclude_none=True) for s in scores]})
            return 0
        if args.cmd == "map":
            result = GenerationResult.model_validate(_read_json(args.result_file))
            schemas = _schemas_adapter.validate_python(_read_json(args.schemas_file))
            mappings = map_result(result, schemas, settings.ai)
            _emit({"mappings": [mp.model_dump(by_alias=True) for mp in mappings]})
            return 0
    except CardForgeError as e:
        print(f"error: {display_message(e)}", file=sys.stderr)
        return 1
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        # Unreadable or malformed input files
        print(f"error: {display_message(e)}", file=sys.stderr)
        return 1

    parser.print_help()
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
