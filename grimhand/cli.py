"""
Grim Hand CLI - Command-line interface for the engine.

Usage:
    grimhand classify A:Iron 2:Iron 3:Iron 4:Iron 5:Iron
    grimhand resolve --race Human --class Warrior --affinity Iron --item 7:Iron
    grimhand formula "gold / 2 + strength + agility" --gold 10
    grimhand serve --port 8000
"""

import argparse
import sys

from .config import settings
from .logging import setup_logging

RESOURCE_OPTIONS = ("lifeCurrent", "apCurrent", "gold", "xp", "doubt", "corruption")


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Grim Hand - Character stat and equipment hand engine",
        prog="grimhand",
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Classify command
    classify_parser = subparsers.add_parser("classify", help="Classify up to five cards")
    classify_parser.add_argument("cards", nargs="*", help="Cards as RANK:AFFINITY, e.g. A:Iron")

    # Resolve command
    resolve_parser = subparsers.add_parser("resolve", help="Resolve a character's stats")
    _add_selection_args(resolve_parser)

    # Formula command
    formula_parser = subparsers.add_parser("formula", help="Evaluate a formula for a character")
    formula_parser.add_argument("text", help="Formula text")
    _add_selection_args(formula_parser)
    for name in RESOURCE_OPTIONS:
        formula_parser.add_argument(f"--{name}", type=int, default=None, dest=name)

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if args.command == "classify":
        return cmd_classify(args)
    elif args.command == "resolve":
        return cmd_resolve(args)
    elif args.command == "formula":
        return cmd_formula(args)
    elif args.command == "serve":
        return cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def _add_selection_args(parser):
    parser.add_argument("--race", default="Human")
    parser.add_argument("--class", dest="class_name", default="Warrior")
    parser.add_argument("--affinity", default="Iron")
    parser.add_argument(
        "--item", action="append", default=[], metavar="RANK:AFFINITY",
        help="Equipped item card (repeat up to five times)",
    )


def _parse_card_arg(text):
    """Split "RANK:AFFINITY"; either side may be blank."""
    rank, _, affinity = text.partition(":")
    return rank.strip() or None, affinity.strip() or None


def _build_sheet(args):
    from .engine_core.catalog import EquipmentCatalogRow
    from .engine_core.state import SLOT_IDS, Character
    from .session import CharacterSheet

    if len(args.item) > len(SLOT_IDS):
        print(f"Error: at most {len(SLOT_IDS)} items can be equipped")
        sys.exit(1)

    character = Character(race=args.race, class_name=args.class_name, affinity=args.affinity)
    sheet = CharacterSheet(character=character, fresh=True)
    for slot_id, text in zip(SLOT_IDS, args.item):
        rank, affinity = _parse_card_arg(text)
        sheet.equip_row(slot_id, EquipmentCatalogRow(item_name=text, rank=rank, affinity=affinity))
    return sheet


def cmd_classify(args):
    """Classify loose cards."""
    from .engine_core.bonuses import describe_bonus
    from .engine_core.hand import classify_hand
    from .engine_core.state import Card, parse_rank

    cards = []
    for text in args.cards:
        rank_text, affinity = _parse_card_arg(text)
        rank = parse_rank(rank_text)
        if rank is None or not affinity:
            print(f"Skipping incomplete card: {text}")
            continue
        cards.append(Card(rank=rank, affinity=affinity))

    try:
        hand = classify_hand(cards)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"Hand: {hand.name} (level {hand.level})")
    print(f"Bonus: {describe_bonus(hand)}")


def cmd_resolve(args):
    """Resolve and print a character's stats."""
    from .engine_core.errors import UnknownSelectionError

    try:
        sheet = _build_sheet(args)
    except UnknownSelectionError as e:
        print(f"Error: {e}")
        sys.exit(1)

    derived = sheet.derived
    print(f"{args.race} {args.class_name} ({args.affinity})")
    print(f"{'Stat':<10} {'Base':>5} {'Total':>6}")
    for label, name in (
        ("Life", "life_max"),
        ("Strength", "strength"),
        ("Agility", "agility"),
        ("AP", "ap_max"),
        ("Gold", "gold"),
        ("Attack", "attack"),
    ):
        print(f"{label:<10} {getattr(derived.base, name):>5} {getattr(derived.total, name):>6}")
    print(f"Aligned items: {derived.aligned_bonus}")
    print(f"Hand: {derived.hand.name} (level {derived.hand.level})")
    print(f"Bonus: {derived.hand_bonus_text}")


def cmd_formula(args):
    """Evaluate a formula against a freshly built character."""
    from .engine_core.errors import UnknownSelectionError

    try:
        sheet = _build_sheet(args)
    except UnknownSelectionError as e:
        print(f"Error: {e}")
        sys.exit(1)

    for name in RESOURCE_OPTIONS:
        value = getattr(args, name)
        if value is not None:
            sheet.set_resource(name, value)

    result = sheet.set_formula(args.text)
    if not result.ok:
        print(f"Formula {result.error_kind} error: {result.error}")
        sys.exit(1)
    print(result.value)


def cmd_serve(args):
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run("grimhand.api.app:app", host=args.host, port=args.port)


if __name__ == "__main__":
    main()
