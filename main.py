#!/usr/bin/env python3
"""
Haupteinstiegspunkt für die Empfehlungs-Engine

Beispiele:
    python main.py                                   # Buch-Beispiel (Chris/Jay)
    python main.py --data ratings.json --entity Chris
    python main.py --data ratings.json --entity Chris --metric pearson --limit 5
    python main.py --entity Chris --output recommended.md
"""

import argparse
import sys
from typing import List, Optional

from recommender import NotFoundError, RatingTable, TableRegistry
from utils.config import EngineConfig, load_config
from utils.io import json_data_loader, load_ratings, populate_table, save_recommendations_to_markdown
from utils.logging_config import get_logger, setup_logging
from version import print_version_info

logger = get_logger(__name__)

DEMO_TABLE: str = "books"
DEMO_ENTITY: str = "Chris"


def populate_demo_table(books: RatingTable) -> None:
    """Füllt die Tabelle mit dem Buch-Beispiel."""
    books.add("Chris", {"1984": 5.0, "Robinson Crusoe": 4.0, "Moby-Dick": 3.0})
    books.add("Jay", {"1984": 5.0, "Robinson Crusoe": 4.0, "Gulliver's Travels": 4.5})


def build_parser() -> argparse.ArgumentParser:
    """Erzeugt den Argument-Parser."""
    parser = argparse.ArgumentParser(description="Empfehlungen per kollaborativem Filtern")
    parser.add_argument("--data", help="JSON-Datei mit Bewertungen {entity: {item: rating}}")
    parser.add_argument("--entity", help=f"Entität, für die empfohlen wird (default: {DEMO_ENTITY})")
    parser.add_argument("--metric", help="Ähnlichkeitsmaß: cosine oder pearson")
    parser.add_argument("--limit", type=int, help="Nur die besten N Ergebnisse anzeigen")
    parser.add_argument("--output", help="Empfehlungen zusätzlich als Markdown speichern")
    parser.add_argument("--table", default=DEMO_TABLE, help=f"Name der Tabelle (default: {DEMO_TABLE})")
    parser.add_argument("--version", action="store_true", help="Versionsinformationen anzeigen")
    return parser


def run_demo(args: argparse.Namespace, config: EngineConfig) -> int:
    """
    Berechnet Nachbarn und Empfehlungen und gibt sie aus.

    Args:
        args: Geparste Kommandozeilenargumente
        config: Engine-Konfiguration

    Returns:
        Exit-Code (0 bei Erfolg)
    """
    registry = TableRegistry(default_metric=args.metric or config.metric)
    table = registry.get_table(args.table)

    data_file = args.data or config.data_file
    if data_file:
        populate_table(table, load_ratings(data_file))
        table.set_data_loader(json_data_loader(data_file))
    else:
        populate_demo_table(table)

    entity = args.entity or DEMO_ENTITY

    try:
        neighbors = table.neighbors(entity, limit=args.limit)
        recommendations = table.recommend(entity, limit=args.limit)
    except NotFoundError as e:
        logger.error(f"❌ {e}")
        print(f"\n❌ Fehler: {e}")
        return 1

    print(f"\nNachbarn von {entity}:")
    for pair in neighbors:
        print(f"  {pair.key}: {pair.score:.4f}")

    print(f"\nEmpfehlungen für {entity}:")
    if not recommendations:
        print("  (keine)")
    for pair in recommendations:
        print(f"  Recommending {pair.key} with score: {pair.score:.4f}")

    if args.output:
        save_recommendations_to_markdown(entity, recommendations, args.output, neighbors=neighbors)

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Hauptfunktion - lädt Konfiguration und Logging und startet die Berechnung.

    Args:
        argv: Argumente (default: sys.argv[1:])

    Returns:
        Exit-Code
    """
    args = build_parser().parse_args(argv)

    if args.version:
        print_version_info()
        return 0

    try:
        config = load_config()
    except ValueError as e:
        print(f"\n❌ Ungültige Konfiguration: {e}")
        return 2

    setup_logging(config.log_level, config.log_file)
    logger.info("Empfehlungs-Engine startet...")

    try:
        return run_demo(args, config)
    except (OSError, ValueError) as e:
        logger.error(f"❌ Fehler: {e}", exc_info=True)
        print(f"\n❌ Fehler: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
