#!/usr/bin/env python3
"""
I/O-Utilities: Bewertungen aus JSON laden, Empfehlungen als Markdown schreiben
"""

import json
import os
from datetime import datetime
from typing import Any, Callable, Dict, Hashable, List, Mapping, Optional, Sequence

from recommender.item import RatingItem
from recommender.ranking import RankedPair
from utils.logging_config import get_logger

logger = get_logger(__name__)

Ratings = Dict[str, Dict[str, float]]


def load_ratings(path: str) -> Ratings:
    """
    Lädt Bewertungen aus einer JSON-Datei der Form {entity: {item: rating}}.

    Args:
        path: Pfad der JSON-Datei

    Returns:
        Dictionary mit Entität als Key und Bewertungsvektor als Value

    Raises:
        OSError: Wenn die Datei nicht gelesen werden kann
        ValueError: Wenn der Inhalt nicht dem erwarteten Format entspricht
    """
    logger.info(f"Lade Bewertungen aus '{path}'")

    with open(path, "r", encoding="utf-8") as f:
        try:
            data: Any = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Ungültiges JSON in '{path}': {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"'{path}' muss ein JSON-Objekt {{entity: {{item: rating}}}} enthalten")

    ratings: Ratings = {}
    for entity, vector in data.items():
        if not isinstance(vector, dict):
            raise ValueError(f"Bewertungen für '{entity}' müssen ein JSON-Objekt sein")
        try:
            ratings[entity] = {item: float(rating) for item, rating in vector.items()}
        except (TypeError, ValueError) as e:
            raise ValueError(f"Ungültige Bewertung für '{entity}': {e}") from e

    logger.info(f"{len(ratings)} Entitäten aus '{path}' geladen")
    return ratings


def populate_table(table: Any, ratings: Mapping[Hashable, Mapping[Hashable, float]]) -> int:
    """
    Fügt alle Bewertungsvektoren in eine Tabelle ein.

    Args:
        table: RatingTable
        ratings: {entity: {item: rating}}

    Returns:
        Anzahl eingefügter Entitäten
    """
    for entity, vector in ratings.items():
        table.add(entity, vector)

    logger.info(f"{len(ratings)} Entitäten in Tabelle '{table.name}' eingefügt")
    return len(ratings)


def json_data_loader(path: str) -> Callable[[Hashable], Optional[RatingItem]]:
    """
    Erzeugt einen Data-Loader, der fehlende Entitäten aus einer JSON-Datei nachlädt.

    Die Datei wird bei jedem Fehlschlag neu gelesen, damit zwischenzeitliche
    Änderungen sichtbar werden.

    Args:
        path: Pfad der JSON-Datei im Format von load_ratings()

    Returns:
        Loader für RatingTable.set_data_loader()
    """

    def loader(key: Hashable) -> Optional[RatingItem]:
        if not os.path.exists(path):
            logger.warning(f"Datei '{path}' für Data-Loader existiert nicht")
            return None

        vector = load_ratings(path).get(key)
        if vector is None:
            logger.debug(f"'{key}' nicht in '{path}' gefunden")
            return None

        logger.debug(f"'{key}' aus '{path}' nachgeladen")
        return RatingItem(key, vector)

    return loader


def save_recommendations_to_markdown(
    entity: Hashable,
    recommendations: Sequence[RankedPair],
    filename: str = "recommended.md",
    neighbors: Optional[Sequence[RankedPair]] = None,
) -> str:
    """
    Speichert Empfehlungen (und optional die Nachbarn) einer Entität als Markdown.

    Args:
        entity: Entität, für die empfohlen wurde
        recommendations: Sortierte Empfehlungen
        filename: Name der Ausgabedatei
        neighbors: Optional die sortierten Nachbarn

    Returns:
        Dateiname der gespeicherten Datei

    Raises:
        IOError: Bei Schreibproblemen
    """
    timestamp: str = datetime.now().strftime("%d.%m.%Y %H:%M:%S")

    logger.info(f"Speichere Empfehlungen für '{entity}' in '{filename}'")

    lines: List[str] = [f"# Empfehlungen für {entity}\n", f"**Erstellt am:** {timestamp}\n", "---\n"]

    if neighbors is not None:
        lines.append("## Ähnlichste Nachbarn\n")
        if neighbors:
            lines.append("| # | Nachbar | Ähnlichkeit |")
            lines.append("|---|---------|-------------|")
            for i, pair in enumerate(neighbors, 1):
                lines.append(f"| {i} | {pair.key} | {pair.score:.4f} |")
            lines.append("")
        else:
            lines.append("_Keine Nachbarn gefunden._\n")

    lines.append("## Empfehlungen\n")
    if recommendations:
        lines.append("| # | Item | Score |")
        lines.append("|---|------|-------|")
        for i, pair in enumerate(recommendations, 1):
            lines.append(f"| {i} | {pair.key} | {pair.score:.4f} |")
        lines.append("")
    else:
        lines.append("_Keine Empfehlungen vorhanden._\n")
        logger.warning(f"Keine Empfehlungen für '{entity}' zum Speichern vorhanden")

    try:
        with open(filename, "w", encoding="utf-8") as f:
            f.write("\n".join(lines))
        logger.info(f"Empfehlungen erfolgreich gespeichert: {len(recommendations)} Items in '{filename}'")
    except IOError as e:
        logger.error(f"Fehler beim Speichern der Empfehlungen: {e}")
        raise

    return filename
