#!/usr/bin/env python3
"""
Ranglisten für Nachbarn und Empfehlungen
"""

from typing import Hashable, Iterable, List, NamedTuple, Optional


class RankedPair(NamedTuple):
    """Schlüssel mit Score (Ähnlichkeit oder Empfehlungswert)."""

    key: Hashable
    score: float


def rank_pairs(pairs: Iterable[RankedPair], limit: Optional[int] = None) -> List[RankedPair]:
    """
    Sortiert Paare absteigend nach Score.

    Gleiche Scores werden nach der Textdarstellung des Schlüssels aufsteigend
    sortiert, damit die Reihenfolge unabhängig von der Einfügereihenfolge ist.

    Args:
        pairs: Zu sortierende Paare
        limit: Optional nur die besten N zurückgeben

    Returns:
        Neue, sortierte Liste
    """
    ranked = sorted(pairs, key=lambda pair: (-pair.score, str(pair.key)))
    if limit is not None:
        if limit < 0:
            raise ValueError(f"limit muss >= 0 sein, nicht {limit}")
        ranked = ranked[:limit]
    return ranked
