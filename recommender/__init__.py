"""
Recommender-Package der Empfehlungs-Engine.

Dieses Package enthält:
- Ähnlichkeitsmaße für Bewertungsvektoren (`cosine_similarity`, `pearson_correlation`)
- Die thread-sichere Bewertungstabelle mit Nachbarsuche und Empfehlungen (`RatingTable`)
- Das Verzeichnis benannter Tabellen (`TableRegistry`)
"""

from .exceptions import LoadFailedError, NotFoundError, RecommenderError
from .item import RatingItem
from .ranking import RankedPair, rank_pairs
from .registry import TableRegistry
from .similarity import (
    DEFAULT_METRIC,
    SIMILARITY_METRICS,
    cosine_similarity,
    get_metric,
    pearson_correlation,
)
from .table import RatingTable, ReadWriteLock

__all__ = [
    "RecommenderError",
    "NotFoundError",
    "LoadFailedError",
    "RatingItem",
    "RankedPair",
    "rank_pairs",
    "RatingTable",
    "ReadWriteLock",
    "TableRegistry",
    "DEFAULT_METRIC",
    "SIMILARITY_METRICS",
    "cosine_similarity",
    "pearson_correlation",
    "get_metric",
]
