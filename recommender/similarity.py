#!/usr/bin/env python3
"""
Ähnlichkeitsmaße für dünnbesetzte Bewertungsvektoren

Beide Maße betrachten nur die gemeinsamen Schlüssel (Items, die in beiden
Vektoren bewertet wurden) und liefern 0.0 statt NaN/Inf, wenn der
Nenner verschwindet.
"""

import math
from typing import Callable, Dict, Hashable, List, Mapping, Tuple

SimilarityMetric = Callable[[Mapping[Hashable, float], Mapping[Hashable, float]], float]


def _shared_values(a: Mapping[Hashable, float], b: Mapping[Hashable, float]) -> List[Tuple[float, float]]:
    """Liefert die Wertepaare aller gemeinsamen Schlüssel."""
    # Über den kleineren Vektor iterieren
    if len(a) <= len(b):
        return [(float(x), float(b[key])) for key, x in a.items() if key in b]
    return [(float(a[key]), float(y)) for key, y in b.items() if key in a]


def cosine_similarity(a: Mapping[Hashable, float], b: Mapping[Hashable, float]) -> float:
    """
    Kosinus-Ähnlichkeit über die gemeinsamen Schlüssel.

    Σ(x·y) / (sqrt(Σx²) · sqrt(Σy²))

    Args:
        a: Erster Bewertungsvektor
        b: Zweiter Bewertungsvektor

    Returns:
        Ähnlichkeit, 0.0 ohne gemeinsame Schlüssel oder bei Nullvektor
    """
    pairs = _shared_values(a, b)
    if not pairs:
        return 0.0

    sum_xy = sum(x * y for x, y in pairs)
    sum_x2 = sum(x * x for x, _ in pairs)
    sum_y2 = sum(y * y for _, y in pairs)

    denominator = math.sqrt(sum_x2) * math.sqrt(sum_y2)
    if denominator == 0:
        return 0.0

    return sum_xy / denominator


def pearson_correlation(a: Mapping[Hashable, float], b: Mapping[Hashable, float]) -> float:
    """
    Pearson-Korrelation über die gemeinsamen Schlüssel.

    Args:
        a: Erster Bewertungsvektor
        b: Zweiter Bewertungsvektor

    Returns:
        Korrelation in [-1, 1], 0.0 ohne gemeinsame Schlüssel oder ohne Varianz
    """
    pairs = _shared_values(a, b)
    n = len(pairs)
    if n == 0:
        return 0.0

    xs = [x for x, _ in pairs]
    ys = [y for _, y in pairs]

    # Konstante Bewertungen haben keine Varianz, auch wenn die Rundung etwas anderes ergibt
    if all(x == xs[0] for x in xs) or all(y == ys[0] for y in ys):
        return 0.0

    mean_x = sum(xs) / n
    mean_y = sum(ys) / n
    dx = [x - mean_x for x in xs]
    dy = [y - mean_y for y in ys]

    numerator = sum(a_i * b_i for a_i, b_i in zip(dx, dy))
    var_x = sum(d * d for d in dx)
    var_y = sum(d * d for d in dy)

    denominator = math.sqrt(var_x) * math.sqrt(var_y)
    if denominator == 0:
        return 0.0

    return numerator / denominator


SIMILARITY_METRICS: Dict[str, SimilarityMetric] = {
    "cosine": cosine_similarity,
    "pearson": pearson_correlation,
}

DEFAULT_METRIC: str = "cosine"


def get_metric(name: str) -> SimilarityMetric:
    """
    Gibt das Ähnlichkeitsmaß zu einem Namen zurück.

    Args:
        name: Name des Maßes ("cosine" oder "pearson", Groß-/Kleinschreibung egal)

    Returns:
        Die Metrik-Funktion

    Raises:
        ValueError: Wenn der Name unbekannt ist
    """
    metric = SIMILARITY_METRICS.get(str(name).strip().lower())
    if metric is None:
        known = ", ".join(sorted(SIMILARITY_METRICS))
        raise ValueError(f"Unbekanntes Ähnlichkeitsmaß '{name}' (bekannt: {known})")
    return metric
