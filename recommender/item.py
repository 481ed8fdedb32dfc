#!/usr/bin/env python3
"""
Unveränderliches Item einer Bewertungstabelle
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Hashable, Mapping, Optional


@dataclass(frozen=True)
class RatingItem:
    """
    Schnappschuss eines Eintrags: Schlüssel plus Bewertungsvektor.

    Der Vektor wird beim Erzeugen kopiert und nur lesend herausgegeben.
    Änderungen erfordern ein neues Item. Der Hash basiert nur auf dem Schlüssel.

    Attributes:
        key: Schlüssel der Entität (z.B. Benutzername)
        vector: Bewertungen {item_key: rating}
    """

    key: Hashable
    vector: Mapping[Hashable, float] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        ratings = {item_key: float(rating) for item_key, rating in dict(self.vector).items()}
        object.__setattr__(self, "vector", MappingProxyType(ratings))

    def rating(self, item_key: Hashable, default: Optional[float] = None) -> Optional[float]:
        """Bewertung für einen Item-Schlüssel oder default."""
        return self.vector.get(item_key, default)

    def to_dict(self) -> Dict[Hashable, float]:
        """Gibt eine veränderbare Kopie des Vektors zurück."""
        return dict(self.vector)

    def __contains__(self, item_key: Any) -> bool:
        return item_key in self.vector

    def __len__(self) -> int:
        return len(self.vector)
