#!/usr/bin/env python3
"""
Verzeichnis benannter Bewertungstabellen

Statt einer globalen Instanz wird die Registry beim Start erzeugt und an
alle Aufrufer weitergereicht.
"""

import threading
from typing import Dict, List, Optional, Union

from .similarity import DEFAULT_METRIC, SimilarityMetric
from .table import LogSink, RatingTable
from utils.logging_config import get_logger

logger = get_logger(__name__)


class TableRegistry:
    """
    Liefert pro Name genau eine RatingTable.

    Tabellen werden beim ersten Zugriff angelegt und bleiben bis zum Ende
    des Prozesses bestehen.
    """

    def __init__(
        self,
        default_metric: Union[str, SimilarityMetric] = DEFAULT_METRIC,
        log_sink: Optional[LogSink] = None,
    ) -> None:
        """
        Initialisiert eine leere Registry.

        Args:
            default_metric: Ähnlichkeitsmaß für neu angelegte Tabellen
            log_sink: Log-Sink, der an neue Tabellen weitergegeben wird
        """
        self._lock = threading.Lock()
        self._tables: Dict[str, RatingTable] = {}
        self.default_metric = default_metric
        self.log_sink = log_sink

    def get_table(self, name: str) -> RatingTable:
        """
        Gibt die Tabelle mit diesem Namen zurück und legt sie bei Bedarf an.

        Args:
            name: Name der Tabelle

        Returns:
            Die (einzige) RatingTable zu diesem Namen
        """
        with self._lock:
            table = self._tables.get(name)
            if table is None:
                table = RatingTable(name, metric=self.default_metric, log_sink=self.log_sink)
                self._tables[name] = table
                logger.info(f"Neue Tabelle '{name}' angelegt")
        return table

    def table_names(self) -> List[str]:
        """Namen aller bisher angelegten Tabellen."""
        with self._lock:
            return list(self._tables)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._tables

    def __len__(self) -> int:
        with self._lock:
            return len(self._tables)
