#!/usr/bin/env python3
"""
Thread-sichere Bewertungstabelle mit Nachbarsuche und Empfehlungen

Eine RatingTable hält pro Entität (z.B. Benutzer) einen Bewertungsvektor
{item: rating}. Aus diesen Vektoren werden die ähnlichsten Nachbarn einer
Entität bestimmt und daraus gewichtete Empfehlungen für Items berechnet,
die die Entität selbst noch nicht bewertet hat.

Sperrdisziplin:
- Lesende Operationen (count, exists, value, Nachbar-Scan) teilen sich eine
  Lesesperre, schreibende (add, delete, flush, Setter) nehmen die
  Schreibsperre.
- Callbacks (Data-Loader, added, about-to-delete) werden unter der Sperre nur
  gelesen und erst NACH dem Freigeben aufgerufen. Ein Callback darf daher
  selbst wieder auf die Tabelle zugreifen.
"""

import logging
import math
import threading
from collections import defaultdict
from contextlib import contextmanager
from typing import Any, Callable, Dict, Hashable, Iterator, List, Mapping, Optional, Union

from .exceptions import LoadFailedError, NotFoundError
from .item import RatingItem
from .ranking import RankedPair, rank_pairs
from .similarity import DEFAULT_METRIC, SimilarityMetric, get_metric
from utils.logging_config import get_logger

logger = get_logger(__name__)

DataLoader = Callable[[Hashable], Optional[Union[RatingItem, Mapping[Hashable, float]]]]
ItemCallback = Callable[[RatingItem], None]
LogSink = Union[logging.Logger, Callable[..., Any]]


class ReadWriteLock:
    """
    Lese-/Schreibsperre auf Basis von threading.Condition.

    Beliebig viele Leser oder genau ein Schreiber. Wartende Schreiber haben
    Vorrang vor neuen Lesern. Die Sperre ist nicht reentrant.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers: int = 0
        self._writer: bool = False
        self._writers_waiting: int = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


class RatingTable:
    """
    Sammlung von RatingItems unter eindeutigen Schlüsseln.

    Alle öffentlichen Methoden sind für parallele Aufrufe aus mehreren
    Threads gedacht.
    """

    def __init__(
        self,
        name: str,
        metric: Union[str, SimilarityMetric, None] = None,
        log_sink: Optional[LogSink] = None,
    ) -> None:
        """
        Initialisiert eine leere Tabelle.

        Args:
            name: Name der Tabelle
            metric: Ähnlichkeitsmaß als Funktion oder Name (default: cosine)
            log_sink: Optionaler Logger oder Callable für Info-Meldungen
        """
        self._name: str = name
        self._lock = ReadWriteLock()
        self._items: Dict[Hashable, RatingItem] = {}

        self._metric: SimilarityMetric = self._resolve_metric(metric)
        self._log_sink: Optional[LogSink] = log_sink

        self._data_loader: Optional[DataLoader] = None
        self._added_callback: Optional[ItemCallback] = None
        self._about_to_delete_callback: Optional[ItemCallback] = None

    @staticmethod
    def _resolve_metric(metric: Union[str, SimilarityMetric, None]) -> SimilarityMetric:
        if metric is None:
            return get_metric(DEFAULT_METRIC)
        if isinstance(metric, str):
            return get_metric(metric)
        if not callable(metric):
            raise TypeError(f"Ähnlichkeitsmaß muss aufrufbar sein, nicht {type(metric).__name__}")
        return metric

    @property
    def name(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"RatingTable(name={self._name!r}, count={self.count()})"

    # =========================================================================
    # Konfiguration
    # =========================================================================

    def set_data_loader(self, loader: Optional[DataLoader]) -> None:
        """
        Setzt den Loader, der bei einem Lookup-Fehlschlag aufgerufen wird.

        Der Loader bekommt den Schlüssel und liefert ein RatingItem (oder einen
        Bewertungsvektor) bzw. None, wenn er nichts laden kann.
        """
        with self._lock.write_locked():
            self._data_loader = loader

    def set_added_callback(self, callback: Optional[ItemCallback]) -> None:
        """Setzt den Callback, der nach jedem add() aufgerufen wird."""
        with self._lock.write_locked():
            self._added_callback = callback

    def set_about_to_delete_callback(self, callback: Optional[ItemCallback]) -> None:
        """Setzt den Callback, der vor dem Entfernen eines Items aufgerufen wird."""
        with self._lock.write_locked():
            self._about_to_delete_callback = callback

    def set_logger(self, log_sink: Optional[LogSink]) -> None:
        """Setzt den Logger bzw. ein Callable für Info-Meldungen der Tabelle."""
        with self._lock.write_locked():
            self._log_sink = log_sink

    def set_metric(self, metric: Union[str, SimilarityMetric]) -> None:
        """Setzt das Ähnlichkeitsmaß für Nachbarsuche und Empfehlungen."""
        resolved = self._resolve_metric(metric)
        with self._lock.write_locked():
            self._metric = resolved

    # =========================================================================
    # Items
    # =========================================================================

    def count(self) -> int:
        """Anzahl der gespeicherten Items."""
        with self._lock.read_locked():
            return len(self._items)

    def __len__(self) -> int:
        return self.count()

    def keys(self) -> List[Hashable]:
        """Schnappschuss aller Schlüssel in Einfügereihenfolge."""
        with self._lock.read_locked():
            return list(self._items)

    def add(self, key: Hashable, vector: Mapping[Hashable, float]) -> RatingItem:
        """
        Legt ein Item an oder überschreibt ein vorhandenes.

        Das Item ist sofort nach Freigabe der Sperre sichtbar, der
        added-Callback läuft danach außerhalb der Sperre.

        Args:
            key: Schlüssel der Entität
            vector: Bewertungen {item_key: rating}

        Returns:
            Das gespeicherte RatingItem
        """
        item = RatingItem(key, vector)

        with self._lock.write_locked():
            self._items[key] = item
            added_callback = self._added_callback

        if added_callback is not None:
            added_callback(item)

        return item

    def delete(self, key: Hashable) -> RatingItem:
        """
        Entfernt ein Item.

        Der about-to-delete-Callback sieht das Item noch in der Tabelle.

        Args:
            key: Schlüssel der Entität

        Returns:
            Das entfernte RatingItem

        Raises:
            NotFoundError: Wenn der Schlüssel nicht existiert
        """
        with self._lock.read_locked():
            item = self._items.get(key)
            about_to_delete = self._about_to_delete_callback

        if item is None:
            raise NotFoundError(key, self._name)

        if about_to_delete is not None:
            about_to_delete(item)

        # Nur das Item entfernen, das der Callback gesehen hat
        with self._lock.write_locked():
            if self._items.get(key) is item:
                del self._items[key]

        logger.debug(f"'{key}' aus Tabelle '{self._name}' entfernt")
        return item

    def exists(self, key: Hashable) -> bool:
        """Prüft, ob ein Schlüssel vorhanden ist. Ruft nie den Data-Loader auf."""
        with self._lock.read_locked():
            return key in self._items

    def __contains__(self, key: Any) -> bool:
        return self.exists(key)

    def value(self, key: Hashable) -> RatingItem:
        """
        Gibt das Item zu einem Schlüssel zurück.

        Fehlt der Schlüssel und ist ein Data-Loader gesetzt, wird dieser
        aufgerufen. Ein geladenes Item wird per add() übernommen (inklusive
        added-Callback) und zurückgegeben.

        Args:
            key: Schlüssel der Entität

        Returns:
            Das gespeicherte RatingItem

        Raises:
            LoadFailedError: Loader vorhanden, hat aber nichts geliefert
            NotFoundError: Schlüssel fehlt und kein Loader gesetzt
        """
        with self._lock.read_locked():
            item = self._items.get(key)
            loader = self._data_loader

        if item is not None:
            return item

        if loader is None:
            raise NotFoundError(key, self._name)

        loaded = loader(key)
        if loaded is None:
            logger.debug(f"Data-Loader lieferte nichts für '{key}' in Tabelle '{self._name}'")
            raise LoadFailedError(key, self._name)

        vector = loaded.vector if isinstance(loaded, RatingItem) else loaded
        # Immer unter dem angefragten Schlüssel speichern
        return self.add(key, vector)

    def flush(self) -> None:
        """Leert die Tabelle. Der about-to-delete-Callback wird nicht aufgerufen."""
        with self._lock.write_locked():
            removed = len(self._items)
            self._items = {}

        logger.info(f"Tabelle '{self._name}' geleert ({removed} Items entfernt)")
        self._log("Flushing table", self._name)

    # =========================================================================
    # Nachbarn & Empfehlungen
    # =========================================================================

    def neighbors(self, key: Hashable, limit: Optional[int] = None) -> List[RankedPair]:
        """
        Berechnet die Ähnlichkeit einer Entität zu allen anderen der Tabelle.

        Args:
            key: Schlüssel der Entität
            limit: Optional nur die N ähnlichsten zurückgeben

        Returns:
            Paare (key, Ähnlichkeit) absteigend sortiert, ohne die Entität selbst

        Raises:
            NotFoundError: Wenn die Entität weder vorhanden noch ladbar ist
        """
        return self._neighbors(self.value(key), limit)

    def _neighbors(self, query: RatingItem, limit: Optional[int] = None) -> List[RankedPair]:
        """Vollständiger Scan der Tabelle gegen ein bereits aufgelöstes Item."""
        pairs: List[RankedPair] = []
        with self._lock.read_locked():
            metric = self._metric
            for other_key, other in self._items.items():
                if other_key == query.key:
                    continue
                pairs.append(RankedPair(other_key, metric(query.vector, other.vector)))

        logger.debug(f"{len(pairs)} Nachbarn für '{query.key}' in Tabelle '{self._name}' berechnet")
        return rank_pairs(pairs, limit)

    def recommend(self, key: Hashable, limit: Optional[int] = None) -> List[RankedPair]:
        """
        Empfiehlt Items, die die Entität noch nicht bewertet hat.

        Jeder Nachbar trägt mit dem Gewicht score / Summe aller Scores bei.
        Nachbarn mit Gewicht <= 0 werden übersprungen, Gewichte > 1 auf 1
        begrenzt. Ist die Summe aller Scores <= 0, gibt es keine Empfehlungen.

        Args:
            key: Schlüssel der Entität
            limit: Optional nur die N besten Empfehlungen zurückgeben

        Returns:
            Paare (item_key, Score) absteigend sortiert

        Raises:
            NotFoundError: Wenn die Entität weder vorhanden noch ladbar ist
        """
        query = self.value(key)
        dists = self._neighbors(query)
        known = query.vector

        if not dists:
            logger.info(f"Keine Nachbarn für '{key}' in Tabelle '{self._name}'")
            return []

        total_distance = sum(pair.score for pair in dists)
        if not math.isfinite(total_distance) or total_distance <= 0:
            logger.warning(
                f"Summe der Ähnlichkeiten für '{key}' ist {total_distance}, " f"keine Empfehlungen möglich"
            )
            return []

        with self._lock.read_locked():
            neighbor_items = [(pair, self._items.get(pair.key)) for pair in dists]

        recs: Dict[Hashable, float] = defaultdict(float)
        for pair, neighbor in neighbor_items:
            # Zwischenzeitlich gelöscht
            if neighbor is None:
                continue

            weight = pair.score / total_distance
            if weight <= 0:
                continue
            if weight > 1:
                weight = 1.0

            for item_key, rating in neighbor.vector.items():
                if item_key in known:
                    continue
                recs[item_key] += rating * weight

        logger.debug(f"{len(recs)} Empfehlungen für '{key}' in Tabelle '{self._name}' berechnet")
        return rank_pairs((RankedPair(item_key, score) for item_key, score in recs.items()), limit)

    # =========================================================================
    # Logging
    # =========================================================================

    def _log(self, *values: Any) -> None:
        """Gibt eine Meldung an den gesetzten Log-Sink weiter. Schlägt nie fehl."""
        with self._lock.read_locked():
            sink = self._log_sink

        if sink is None:
            return

        try:
            if isinstance(sink, logging.Logger):
                sink.info(" ".join(str(value) for value in values))
            else:
                sink(*values)
        except Exception:
            logger.debug(f"Log-Sink der Tabelle '{self._name}' ist fehlgeschlagen", exc_info=True)
