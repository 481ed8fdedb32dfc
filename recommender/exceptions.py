#!/usr/bin/env python3
"""
Fehlerklassen der Empfehlungs-Engine
"""

from typing import Any, Optional


class RecommenderError(Exception):
    """Basisklasse aller Fehler der Engine."""


class NotFoundError(RecommenderError, KeyError):
    """
    Ein Schlüssel existiert nicht in der Tabelle und konnte nicht geladen werden.

    Attributes:
        key: Der angefragte Schlüssel
        table: Name der Tabelle (falls bekannt)
    """

    def __init__(self, key: Any, table: Optional[str] = None) -> None:
        self.key = key
        self.table = table
        if table:
            message = f"Key '{key}' not found in table '{table}' and could not be loaded"
        else:
            message = f"Key '{key}' not found and could not be loaded"
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError würde die Nachricht sonst in Anführungszeichen setzen
        return str(self.args[0])


class LoadFailedError(NotFoundError):
    """Der Data-Loader wurde aufgerufen, hat aber kein Item geliefert."""
