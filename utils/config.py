#!/usr/bin/env python3
"""
Konfiguration der Empfehlungs-Engine aus Umgebungsvariablen

Unterstützte Variablen (optional in einer .env-Datei):
    RECOMMENDER_METRIC      Ähnlichkeitsmaß ("cosine" oder "pearson")
    RECOMMENDER_LOG_LEVEL   Log-Level (default: INFO)
    RECOMMENDER_LOG_FILE    Optionale Log-Datei
    RECOMMENDER_DATA_FILE   Optionale JSON-Datei mit Bewertungen
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from recommender.similarity import DEFAULT_METRIC, get_metric
from utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class EngineConfig:
    """Laufzeit-Konfiguration der Engine."""

    metric: str = DEFAULT_METRIC
    log_level: str = "INFO"
    log_file: Optional[str] = None
    data_file: Optional[str] = None

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Liest die Konfiguration aus den Umgebungsvariablen."""
        return cls(
            metric=os.environ.get("RECOMMENDER_METRIC", DEFAULT_METRIC).strip().lower(),
            log_level=os.environ.get("RECOMMENDER_LOG_LEVEL", "INFO"),
            log_file=os.environ.get("RECOMMENDER_LOG_FILE") or None,
            data_file=os.environ.get("RECOMMENDER_DATA_FILE") or None,
        )

    def validate(self) -> None:
        """
        Prüft die Konfiguration.

        Raises:
            ValueError: Bei unbekanntem Ähnlichkeitsmaß
        """
        get_metric(self.metric)


def load_config(dotenv_path: str = ".env") -> EngineConfig:
    """
    Lädt die .env-Datei (falls vorhanden) und erzeugt die Konfiguration.

    Bereits gesetzte Umgebungsvariablen haben Vorrang vor der Datei.

    Args:
        dotenv_path: Pfad der .env-Datei

    Returns:
        Validierte EngineConfig

    Raises:
        ValueError: Bei ungültiger Konfiguration
    """
    if load_dotenv(dotenv_path=dotenv_path):
        logger.debug(f"Umgebungsvariablen aus '{dotenv_path}' geladen")

    config = EngineConfig.from_env()
    config.validate()
    logger.debug(f"Konfiguration: {config}")
    return config
