#!/usr/bin/env python3
"""
Zentrale Logging-Konfiguration für die Empfehlungs-Engine
"""

import logging
import sys
from typing import Optional

LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"

_configured: bool = False


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Richtet das Root-Logging ein (Konsole und optional Datei).

    Mehrfache Aufrufe ändern nur noch das Level, Handler werden nicht doppelt
    registriert.

    Args:
        level: Log-Level als Name (z.B. "INFO", "DEBUG")
        log_file: Optionaler Pfad einer Log-Datei
    """
    global _configured

    root = logging.getLogger()
    numeric_level = getattr(logging, str(level).upper(), logging.INFO)
    root.setLevel(numeric_level)

    if _configured:
        return

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Gibt einen benannten Logger zurück."""
    return logging.getLogger(name)
