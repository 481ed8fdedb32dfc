"""
Hilfsfunktionen: Logging, Konfiguration und Datei-I/O.
"""
