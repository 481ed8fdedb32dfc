"""
Gemeinsame Fixtures für alle Tests
"""

import pytest


@pytest.fixture
def registry():
    """Frische Registry pro Test"""
    from recommender.registry import TableRegistry

    return TableRegistry()


@pytest.fixture
def books(registry):
    """Tabelle 'books' mit Chris, Jay, Mary und Jack"""
    table = registry.get_table("books")
    table.add("Chris", {"1984": 5.0, "Robinson Crusoe": 4.0, "Moby-Dick": 3.0})
    table.add("Jay", {"1984": 5.0, "Robinson Crusoe": 4.0, "Gulliver's Travels": 4.5})
    table.add("Mary", {"1984": 4.0, "Robinson Crusoe": 3.0, "Gulliver's Travels": 4.5})
    table.add("Jack", {"1984": 3.0, "Robinson Crusoe": 1.0})
    return table
