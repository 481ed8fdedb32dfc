#!/usr/bin/env python3
"""
Unit Tests für die Empfehlungs-Engine

Installation:
    pip install pytest pytest-cov

Ausführen:
    pytest tests/
    pytest tests/ -v                    # Verbose
    pytest tests/ --cov=.              # Mit Coverage
    pytest tests/test_table.py         # Einzelne Datei
"""

import logging
import threading
from unittest.mock import Mock

import pytest


# ============================================================================
# tests/test_table.py
# ============================================================================


class TestRatingTableItems:
    """Tests für add/delete/exists/value/flush"""

    @pytest.fixture
    def table(self):
        from recommender.table import RatingTable

        return RatingTable("books")

    def test_add_and_value(self, table):
        """Test add und value"""
        item = table.add("Chris", {"1984": 5.0, "Moby-Dick": 3.0})

        assert item.key == "Chris"
        assert table.count() == 1
        assert len(table) == 1
        assert table.value("Chris") is item
        assert table.exists("Chris")
        assert "Chris" in table

    def test_add_overwrites(self, table):
        """add mit vorhandenem Schlüssel ersetzt das Item"""
        table.add("Chris", {"1984": 5.0})
        table.add("Chris", {"Ulysses": 2.0})

        assert table.count() == 1
        assert table.value("Chris").vector == {"Ulysses": 2.0}

    def test_idempotent_lookup(self, table):
        """Zwei Lookups ohne Schreibzugriff liefern gleiche Inhalte"""
        table.add("Chris", {"1984": 5.0})

        first = table.value("Chris")
        second = table.value("Chris")

        assert first.key == second.key
        assert first.vector == second.vector

    def test_value_missing_without_loader(self, table):
        """value ohne Loader löst NotFoundError aus"""
        from recommender.exceptions import LoadFailedError, NotFoundError

        with pytest.raises(NotFoundError) as exc_info:
            table.value("Nobody")

        assert not isinstance(exc_info.value, LoadFailedError)
        assert exc_info.value.key == "Nobody"
        assert exc_info.value.table == "books"
        assert "Nobody" in str(exc_info.value)

    def test_not_found_is_key_error(self, table):
        """NotFoundError lässt sich auch als KeyError fangen"""
        with pytest.raises(KeyError):
            table.value("Nobody")

    def test_delete(self, table):
        """delete entfernt das Item und gibt es zurück"""
        table.add("Chris", {"1984": 5.0})
        table.add("Jay", {"1984": 4.0})

        removed = table.delete("Chris")

        assert removed.key == "Chris"
        assert table.count() == 1
        assert not table.exists("Chris")

    def test_delete_missing(self, table):
        """delete eines fehlenden Schlüssels: NotFoundError, count unverändert"""
        from recommender.exceptions import NotFoundError

        table.add("Chris", {"1984": 5.0})

        with pytest.raises(NotFoundError):
            table.delete("Nobody")

        assert table.count() == 1

    def test_flush(self, table):
        """flush leert die Tabelle ohne about-to-delete-Callback"""
        callback = Mock()
        table.set_about_to_delete_callback(callback)
        table.add("Chris", {"1984": 5.0})
        table.add("Jay", {"1984": 4.0})

        table.flush()

        assert table.count() == 0
        assert not table.exists("Chris")
        assert not table.exists("Jay")
        callback.assert_not_called()

    def test_keys_snapshot(self, table):
        """keys() liefert die Schlüssel in Einfügereihenfolge"""
        table.add("Chris", {})
        table.add("Jay", {})
        keys = table.keys()
        table.add("Mary", {})

        assert keys == ["Chris", "Jay"]

    def test_empty_vector(self, table):
        """Leere Vektoren sind erlaubt"""
        item = table.add("Nobody", {})

        assert len(item) == 0
        assert table.exists("Nobody")

    def test_non_string_keys(self, table):
        """Beliebige hashbare Schlüssel"""
        table.add(42, {("book", 1): 5.0})

        assert table.value(42).rating(("book", 1)) == 5.0

    def test_repr(self, table):
        table.add("Chris", {})

        assert repr(table) == "RatingTable(name='books', count=1)"


class TestRatingTableHooks:
    """Tests für Data-Loader und Callbacks"""

    @pytest.fixture
    def table(self):
        from recommender.table import RatingTable

        return RatingTable("books")

    def test_added_callback(self, table):
        """added-Callback wird mit dem gespeicherten Item aufgerufen"""
        callback = Mock()
        table.set_added_callback(callback)

        item = table.add("Chris", {"1984": 5.0})

        callback.assert_called_once_with(item)

    def test_added_callback_sees_item(self, table):
        """Der Callback läuft außerhalb der Sperre und sieht das Item bereits"""
        seen = []
        table.set_added_callback(lambda item: seen.append((item.key, table.exists(item.key), table.count())))

        table.add("Chris", {"1984": 5.0})

        assert seen == [("Chris", True, 1)]

    def test_callback_last_writer_wins(self, table):
        """Ein neuer Setter-Aufruf ersetzt den alten Callback"""
        first = Mock()
        second = Mock()
        table.set_added_callback(first)
        table.set_added_callback(second)

        table.add("Chris", {})

        first.assert_not_called()
        second.assert_called_once()

    def test_callback_can_be_cleared(self, table):
        """None entfernt den Callback"""
        callback = Mock()
        table.set_added_callback(callback)
        table.set_added_callback(None)

        table.add("Chris", {})

        callback.assert_not_called()

    def test_about_to_delete_sees_item(self, table):
        """about-to-delete-Callback sieht das Item noch in der Tabelle"""
        seen = []
        table.set_about_to_delete_callback(lambda item: seen.append((item.key, table.exists(item.key))))
        table.add("Chris", {"1984": 5.0})

        table.delete("Chris")

        assert seen == [("Chris", True)]
        assert not table.exists("Chris")

    def test_about_to_delete_replacement_survives(self, table):
        """Ersetzt der Callback das Item, bleibt die neue Version erhalten"""
        table.add("Chris", {"old": 1.0})
        table.set_about_to_delete_callback(lambda item: table.add(item.key, {"new": 2.0}))

        removed = table.delete("Chris")

        assert removed.vector == {"old": 1.0}
        assert table.exists("Chris")
        assert table.value("Chris").vector == {"new": 2.0}
        assert table.count() == 1

    def test_about_to_delete_not_called_for_missing(self, table):
        """Kein Callback, wenn der Schlüssel fehlt"""
        from recommender.exceptions import NotFoundError

        callback = Mock()
        table.set_about_to_delete_callback(callback)

        with pytest.raises(NotFoundError):
            table.delete("Nobody")

        callback.assert_not_called()

    def test_loader_promotion(self, table):
        """Geladene Items werden übernommen, added-Callback genau einmal"""
        from recommender.item import RatingItem

        loader = Mock(side_effect=lambda key: RatingItem(key, {"1984": 5.0}))
        added = Mock()
        table.set_data_loader(loader)
        table.set_added_callback(added)

        item = table.value("Chris")

        assert item.key == "Chris"
        assert item.vector == {"1984": 5.0}
        assert table.exists("Chris")
        added.assert_called_once_with(item)

        # Zweiter Zugriff trifft die Tabelle, nicht den Loader
        table.value("Chris")
        loader.assert_called_once_with("Chris")
        added.assert_called_once()

    def test_loader_returning_mapping(self, table):
        """Der Loader darf auch einen Bewertungsvektor liefern"""
        table.set_data_loader(lambda key: {"1984": 4.0})

        assert table.value("Jay").vector == {"1984": 4.0}

    def test_loader_item_stored_under_requested_key(self, table):
        """Das geladene Item wird unter dem angefragten Schlüssel abgelegt"""
        from recommender.item import RatingItem

        table.set_data_loader(lambda key: RatingItem("other", {"1984": 4.0}))

        item = table.value("Jay")

        assert item.key == "Jay"
        assert table.exists("Jay")
        assert not table.exists("other")

    def test_loader_returns_nothing(self, table):
        """Loader ohne Ergebnis: LoadFailedError (ein NotFoundError)"""
        from recommender.exceptions import LoadFailedError, NotFoundError

        table.set_data_loader(lambda key: None)

        with pytest.raises(LoadFailedError) as exc_info:
            table.value("Nobody")

        assert isinstance(exc_info.value, NotFoundError)
        assert not table.exists("Nobody")

    def test_exists_never_loads(self, table):
        """exists ruft den Loader nicht auf"""
        loader = Mock(return_value=None)
        table.set_data_loader(loader)

        assert not table.exists("Chris")
        loader.assert_not_called()

    def test_loader_may_reenter_table(self, table):
        """Der Loader darf selbst auf die Tabelle zugreifen"""
        table.add("Template", {"1984": 3.0})
        table.set_data_loader(lambda key: table.value("Template").to_dict())

        assert table.value("Copy").vector == {"1984": 3.0}

    def test_hook_errors_propagate(self, table):
        """Fehler im Callback erreichen den Aufrufer"""
        table.set_added_callback(Mock(side_effect=RuntimeError("boom")))

        with pytest.raises(RuntimeError, match="boom"):
            table.add("Chris", {})

        # Das Item ist trotzdem gespeichert
        assert table.exists("Chris")


class TestRatingTableLogging:
    """Tests für den injizierten Log-Sink"""

    def test_flush_logs_to_callable(self):
        """flush meldet sich beim Log-Sink"""
        from recommender.table import RatingTable

        sink = Mock()
        table = RatingTable("books", log_sink=sink)

        table.flush()

        sink.assert_called_once_with("Flushing table", "books")

    def test_flush_logs_to_logger(self):
        """Ein logging.Logger als Sink bekommt eine Info-Meldung"""
        from recommender.table import RatingTable

        sink = Mock(spec=logging.Logger)
        table = RatingTable("books")
        table.set_logger(sink)

        table.flush()

        sink.info.assert_called_once_with("Flushing table books")

    def test_failing_sink_is_ignored(self):
        """Ein fehlerhafter Sink lässt die Operation nicht scheitern"""
        from recommender.table import RatingTable

        table = RatingTable("books", log_sink=Mock(side_effect=RuntimeError("sink down")))
        table.add("Chris", {})

        table.flush()

        assert table.count() == 0

    def test_no_sink(self):
        """Ohne Sink ist Logging ein No-Op"""
        from recommender.table import RatingTable

        table = RatingTable("books")
        table.add("Chris", {})

        table.flush()

        assert table.count() == 0


class TestReadWriteLock:
    """Tests für ReadWriteLock"""

    def test_readers_share_lock(self):
        """Mehrere Leser gleichzeitig"""
        from recommender.table import ReadWriteLock

        lock = ReadWriteLock()
        second_reader_in = threading.Event()

        def reader():
            with lock.read_locked():
                second_reader_in.set()

        with lock.read_locked():
            thread = threading.Thread(target=reader)
            thread.start()
            assert second_reader_in.wait(timeout=2)

        thread.join(timeout=2)

    def test_writer_waits_for_reader(self):
        """Ein Schreiber wartet, bis der Leser fertig ist"""
        from recommender.table import ReadWriteLock

        lock = ReadWriteLock()
        writer_in = threading.Event()

        def writer():
            with lock.write_locked():
                writer_in.set()

        lock.acquire_read()
        thread = threading.Thread(target=writer)
        thread.start()

        assert not writer_in.wait(timeout=0.2)

        lock.release_read()
        assert writer_in.wait(timeout=2)
        thread.join(timeout=2)

    def test_reader_waits_for_writer(self):
        """Ein Leser wartet, bis der Schreiber fertig ist"""
        from recommender.table import ReadWriteLock

        lock = ReadWriteLock()
        reader_in = threading.Event()

        def reader():
            with lock.read_locked():
                reader_in.set()

        lock.acquire_write()
        thread = threading.Thread(target=reader)
        thread.start()

        assert not reader_in.wait(timeout=0.2)

        lock.release_write()
        assert reader_in.wait(timeout=2)
        thread.join(timeout=2)

    def test_lock_released_on_error(self):
        """Die Sperre wird auch bei Exceptions freigegeben"""
        from recommender.table import ReadWriteLock

        lock = ReadWriteLock()

        with pytest.raises(RuntimeError):
            with lock.write_locked():
                raise RuntimeError("boom")

        with lock.write_locked():
            pass


class TestConcurrency:
    """Parallele Zugriffe auf eine Tabelle"""

    def test_concurrent_adds(self):
        """Parallele add-Aufrufe verlieren keine Items"""
        from recommender.table import RatingTable

        table = RatingTable("users")
        added = []
        added_lock = threading.Lock()

        def on_added(item):
            with added_lock:
                added.append(item.key)

        table.set_added_callback(on_added)

        def worker(offset):
            for i in range(100):
                table.add(f"user-{offset}-{i}", {"item": float(i)})

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        assert table.count() == 800
        assert len(added) == 800

    def test_queries_during_writes(self):
        """Nachbarsuche und Empfehlungen laufen parallel zu Schreibzugriffen"""
        from recommender.table import RatingTable

        table = RatingTable("users")
        table.add("query", {"a": 5.0, "b": 3.0})
        for i in range(50):
            table.add(f"base-{i}", {"a": float(i % 5 + 1), "c": 2.0})

        errors = []

        def writer():
            for i in range(200):
                table.add(f"extra-{i}", {"a": 1.0, "b": float(i % 5), "d": 1.0})
                if i % 3 == 0:
                    table.delete(f"extra-{i}")

        def reader():
            try:
                for _ in range(20):
                    neighbors = table.neighbors("query")
                    assert all(pair.key != "query" for pair in neighbors)
                    recs = table.recommend("query")
                    assert all(pair.key not in ("a", "b") for pair in recs)
            except Exception as e:  # noqa: BLE001
                errors.append(e)

        threads = [threading.Thread(target=writer)] + [threading.Thread(target=reader) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)

        assert errors == []
        assert table.count() == 51 + 200 - 67


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
