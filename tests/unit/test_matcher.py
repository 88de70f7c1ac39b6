"""
Unit tests for the filename matcher and the shared result aggregates.
"""

import threading

import pytest

from accio.tools.matcher import ResultCollector, VisitCounter, ascii_lower, matches


class TestMatches:
    """Test cases for the matches predicate."""

    def test_exact_name_matches(self):
        assert matches("notes.txt", "notes.txt")

    def test_case_is_ignored(self):
        """Test that ASCII letter case is ignored in both directions."""
        assert matches("foo.TXT", "Foo.txt")
        assert matches("README.MD", "readme.md")

    def test_different_extension_does_not_match(self):
        assert not matches("Foo.text", "Foo.txt")

    def test_no_partial_matches(self):
        """Test that substrings and prefixes are not matches."""
        assert not matches("a.txt.bak", "a.txt")
        assert not matches("ba.txt", "a.txt")
        assert not matches("a.tx", "a.txt")

    def test_wildcards_are_literal(self):
        assert not matches("anything.txt", "*.txt")
        assert matches("*.txt", "*.TXT")

    def test_non_ascii_is_not_case_folded(self):
        """Test that only ASCII letters are folded."""
        assert matches("ÉTÉ.txt", "ÉTÉ.TXT")
        assert not matches("été.txt", "ÉTÉ.txt")
        assert not matches("straße", "STRASSE")

    def test_empty_names(self):
        assert matches("", "")
        assert not matches("a", "")

    @pytest.mark.parametrize("value,expected", [
        ("ABC", "abc"),
        ("MiXeD.Txt", "mixed.txt"),
        ("Ä123", "Ä123"),
    ])
    def test_ascii_lower(self, value, expected):
        assert ascii_lower(value) == expected


class TestResultCollector:
    """Test cases for the append-only result sink."""

    def test_preserves_insertion_order(self):
        collector = ResultCollector()
        collector.add("/a")
        collector.extend(["/b", "/c"])
        collector.add("/d")

        assert collector.to_list() == ["/a", "/b", "/c", "/d"]
        assert len(collector) == 4

    def test_extend_with_nothing(self):
        collector = ResultCollector()
        collector.extend([])
        collector.extend(iter(()))

        assert collector.to_list() == []
        assert len(collector) == 0

    def test_to_list_returns_copy(self):
        collector = ResultCollector()
        collector.add("/a")

        snapshot = collector.to_list()
        snapshot.append("/b")

        assert collector.to_list() == ["/a"]

    def test_concurrent_appends_lose_nothing(self):
        """Test that appends from many threads are neither lost nor duplicated."""
        collector = ResultCollector()
        per_thread = 500

        def worker(thread_id):
            for i in range(per_thread):
                collector.add(f"/t{thread_id}/{i}")

        threads = [threading.Thread(target=worker, args=(t,)) for t in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        paths = collector.to_list()
        assert len(paths) == 8 * per_thread
        assert len(set(paths)) == 8 * per_thread


class TestVisitCounter:
    """Test cases for the directory visit counter."""

    def test_starts_at_zero(self):
        assert VisitCounter().value == 0

    def test_increment(self):
        counter = VisitCounter()
        counter.increment()
        counter.increment(3)

        assert counter.value == 4

    def test_callback_receives_increments(self):
        received = []
        counter = VisitCounter(received.append)

        counter.increment()
        counter.increment(2)

        assert received == [1, 2]

    def test_concurrent_increments(self):
        """Test that increments from many threads are not lost."""
        calls = []
        counter = VisitCounter(calls.append)

        def worker():
            for _ in range(1000):
                counter.increment()

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert counter.value == 8000
        assert len(calls) == 8000
