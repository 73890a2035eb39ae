"""Tests for the record store and mark allocation.

Covers rank ordering, duplicate folding on insert, and overflow fallback.
"""

from __future__ import annotations

import unittest

from dartline.config import DartConfig
from dartline.state import MarkAllocator, Record, StateStore, is_mark_key


def _store() -> StateStore:
    return StateStore(DartConfig().ranks)


def _pairs(store: StateStore) -> list[tuple[str, str]]:
    return [(record.mark, record.filename) for record in store.records]


class StateStoreTests(unittest.TestCase):
    def test_insert_sorts_recent_marks_before_pinned_marks(self) -> None:
        store = _store()
        store.insert(Record("s", "/p/2.lua"))
        store.insert(Record("x", "/p/3.lua"))
        store.insert(Record("a", "/p/1.lua"))
        store.insert(Record("z", "/p/4.lua"))

        self.assertEqual([record.mark for record in store.records], ["z", "x", "a", "s"])

    def test_unranked_marks_sort_last_and_keep_insertion_order(self) -> None:
        store = _store()
        store.insert(Record("+", "/p/over.lua"))
        store.insert(Record("9", "/p/nine.lua"))
        store.insert(Record("a", "/p/a.lua"))

        self.assertEqual(_pairs(store), [("a", "/p/a.lua"), ("+", "/p/over.lua"), ("9", "/p/nine.lua")])

    def test_insert_with_taken_mark_rebinds_existing_record(self) -> None:
        store = _store()
        store.insert(Record("a", "/p/1.lua"))
        store.insert(Record("a", "/p/2.lua"))

        self.assertEqual(_pairs(store), [("a", "/p/2.lua")])

    def test_insert_with_tracked_filename_reassigns_its_mark(self) -> None:
        store = _store()
        store.insert(Record("z", "/p/1.lua"))
        store.insert(Record("a", "/p/1.lua"))

        self.assertEqual(_pairs(store), [("a", "/p/1.lua")])

    def test_rebinding_a_mark_drops_the_other_record_for_that_file(self) -> None:
        store = _store()
        store.insert(Record("z", "/p/1.lua"))
        store.insert(Record("a", "/p/2.lua"))

        store.insert(Record("a", "/p/1.lua"))

        self.assertEqual(_pairs(store), [("a", "/p/1.lua")])

    def test_assign_mark_evicts_previous_holder(self) -> None:
        store = _store()
        first = store.insert(Record("+", "/p/1.lua"))
        second = store.insert(Record("z", "/p/2.lua"))

        store.assign_mark(second, "+")

        self.assertEqual(_pairs(store), [("+", "/p/2.lua")])
        self.assertNotIn(first, store.records)

    def test_delete_reports_whether_a_record_was_removed(self) -> None:
        store = _store()
        store.insert(Record("a", "/p/1.lua"))

        self.assertTrue(store.delete("/p/1.lua"))
        self.assertFalse(store.delete("/p/1.lua"))
        self.assertEqual(len(store), 0)

    def test_all_returns_independent_copies(self) -> None:
        store = _store()
        store.insert(Record("a", "/p/1.lua"))

        snapshot = store.all()
        snapshot[0].mark = "q"

        self.assertEqual(store.records[0].mark, "a")

    def test_replace_keeps_given_order(self) -> None:
        store = _store()
        store.replace([Record("a", "/p/1.lua"), Record("z", "/p/2.lua")])

        self.assertEqual(_pairs(store), [("a", "/p/1.lua"), ("z", "/p/2.lua")])


class MarkAllocatorTests(unittest.TestCase):
    def test_next_unused_scans_marklist_in_order(self) -> None:
        store = _store()
        allocator = MarkAllocator(store, ("a", "s", "d"), "+")
        self.assertEqual(allocator.next_unused(), "a")

        store.insert(Record("a", "/p/1.lua"))
        store.insert(Record("d", "/p/3.lua"))
        self.assertEqual(allocator.next_unused(), "s")

    def test_next_unused_falls_back_to_overflow(self) -> None:
        store = _store()
        allocator = MarkAllocator(store, ("a",), "+")
        store.insert(Record("a", "/p/1.lua"))

        self.assertEqual(allocator.next_unused(), "+")

    def test_mark_key_validation(self) -> None:
        self.assertTrue(is_mark_key("a"))
        self.assertTrue(is_mark_key("#"))
        self.assertFalse(is_mark_key(""))
        self.assertFalse(is_mark_key(" "))
        self.assertFalse(is_mark_key("ab"))
        self.assertFalse(is_mark_key(1))


if __name__ == "__main__":
    unittest.main()
