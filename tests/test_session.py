"""Session behaviour: mark/unmark state machine, jumps, cycling, and events.

Scenarios mirror real editing sequences (open files, pin some, close all) and
check both the resulting records and the rendered tabline text.
"""

from __future__ import annotations

import random
import unittest
from dataclasses import replace

from dartline.config import DartConfig, TablineConfig
from dartline.host import MemoryHost
from dartline.selectors import All, Buflist, Marklist, Marks
from dartline.session import Session
from dartline.state import Record
from dartline.tabline.measure import visible_text


def _session(**config_kwargs) -> tuple[Session, MemoryHost]:
    tabline = config_kwargs.pop("tabline", TablineConfig(icons=False))
    config = replace(DartConfig(tabline=tabline), **config_kwargs)
    host = MemoryHost(columns=60)
    return Session(host, config), host


def _open(session: Session, host: MemoryHost, name: str) -> int:
    handle = host.open(f"/p/dir1/{name}")
    session.file_shown(handle)
    return handle


def _tabline(session: Session) -> str:
    return visible_text(session.render())


def _pairs(session: Session) -> list[tuple[str, str]]:
    return [(record.mark, record.filename.rsplit("/", 1)[-1]) for record in session.list_all()]


class MarkTests(unittest.TestCase):
    def test_recent_files_fill_the_window_in_recency_order(self) -> None:
        session, host = _session()
        for name in ("1.lua", "2.lua", "3.lua", "4.lua"):
            _open(session, host, name)

        self.assertEqual(_pairs(session), [("z", "4.lua"), ("x", "3.lua"), ("c", "2.lua")])
        self.assertEqual(_tabline(session), " z 4.lua  x 3.lua  c 2.lua ")

    def test_marking_recent_file_promotes_it_to_pinned_tier(self) -> None:
        session, host = _session(marklist=("a",), buflist=("z",))
        _open(session, host, "A.lua")
        self.assertEqual(_pairs(session), [("z", "A.lua")])

        session.mark()

        self.assertEqual(_pairs(session), [("a", "A.lua")])
        self.assertIsNone(session.lookup_by_mark("z"))

    def test_marking_leaves_gap_in_recent_tier(self) -> None:
        session, host = _session()
        for name in ("1.lua", "2.lua", "3.lua", "4.lua"):
            _open(session, host, name)

        session.mark()

        self.assertEqual(_tabline(session), " x 3.lua  c 2.lua  a 4.lua ")

    def test_pinning_many_files_uses_marklist_order(self) -> None:
        session, host = _session()
        for idx, name in enumerate(("1.lua", "2.lua", "3.lua", "4.lua", "5.lua"), start=1):
            _open(session, host, name)
            if idx <= 4:
                session.mark()

        self.assertEqual(_tabline(session), " z 5.lua  a 1.lua  s 2.lua  d 3.lua  f 4.lua ")

    def test_exhausted_marklist_keeps_one_overflow_record(self) -> None:
        session, host = _session(marklist=("1", "2"), buflist=("#",))
        for idx, name in enumerate(("1.lua", "2.lua", "3.lua", "4.lua", "5.lua"), start=1):
            _open(session, host, name)
            if idx <= 4:
                session.mark()

        self.assertEqual(_tabline(session), " # 5.lua  1 1.lua  2 2.lua  + 4.lua ")
        self.assertIsNone(session.lookup_by_filename("/p/dir1/3.lua"))

    def test_marking_pinned_file_toggles_it_back_to_most_recent_slot(self) -> None:
        session, host = _session()
        first = _open(session, host, "1.lua")
        _open(session, host, "2.lua")
        session.mark(first)
        self.assertEqual(_pairs(session), [("z", "2.lua"), ("a", "1.lua")])

        session.mark(first)

        self.assertEqual(_pairs(session), [("z", "1.lua"), ("x", "2.lua")])

    def test_explicit_mark_is_idempotent(self) -> None:
        session, host = _session()
        handle = _open(session, host, "1.lua")

        session.mark(handle, "q")
        session.mark(handle, "q")

        self.assertEqual(session.list_all(), [Record("q", "/p/dir1/1.lua")])

    def test_explicit_mark_in_use_is_rebound_to_new_file(self) -> None:
        session, host = _session()
        first = _open(session, host, "1.lua")
        second = _open(session, host, "2.lua")
        session.mark(first, "a")

        session.mark(second, "a")

        self.assertEqual(_pairs(session), [("a", "2.lua")])

    def test_invalid_explicit_mark_is_ignored(self) -> None:
        session, host = _session()
        handle = _open(session, host, "1.lua")
        calls: list[int] = []
        session.subscribe(lambda: calls.append(1))

        for mark in ("ab", " ", "\n", ""):
            session.mark(handle, mark)

        self.assertEqual(_pairs(session), [("z", "1.lua")])
        self.assertEqual(calls, [])

    def test_without_buflist_only_pinned_files_are_tracked(self) -> None:
        session, host = _session(buflist=())
        handle = _open(session, host, "1.lua")
        self.assertEqual(_tabline(session), "")

        session.mark(handle)

        self.assertEqual(_tabline(session), " a 1.lua ")

    def test_unshowable_buffer_is_not_marked(self) -> None:
        session, host = _session()
        calls: list[int] = []
        session.subscribe(lambda: calls.append(1))
        host.add_directory("/p/dir1")
        handle = host.open("/p/dir1")

        session.mark(handle)
        session.mark(host.open("/p/prompt", kind="prompt"))
        session.mark(999)

        self.assertEqual(session.list_all(), [])
        self.assertEqual(calls, [])


class UnmarkTests(unittest.TestCase):
    def test_unmark_all_then_current_buffer_reenters_recent_tier(self) -> None:
        session, host = _session()
        for idx, name in enumerate(("yeahthisisareallylongfilenamesowhat.lua", "1.lua", "2.lua", "3.lua"), start=1):
            _open(session, host, name)
            session.mark()
            if idx == 3:
                session.unmark(All())
            if idx == 4:
                session.mark()

        self.assertEqual(_tabline(session), " z 3.lua  x 2.lua ")

    def test_unmark_missing_mark_is_a_no_op(self) -> None:
        session, host = _session()
        _open(session, host, "1.lua")
        calls: list[int] = []
        session.subscribe(lambda: calls.append(1))

        session.unmark(Marks(["q"]))

        self.assertEqual(_pairs(session), [("z", "1.lua")])
        self.assertEqual(calls, [1])

    def test_unmark_buflist_keeps_pinned_files(self) -> None:
        session, host = _session()
        first = _open(session, host, "1.lua")
        _open(session, host, "2.lua")
        session.mark(first)
        host.set_current_buffer(first)

        session.unmark(Buflist())

        self.assertEqual(_pairs(session), [("a", "1.lua")])

    def test_unmark_marklist_keeps_recent_files(self) -> None:
        session, host = _session()
        first = _open(session, host, "1.lua")
        _open(session, host, "2.lua")
        session.mark(first)

        session.unmark(Marklist())

        self.assertEqual(_pairs(session), [("z", "2.lua")])

    def test_unknown_selector_is_rejected(self) -> None:
        session, _host = _session()
        with self.assertRaises(TypeError):
            session.unmark("all")  # type: ignore[arg-type]


class NavigationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.session, self.host = _session()
        self.handles = [_open(self.session, self.host, name) for name in ("1.lua", "2.lua", "3.lua")]
        # records: z 3.lua, x 2.lua, c 1.lua

    def test_jump_switches_current_buffer(self) -> None:
        self.assertTrue(self.session.jump("x"))
        self.assertEqual(self.host.current_buffer(), self.handles[1])

    def test_jump_to_unknown_mark_does_nothing(self) -> None:
        calls: list[int] = []
        self.session.subscribe(lambda: calls.append(1))

        self.assertFalse(self.session.jump("q"))
        self.assertEqual(self.host.current_buffer(), self.handles[2])
        self.assertEqual(calls, [])

    def test_cycle_moves_through_tabline_order(self) -> None:
        self.assertTrue(self.session.cycle_next())
        self.assertEqual(self.host.current_buffer(), self.handles[1])
        self.assertTrue(self.session.cycle_prev())
        self.assertEqual(self.host.current_buffer(), self.handles[2])

    def test_cycle_wraps_around_by_default(self) -> None:
        self.assertTrue(self.session.cycle_prev())
        self.assertEqual(self.host.current_buffer(), self.handles[0])
        self.assertTrue(self.session.cycle_next())
        self.assertEqual(self.host.current_buffer(), self.handles[2])

    def test_cycle_without_wraparound_stops_at_edges(self) -> None:
        session, host = _session(tabline=TablineConfig(icons=False, cycle_wraps_around=False))
        first = _open(session, host, "1.lua")
        _open(session, host, "2.lua")
        host.set_current_buffer(first)

        self.assertFalse(session.cycle_next())
        self.assertEqual(host.current_buffer(), first)
        self.assertTrue(session.cycle_prev())

    def test_cycle_is_a_no_op_when_current_buffer_untracked(self) -> None:
        untracked = self.host.open("/p/other.txt", listed=False)

        self.assertFalse(self.session.cycle_next())
        self.assertEqual(self.host.current_buffer(), untracked)

    def test_cycle_without_active_buffer_does_nothing(self) -> None:
        session, host = _session()
        session.store.replace([Record("z", "/p/dir1/1.lua"), Record("x", "/p/dir1/2.lua")])
        calls: list[int] = []
        session.subscribe(lambda: calls.append(1))

        self.assertFalse(session.cycle_next())
        self.assertFalse(session.cycle_prev())
        self.assertEqual(host.current_buffer(), -1)
        self.assertEqual(calls, [])

    def test_cycle_to_record_without_buffer_does_nothing(self) -> None:
        self.host.close(self.handles[1])
        calls: list[int] = []
        self.session.subscribe(lambda: calls.append(1))

        self.assertFalse(self.session.cycle_next())
        self.assertEqual(self.host.current_buffer(), self.handles[2])
        self.assertEqual(calls, [])

    def test_cycle_with_no_records(self) -> None:
        session, _host = _session()
        self.assertFalse(session.cycle_next())

    def test_pick_jumps_to_mark_from_picker_line(self) -> None:
        entries = self.session.pick_entries()
        self.assertEqual(entries[0], "Jump to buffer:")
        self.assertEqual(entries[2], "  x → 2.lua")

        self.assertTrue(self.session.pick(entries[2]))
        self.assertEqual(self.host.current_buffer(), self.handles[1])
        self.assertFalse(self.session.pick(entries[0]))


class HostEventTests(unittest.TestCase):
    def test_file_closed_removes_record(self) -> None:
        session, host = _session()
        handle = _open(session, host, "1.lua")

        self.assertTrue(session.file_closed(handle))
        host.close(handle)

        self.assertEqual(session.list_all(), [])
        self.assertFalse(session.delete_by_filename("/p/dir1/1.lua"))

    def test_startup_seeds_recent_files_from_open_buffers(self) -> None:
        session, host = _session()
        host.open("/p/dir1/1.lua")
        host.open("/p/dir1/2.lua")

        session.startup()

        self.assertEqual(_tabline(session), " z 2.lua  x 1.lua ")

    def test_startup_without_buflist_tracks_nothing(self) -> None:
        session, host = _session(buflist=())
        host.open("/p/dir1/1.lua")

        session.startup()

        self.assertEqual(session.list_all(), [])

    def test_subscribers_are_notified_until_unsubscribed(self) -> None:
        session, host = _session()
        calls: list[int] = []
        unsubscribe = session.subscribe(lambda: calls.append(1))

        _open(session, host, "1.lua")
        session.mark()
        unsubscribe()
        _open(session, host, "2.lua")

        self.assertEqual(len(calls), 2)

    def test_tabline_mode(self) -> None:
        session, host = _session(tabline=TablineConfig(icons=False, always_show=False))
        self.assertEqual(session.tabline_mode(), 1)
        _open(session, host, "1.lua")
        self.assertEqual(session.tabline_mode(), 2)

        always, _host = _session()
        self.assertEqual(always.tabline_mode(), 2)

    def test_lookups_return_copies(self) -> None:
        session, host = _session()
        _open(session, host, "1.lua")

        record = session.lookup_by_filename("/p/dir1/1.lua")
        assert record is not None
        record.mark = "q"

        self.assertEqual(session.lookup_by_mark("z"), Record("z", "/p/dir1/1.lua"))
        self.assertIsNone(session.lookup_by_mark("q"))


class UniquenessTests(unittest.TestCase):
    def test_random_operations_keep_marks_and_filenames_unique(self) -> None:
        rng = random.Random(1234)
        session, host = _session(marklist=("a", "s"), buflist=("z", "x", "c"))
        names = [f"{idx}.lua" for idx in range(8)]
        marks = ["a", "s", "z", "x", "c", "+", "q"]

        for _ in range(500):
            op = rng.randrange(7)
            if op == 0:
                _open(session, host, rng.choice(names))
            elif op == 1:
                session.mark()
            elif op == 2:
                session.mark(None, rng.choice(marks))
            elif op == 3:
                session.unmark(Marks([rng.choice(marks)]))
            elif op == 4:
                session.cycle(rng.choice((-1, 1)))
            elif op == 5:
                handle = host.buffer_for(f"/p/dir1/{rng.choice(names)}")
                if handle > 0:
                    session.file_closed(handle)
                    host.close(handle)
            else:
                session.unmark(rng.choice((All(), Buflist(), Marklist())))

            records = session.list_all()
            record_marks = [record.mark for record in records]
            filenames = [record.filename for record in records]
            self.assertEqual(len(record_marks), len(set(record_marks)))
            self.assertEqual(len(filenames), len(set(filenames)))
            self.assertLessEqual(record_marks.count("+"), 1)


if __name__ == "__main__":
    unittest.main()
