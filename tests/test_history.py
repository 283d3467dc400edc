"""Tests for the recent-durations MRU list."""

import threading

import pytest

from satitimer.database.db import get_session, read_preference, write_preference
from satitimer.history import (
    DurationHistoryStore,
    DEFAULT_DURATIONS,
    RECENT_DURATIONS_KEY,
    parse_durations,
    format_durations,
    push_front,
)

from helpers import SignalCollector


DEFAULTS = [60, 1200, 1800]


# ═══════════════════════════════════════════════════════════════════════
#  PARSING
# ═══════════════════════════════════════════════════════════════════════


class TestParsing:

    def test_defaults_constant(self):
        assert list(DEFAULT_DURATIONS) == DEFAULTS

    def test_plain(self):
        assert parse_durations("900,60,1200") == [900, 60, 1200]

    def test_whitespace_tolerated(self):
        assert parse_durations(" 900 , 60,1200 ") == [900, 60, 1200]

    def test_malformed_gives_defaults(self):
        assert parse_durations("abc,,-5") == DEFAULTS

    @pytest.mark.parametrize("text", ["", None, ",", "60,,1200", "1.5", "x"])
    def test_unreadable_gives_defaults(self, text):
        assert parse_durations(text) == DEFAULTS

    @pytest.mark.parametrize("text", ["0", "60,-5", "-60,1200,1800"])
    def test_non_positive_gives_defaults(self, text):
        assert parse_durations(text) == DEFAULTS

    def test_duplicates_dropped_and_capped(self):
        assert parse_durations("60,60,300,600,900") == [60, 300, 600]

    def test_short_list_kept(self):
        assert parse_durations("300") == [300]

    def test_format(self):
        assert format_durations([900, 60, 1200]) == "900,60,1200"


class TestPushFront:

    def test_existing_moves_to_front(self):
        assert push_front(DEFAULTS, 1200) == [1200, 60, 1800]

    def test_new_value_drops_oldest(self):
        assert push_front(DEFAULTS, 900) == [900, 60, 1200]

    def test_front_value_unchanged(self):
        assert push_front(DEFAULTS, 60) == DEFAULTS

    def test_does_not_mutate_input(self):
        source = list(DEFAULTS)
        push_front(source, 900)
        assert source == DEFAULTS


# ═══════════════════════════════════════════════════════════════════════
#  STORE
# ═══════════════════════════════════════════════════════════════════════


class TestStore:

    def test_empty_store_lists_defaults(self, history):
        assert history.list() == DEFAULTS

    def test_touch_existing(self, history):
        assert history.touch(1200) == [1200, 60, 1800]
        assert history.list() == [1200, 60, 1800]

    def test_touch_new_drops_oldest(self, history):
        history.touch(900)
        assert history.list() == [900, 60, 1200]

    def test_sequence(self, history):
        for d in (300, 600, 300, 900):
            history.touch(d)
        assert history.list() == [900, 300, 600]

    def test_persisted_format(self, history):
        history.touch(900)
        with get_session() as db:
            assert read_preference(db, RECENT_DURATIONS_KEY) == "900,60,1200"

    def test_survives_new_instance(self, history):
        history.touch(900)
        assert DurationHistoryStore().list() == [900, 60, 1200]

    def test_list_returns_copy(self, history):
        first = history.list()
        first.append(5)
        assert history.list() == DEFAULTS

    def test_reset_to_defaults(self, history):
        history.touch(900)
        history.touch(300)
        assert history.reset_to_defaults() == DEFAULTS
        assert history.list() == DEFAULTS

    def test_malformed_stored_value_falls_back(self, history):
        with get_session() as db:
            write_preference(db, RECENT_DURATIONS_KEY, "abc,,-5")
        assert history.list() == DEFAULTS
        assert history.touch(900) == [900, 60, 1200]

    @pytest.mark.parametrize("bad", [0, -60, 1.5, "60", True])
    def test_touch_rejects_bad_values(self, history, bad):
        with pytest.raises(ValueError):
            history.touch(bad)
        assert history.list() == DEFAULTS

    def test_changed_signal(self, history):
        c = SignalCollector()
        history.changed.connect(c)
        history.touch(900)
        history.reset_to_defaults()
        assert c.items == [[900, 60, 1200], DEFAULTS]


class TestConcurrentTouches:

    def test_no_lost_updates(self, history):
        values = [100, 200, 300, 400, 500, 600]
        barrier = threading.Barrier(len(values))

        def touch(v):
            barrier.wait()
            history.touch(v)

        threads = [threading.Thread(target=touch, args=(v,)) for v in values]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        result = history.list()
        assert len(result) == 3
        assert len(set(result)) == 3
        assert set(result) <= set(values)
