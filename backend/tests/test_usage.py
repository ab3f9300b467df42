import pytest

from emote_echo.emotes.usage import UsageTracker


def test_record_is_idempotent_per_username():
    tracker = UsageTracker()
    assert tracker.record("kekw", "a") == 1
    assert tracker.record("kekw", "a") == 1
    assert tracker.record("kekw", "b") == 2
    assert tracker.users("kekw") == {"a", "b"}


def test_usernames_keep_received_case():
    tracker = UsageTracker()
    tracker.record("kekw", "Alice")
    tracker.record("kekw", "alice")
    assert tracker.count("kekw") == 2


def test_reset_only_clears_that_key():
    tracker = UsageTracker()
    tracker.record("kekw", "a")
    tracker.record("sadge", "a")
    tracker.reset("kekw")

    assert tracker.count("kekw") == 0
    assert tracker.count("sadge") == 1
    assert tracker.keys() == {"sadge"}


def test_entries_do_not_expire_by_default(clock):
    tracker = UsageTracker(clock=clock)
    tracker.record("kekw", "a")
    clock.advance(7 * 24 * 3600)
    assert tracker.record("kekw", "b") == 2


@pytest.mark.parametrize("key", ["", "KEKW"])
def test_record_rejects_keys_that_are_not_case_folded(key):
    with pytest.raises(ValueError):
        UsageTracker().record(key, "a")


def test_record_rejects_empty_username():
    with pytest.raises(ValueError):
        UsageTracker().record("kekw", "")


def test_windowed_tracker_drops_stale_sightings(clock):
    tracker = UsageTracker(window_seconds=60, clock=clock)
    tracker.record("kekw", "a")
    clock.advance(30)
    tracker.record("kekw", "b")
    clock.advance(40)

    assert tracker.record("kekw", "c") == 2
    assert tracker.users("kekw") == {"b", "c"}


def test_windowed_tracker_refreshes_repeat_users(clock):
    tracker = UsageTracker(window_seconds=60, clock=clock)
    tracker.record("kekw", "a")
    clock.advance(50)
    tracker.record("kekw", "a")
    clock.advance(50)
    assert tracker.count("kekw") == 1
