"""End-to-end engine scenarios with a forced clock and chance."""

from emote_echo.emotes.catalog import Emote


def test_three_distinct_users_fire_once(engine):
    assert engine.handle_message("a", "KEKW") is None
    assert engine.handle_message("b", "lol KEKW") is None
    intent = engine.handle_message("c", "KEKW!!")

    assert intent is not None
    assert intent.text == "KEKW"
    assert intent.channel == "somechannel"
    assert intent.trigger_user == "c"
    assert intent.delay_seconds == 1.0
    assert engine.tracker.count("kekw") == 0


def test_two_users_do_not_fire(engine):
    assert engine.handle_message("a", "KEKW") is None
    assert engine.handle_message("b", "KEKW") is None
    assert engine.handle_message("a", "KEKW KEKW") is None
    assert engine.tracker.count("kekw") == 2


def test_cooldown_holds_after_fire(engine, clock):
    for user in "abc":
        intent = engine.handle_message(user, "KEKW")
    assert intent is not None

    clock.advance(1)
    for user in "def":
        assert engine.handle_message(user, "KEKW") is None
    assert engine.tracker.count("kekw") == 3

    clock.advance(29)
    intent = engine.handle_message("g", "KEKW")
    assert intent is not None
    assert engine.tracker.count("kekw") == 0


def test_cooldown_is_shared_across_emotes(engine, clock):
    for user in "abc":
        engine.handle_message(user, "KEKW")
    clock.advance(5)
    for user in "abc":
        assert engine.handle_message(user, "Sadge") is None
    assert engine.tracker.count("sadge") == 3


def test_fire_resets_only_the_fired_emote(engine):
    engine.handle_message("a", "KEKW Sadge")
    engine.handle_message("b", "KEKW Sadge")
    intent = engine.handle_message("c", "KEKW")

    assert intent.text == "KEKW"
    assert engine.tracker.count("kekw") == 0
    assert engine.tracker.count("sadge") == 2


def test_one_response_per_message(engine):
    engine.handle_message("a", "KEKW Sadge")
    engine.handle_message("b", "KEKW Sadge")
    intent = engine.handle_message("c", "KEKW Sadge")

    assert intent.text == "KEKW"
    # Processing stops at the fired emote, so Sadge never saw "c"
    assert engine.tracker.users("sadge") == {"a", "b"}


def test_rejection_keeps_usage_for_later_checks(engine, rng):
    rng.queue.append(0.9)
    for user in "abc":
        assert engine.handle_message(user, "PogU") is None
    assert engine.tracker.count("pogu") == 3

    intent = engine.handle_message("a", "pogu")
    assert intent.text == "PogU"
    assert intent.emote == Emote("PogU", "2", animated=True)


def test_send_failure_rolls_back_cooldown_but_not_usage(engine):
    for user in "abc":
        intent = engine.handle_message(user, "KEKW")
    engine.send_failed(intent)

    assert engine.gate.last_response_at is None
    assert engine.tracker.count("kekw") == 0
    for user in "def":
        engine.handle_message(user, "Sadge")
    assert engine.tracker.count("sadge") == 0


def test_self_messages_are_ignored(engine):
    for user in "ab":
        engine.handle_message(user, "KEKW")
    assert engine.handle_message("someone", "KEKW", is_self=True) is None
    assert engine.handle_message("echobot", "KEKW") is None
    assert engine.tracker.count("kekw") == 2


def test_stopped_engine_ignores_chat_and_keeps_state(engine):
    engine.handle_message("a", "KEKW")
    engine.stop()
    engine.stop()
    assert engine.handle_message("b", "KEKW") is None
    assert engine.tracker.count("kekw") == 1
    assert len(engine.catalog) == 3

    engine.start()
    engine.start()
    engine.handle_message("b", "KEKW")
    assert engine.handle_message("c", "KEKW") is not None


def test_refresh_catalog_changes_matching(engine):
    assert engine.refresh_catalog([Emote("OMEGALUL", "9")])
    assert engine.matcher.match("KEKW OMEGALUL")[0].name == "OMEGALUL"
    assert engine.refresh_catalog([]) is False
    assert "OMEGALUL" in engine.catalog


def test_default_tracker_shares_the_gate_clock(clock):
    from emote_echo.config.settings import EngineConfig
    from emote_echo.emotes.engine import EmoteEngine
    from emote_echo.emotes.gate import ResponseGate

    config = EngineConfig(usage_window_seconds=60)
    eng = EmoteEngine("somechannel", config=config, gate=ResponseGate(config, clock=clock))

    eng.tracker.record("kekw", "a")
    clock.advance(61)
    assert eng.tracker.record("kekw", "b") == 1
    assert eng.tracker.users("kekw") == {"b"}
