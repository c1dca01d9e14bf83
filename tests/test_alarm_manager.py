import random
from datetime import datetime, time

from alarms.challenge import Challenge
from alarms.manager import AlarmManager, AlarmPhase


class FakeSoundPlayer:
    def __init__(self):
        self.starts = 0
        self.stops = 0
        self.playing = False

    def start_loop(self) -> None:
        self.starts += 1
        self.playing = True

    def stop_loop(self) -> None:
        self.stops += 1
        self.playing = False


def _at(hour: int, minute: int, second: int = 0) -> datetime:
    return datetime(2025, 1, 1, hour, minute, second)


class FixedRandom:
    """Hands out preset operands in order."""

    def __init__(self, *values: int):
        self.values = list(values)

    def randint(self, low: int, high: int) -> int:
        value = self.values.pop(0)
        assert low <= value <= high
        return value


def _manager(rng=None, **kwargs):
    player = FakeSoundPlayer()
    return AlarmManager(sound_player=player, rng=rng or random.Random(3), **kwargs), player


def _ringing_manager(*operands: int, **kwargs):
    manager, player = _manager(rng=FixedRandom(*operands), **kwargs)
    manager.arm(time(8, 30))
    manager.on_tick(_at(8, 30))
    return manager, player


def test_starts_idle():
    manager, _ = _manager()
    snapshot = manager.snapshot()
    assert snapshot.phase is AlarmPhase.IDLE
    assert not snapshot.armed
    assert snapshot.challenge is None
    assert snapshot.alarm_config is None


def test_arm_then_matching_minute_rings():
    manager, player = _manager()
    assert manager.arm(time(8, 30))
    assert not manager.on_tick(_at(8, 29, 59))
    assert manager.phase is AlarmPhase.ARMED
    assert manager.challenge is None
    assert player.starts == 0

    assert manager.on_tick(_at(8, 30, 0))
    assert manager.phase is AlarmPhase.RINGING
    assert manager.challenge is not None
    assert player.starts == 1


def test_seconds_never_matter():
    for second in (0, 17, 59):
        manager, _ = _manager()
        manager.arm(time(6, 5))
        assert manager.on_tick(_at(6, 5, second))


def test_hour_must_match_too():
    manager, _ = _manager()
    manager.arm(time(8, 30))
    assert not manager.on_tick(_at(20, 30))
    assert manager.phase is AlarmPhase.ARMED


def test_latches_on_first_matching_tick():
    manager, player = _manager()
    manager.arm(time(8, 30))
    manager.on_tick(_at(8, 30, 0))
    first = manager.challenge
    for second in range(1, 60):
        assert not manager.on_tick(_at(8, 30, second))
    assert manager.challenge is first
    assert player.starts == 1


def test_idle_ticks_do_nothing():
    manager, player = _manager()
    assert not manager.on_tick(_at(8, 30))
    assert manager.phase is AlarmPhase.IDLE
    assert player.starts == 0


def test_arm_while_armed_is_noop():
    manager, _ = _manager()
    assert manager.arm(time(8, 30))
    assert not manager.arm(time(9, 0))
    assert manager.alarm_config.alarm_time == time(8, 30)


def test_arm_while_ringing_keeps_challenge():
    manager, player = _manager()
    manager.arm(time(8, 30))
    manager.on_tick(_at(8, 30))
    challenge = manager.challenge
    manager.update_answer("1")

    assert not manager.arm(time(9, 0))
    assert manager.phase is AlarmPhase.RINGING
    assert manager.challenge is challenge
    assert manager.answer_text == "1"
    assert player.stops == 0


def test_arm_truncates_to_minute():
    manager, _ = _manager()
    manager.arm(time(8, 30, 45))
    assert manager.alarm_config.alarm_time == time(8, 30)


def test_correct_answer_disarms_and_stops_sound():
    manager, player = _ringing_manager(7, 8)
    assert manager.challenge == Challenge(7, 8)
    assert manager.challenge.prompt_text == "7 × 8 = ?"

    assert manager.submit_answer("56")
    assert manager.phase is AlarmPhase.IDLE
    assert manager.challenge is None
    assert manager.answer_text == ""
    assert player.stops == 1
    assert not player.playing


def test_empty_answer_clears_input_and_keeps_ringing():
    manager, player = _ringing_manager(7, 8)

    assert not manager.submit_answer("")
    assert manager.phase is AlarmPhase.RINGING
    assert manager.answer_text == ""
    assert player.stops == 0


def test_wrong_answers_never_lock_out():
    manager, _ = _ringing_manager(7, 8)
    for attempt in ("55", "abc", "5 6", "-56"):
        manager.update_answer(attempt)
        assert not manager.submit_answer()
        assert manager.answer_text == ""
        assert manager.is_ringing
    assert manager.submit_answer("56")


def test_submit_uses_buffered_answer():
    manager, _ = _ringing_manager(3, 4)
    manager.update_answer("12")
    assert manager.submit_answer()
    assert manager.phase is AlarmPhase.IDLE


def test_submit_outside_ringing_is_ignored():
    manager, player = _manager()
    assert not manager.submit_answer("1")
    manager.arm(time(8, 30))
    assert not manager.submit_answer("1")
    assert manager.phase is AlarmPhase.ARMED
    assert player.stops == 0


def test_update_answer_ignored_unless_ringing():
    manager, _ = _manager()
    manager.arm(time(8, 30))
    manager.update_answer("12")
    assert manager.answer_text == ""


def test_rearm_after_disarm_starts_fresh_cycle():
    manager, player = _ringing_manager(2, 2, 3, 9)
    assert manager.submit_answer("4")

    assert manager.arm(time(9, 15))
    assert manager.phase is AlarmPhase.ARMED
    assert manager.challenge is None
    manager.on_tick(_at(9, 15))
    assert manager.is_ringing
    assert manager.challenge == Challenge(3, 9)
    assert player.starts == 2


def test_trigger_callback_receives_challenge():
    seen = []
    manager, _ = _manager(on_alarm_triggered=seen.append)
    manager.arm(time(8, 30))
    manager.on_tick(_at(8, 30))
    assert seen == [manager.challenge]


def test_failing_callback_does_not_break_trigger():
    def boom(_challenge):
        raise RuntimeError("window gone")

    manager, player = _manager(on_alarm_triggered=boom)
    manager.arm(time(8, 30))
    assert manager.on_tick(_at(8, 30))
    assert manager.is_ringing
    assert player.starts == 1


def test_shutdown_stops_sound():
    manager, player = _manager()
    manager.shutdown()
    assert player.stops == 1


def test_wake_up_scenario():
    manager, player = _manager()
    manager.arm(time(8, 30))
    manager.on_tick(_at(8, 29))
    assert manager.phase is AlarmPhase.ARMED
    manager.on_tick(_at(8, 30))
    assert manager.phase is AlarmPhase.RINGING
    assert player.playing

    challenge = manager.challenge
    assert not manager.submit_answer(str(challenge.expected_answer + 1))
    assert manager.is_ringing
    assert manager.submit_answer(str(challenge.expected_answer))
    assert not player.playing
    assert not manager.snapshot().armed
