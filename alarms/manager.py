from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import datetime, time
from enum import Enum
from typing import Callable, Optional, Protocol

from time_utils import format_short_time, same_minute

from .challenge import Challenge, check_answer, generate_challenge

logger = logging.getLogger(__name__)


class SoundPlayer(Protocol):
    def start_loop(self) -> None: ...

    def stop_loop(self) -> None: ...


class AlarmPhase(Enum):
    IDLE = "idle"
    ARMED = "armed"
    RINGING = "ringing"


@dataclass(frozen=True)
class AlarmConfig:
    alarm_time: time


@dataclass
class AlarmState:
    armed: bool = False
    triggered: bool = False

    @property
    def phase(self) -> AlarmPhase:
        if self.triggered:
            return AlarmPhase.RINGING
        if self.armed:
            return AlarmPhase.ARMED
        return AlarmPhase.IDLE


@dataclass(frozen=True)
class AlarmSnapshot:
    phase: AlarmPhase
    alarm_config: Optional[AlarmConfig]
    challenge: Optional[Challenge]
    answer_text: str

    @property
    def armed(self) -> bool:
        return self.phase is not AlarmPhase.IDLE

    @property
    def triggered(self) -> bool:
        return self.phase is AlarmPhase.RINGING


class AlarmManager:
    """Single alarm state machine: Idle -> Armed -> Ringing -> Idle.

    All methods are meant to be called from one thread (the UI event loop).
    """

    def __init__(
        self,
        sound_player: SoundPlayer,
        rng: Optional[random.Random] = None,
        on_alarm_triggered: Optional[Callable[[Challenge], None]] = None,
    ):
        self.sound_player = sound_player
        self.rng = rng or random.Random()
        self.on_alarm_triggered = on_alarm_triggered

        self._state = AlarmState()
        self._config: Optional[AlarmConfig] = None
        self._challenge: Optional[Challenge] = None
        self._answer_text = ""

    @property
    def phase(self) -> AlarmPhase:
        return self._state.phase

    @property
    def is_ringing(self) -> bool:
        return self._state.triggered

    @property
    def challenge(self) -> Optional[Challenge]:
        return self._challenge

    @property
    def alarm_config(self) -> Optional[AlarmConfig]:
        return self._config

    @property
    def answer_text(self) -> str:
        return self._answer_text

    def snapshot(self) -> AlarmSnapshot:
        return AlarmSnapshot(
            phase=self._state.phase,
            alarm_config=self._config,
            challenge=self._challenge,
            answer_text=self._answer_text,
        )

    def arm(self, alarm_time: time) -> bool:
        if self._state.armed:
            logger.debug("arm ignored, alarm already %s", self._state.phase.value)
            return False
        self._config = AlarmConfig(alarm_time=alarm_time.replace(second=0, microsecond=0, tzinfo=None))
        self._state = AlarmState(armed=True, triggered=False)
        self._challenge = None
        self._answer_text = ""
        logger.info("Alarm armed for %s", format_short_time(self._config.alarm_time))
        return True

    def on_tick(self, now: datetime) -> bool:
        """Returns True when this tick made the alarm ring."""
        if not self._state.armed or self._state.triggered or self._config is None:
            return False
        if not same_minute(now, self._config.alarm_time):
            return False
        self._trigger()
        return True

    def update_answer(self, text: str) -> None:
        if not self._state.triggered:
            return
        self._answer_text = text

    def submit_answer(self, text: Optional[str] = None) -> bool:
        if not self._state.triggered or self._challenge is None:
            logger.debug("submit ignored, alarm is %s", self._state.phase.value)
            return False
        if text is not None:
            self._answer_text = text
        if check_answer(self._answer_text, self._challenge.expected_answer):
            self._disarm()
            return True
        logger.info("Wrong answer %r for %s", self._answer_text, self._challenge.prompt_text)
        self._answer_text = ""
        return False

    def shutdown(self) -> None:
        self.sound_player.stop_loop()

    def _trigger(self) -> None:
        self._state = AlarmState(armed=True, triggered=True)
        self._challenge = generate_challenge(self.rng)
        self._answer_text = ""
        logger.info(
            "Alarm triggered at %s (challenge %s)",
            format_short_time(self._config.alarm_time),
            self._challenge.prompt_text,
        )
        self.sound_player.start_loop()
        if self.on_alarm_triggered:
            try:
                self.on_alarm_triggered(self._challenge)
            except Exception:
                logger.error("on_alarm_triggered callback failed", exc_info=True)

    def _disarm(self) -> None:
        self.sound_player.stop_loop()
        self._state = AlarmState()
        self._challenge = None
        self._answer_text = ""
        logger.info("Alarm disarmed")
