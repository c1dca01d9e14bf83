from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from enum import Enum
from typing import Optional

from time_utils import format_medium_time, format_short_time

from .manager import AlarmPhase, AlarmSnapshot

BACKGROUND_COLOR = "#5A4FCF"
PANEL_COLOR = "#6F63D9"
BUTTON_BLUE = "#1E6FD9"
BUTTON_GREEN = "#2E9E48"
TEXT_COLOR = "#FFFFFF"

SET_ALARM_LABEL = "Set Alarm"
ALARM_SET_LABEL = "Alarm Set"
RINGING_HEADING = "WakeUp! Answer to stop:"
ANSWER_PLACEHOLDER = "Your Answer"
SUBMIT_LABEL = "Submit"


class Screen(Enum):
    SET_ALARM = "set_alarm"
    RINGING = "ringing"


@dataclass(frozen=True)
class ViewModel:
    screen: Screen
    clock_text: str
    picker_time: Optional[time]
    picker_enabled: bool
    set_button_label: str
    set_button_enabled: bool
    set_button_color: str
    status_text: str
    heading_text: str
    prompt_text: str
    answer_text: str
    answer_placeholder: str
    submit_label: str
    submit_emphasized: bool


def render(snapshot: AlarmSnapshot, now: datetime) -> ViewModel:
    """Computes everything the window shows from controller state and tick time."""
    armed = snapshot.armed
    ringing = snapshot.phase is AlarmPhase.RINGING
    alarm_time = snapshot.alarm_config.alarm_time if snapshot.alarm_config else None

    status_text = ""
    if snapshot.phase is AlarmPhase.ARMED and alarm_time is not None:
        status_text = f"Alarm set for {format_short_time(alarm_time)}"

    return ViewModel(
        screen=Screen.RINGING if ringing else Screen.SET_ALARM,
        clock_text=f"Current Time: {format_medium_time(now)}",
        picker_time=alarm_time,
        picker_enabled=not armed,
        set_button_label=ALARM_SET_LABEL if armed else SET_ALARM_LABEL,
        set_button_enabled=not armed,
        set_button_color=BUTTON_GREEN if armed else BUTTON_BLUE,
        status_text=status_text,
        heading_text=RINGING_HEADING if ringing else "",
        prompt_text=snapshot.challenge.prompt_text if ringing and snapshot.challenge else "",
        answer_text=snapshot.answer_text if ringing else "",
        answer_placeholder=ANSWER_PLACEHOLDER,
        submit_label=SUBMIT_LABEL,
        submit_emphasized=ringing and bool(snapshot.answer_text),
    )
