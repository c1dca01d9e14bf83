"""Alarm subsystem for the wake-up math alarm."""

from .challenge import Challenge, check_answer, generate_challenge
from .manager import AlarmConfig, AlarmManager, AlarmPhase, AlarmSnapshot, AlarmState
