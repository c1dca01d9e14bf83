from __future__ import annotations

import logging
import tkinter as tk
from datetime import datetime, time, tzinfo
from typing import Optional

from time_utils import now_in_tz

from .challenge import Challenge
from .manager import AlarmManager
from .view import (
    BACKGROUND_COLOR,
    BUTTON_BLUE,
    PANEL_COLOR,
    TEXT_COLOR,
    Screen,
    ViewModel,
    render,
)

logger = logging.getLogger(__name__)

FONT_FAMILY = "Helvetica"
CLOCK_FONT = (FONT_FAMILY, 28, "bold")
BUTTON_FONT = (FONT_FAMILY, 22, "bold")
BUTTON_FONT_EMPHASIZED = (FONT_FAMILY, 24, "bold")
HEADING_FONT = (FONT_FAMILY, 24, "bold")
PROMPT_FONT = (FONT_FAMILY, 48, "bold")
ENTRY_FONT = (FONT_FAMILY, 24)
SMALL_FONT = (FONT_FAMILY, 12)


class AlarmClockWindow:
    """Tk front end: applies view models and forwards user intents to the manager."""

    def __init__(
        self,
        root: tk.Tk,
        manager: AlarmManager,
        tz: Optional[tzinfo] = None,
        tick_interval_ms: int = 1000,
        title: str = "MyAlarmy",
    ):
        self.root = root
        self.manager = manager
        self.tz = tz
        self.tick_interval_ms = tick_interval_ms
        self._after_id: Optional[str] = None
        self._screen: Optional[Screen] = None

        self.root.title(title)
        self.root.configure(bg=BACKGROUND_COLOR, padx=20, pady=20)
        self.root.protocol("WM_DELETE_WINDOW", self.close)

        self.clock_label = tk.Label(root, font=CLOCK_FONT, fg=TEXT_COLOR, bg=BACKGROUND_COLOR)
        self.clock_label.pack(pady=(20, 10))

        self._build_set_alarm_frame()
        self._build_ringing_frame()

        now = now_in_tz(self.tz)
        self.hour_var.set(f"{now.hour:02d}")
        self.minute_var.set(f"{now.minute:02d}")

    def _build_set_alarm_frame(self) -> None:
        self.set_frame = tk.Frame(self.root, bg=BACKGROUND_COLOR)

        picker = tk.Frame(self.set_frame, bg=PANEL_COLOR, padx=12, pady=12)
        picker.pack(pady=10)
        self.hour_var = tk.StringVar()
        self.minute_var = tk.StringVar()
        self.hour_spin = tk.Spinbox(
            picker, from_=0, to=23, width=3, format="%02.0f", wrap=True,
            textvariable=self.hour_var, font=ENTRY_FONT, justify="center",
        )
        self.hour_spin.pack(side=tk.LEFT, padx=2)
        tk.Label(picker, text=":", font=ENTRY_FONT, fg=TEXT_COLOR, bg=PANEL_COLOR).pack(side=tk.LEFT)
        self.minute_spin = tk.Spinbox(
            picker, from_=0, to=59, width=3, format="%02.0f", wrap=True,
            textvariable=self.minute_var, font=ENTRY_FONT, justify="center",
        )
        self.minute_spin.pack(side=tk.LEFT, padx=2)

        self.set_button = tk.Button(
            self.set_frame, command=self.on_set_alarm, font=BUTTON_FONT,
            fg=TEXT_COLOR, relief="flat", padx=12, pady=8,
        )
        self.set_button.pack(fill=tk.X, pady=10)

        self.status_label = tk.Label(self.set_frame, font=SMALL_FONT, fg=TEXT_COLOR, bg=BACKGROUND_COLOR)
        self.status_label.pack()

    def _build_ringing_frame(self) -> None:
        self.ring_frame = tk.Frame(self.root, bg=BACKGROUND_COLOR)

        self.heading_label = tk.Label(self.ring_frame, font=HEADING_FONT, fg=TEXT_COLOR, bg=BACKGROUND_COLOR)
        self.heading_label.pack(pady=(10, 0))
        self.prompt_label = tk.Label(self.ring_frame, font=PROMPT_FONT, fg=TEXT_COLOR, bg=BACKGROUND_COLOR)
        self.prompt_label.pack(pady=10)

        self.placeholder_label = tk.Label(self.ring_frame, font=SMALL_FONT, fg=TEXT_COLOR, bg=BACKGROUND_COLOR)
        self.placeholder_label.pack(anchor="w")
        self.answer_var = tk.StringVar()
        self.answer_var.trace_add("write", self._on_answer_changed)
        self.answer_entry = tk.Entry(self.ring_frame, textvariable=self.answer_var, font=ENTRY_FONT, justify="center")
        self.answer_entry.pack(fill=tk.X, pady=(0, 10))
        self.answer_entry.bind("<Return>", lambda _event: self.on_submit())

        self.submit_button = tk.Button(
            self.ring_frame, command=self.on_submit, font=BUTTON_FONT,
            bg=BUTTON_BLUE, fg=TEXT_COLOR, relief="flat", padx=12, pady=8,
        )
        self.submit_button.pack(fill=tk.X)

    # -- ticking -------------------------------------------------------

    def start(self) -> None:
        self._tick()

    def stop(self) -> None:
        if self._after_id is not None:
            self.root.after_cancel(self._after_id)
            self._after_id = None

    def _tick(self) -> None:
        now = now_in_tz(self.tz)
        self.manager.on_tick(now)
        self.refresh(now)
        self._after_id = self.root.after(self.tick_interval_ms, self._tick)

    # -- intents -------------------------------------------------------

    def selected_time(self) -> Optional[time]:
        try:
            hour = int(self.hour_var.get())
            minute = int(self.minute_var.get())
            return time(hour=hour, minute=minute)
        except ValueError:
            logger.warning("Invalid alarm time in picker: %s:%s", self.hour_var.get(), self.minute_var.get())
            return None

    def on_set_alarm(self) -> None:
        alarm_time = self.selected_time()
        if alarm_time is None:
            return
        self.manager.arm(alarm_time)
        self.refresh()

    def on_submit(self) -> None:
        if not self.manager.submit_answer(self.answer_var.get()):
            self.answer_entry.focus_set()
        self.refresh()

    def on_alarm_triggered(self, challenge: Challenge) -> None:
        logger.debug("Raising window for %s", challenge.prompt_text)
        self.root.deiconify()
        self.root.lift()
        self.root.attributes("-topmost", True)
        self.root.after(500, lambda: self.root.attributes("-topmost", False))

    def _on_answer_changed(self, *_args) -> None:
        text = self.answer_var.get()
        if text == self.manager.answer_text:
            return
        self.manager.update_answer(text)
        self.refresh()

    def close(self) -> None:
        logger.info("Window closed")
        self.stop()
        self.manager.shutdown()
        self.root.destroy()

    # -- rendering -----------------------------------------------------

    def refresh(self, now: Optional[datetime] = None) -> ViewModel:
        view = render(self.manager.snapshot(), now or now_in_tz(self.tz))
        self.apply(view)
        return view

    def apply(self, view: ViewModel) -> None:
        self.clock_label.config(text=view.clock_text)
        self._show_screen(view.screen)

        if view.screen is Screen.SET_ALARM:
            if view.picker_time is not None and not view.picker_enabled:
                self.hour_var.set(f"{view.picker_time.hour:02d}")
                self.minute_var.set(f"{view.picker_time.minute:02d}")
            picker_state = tk.NORMAL if view.picker_enabled else tk.DISABLED
            self.hour_spin.config(state=picker_state)
            self.minute_spin.config(state=picker_state)
            self.set_button.config(
                text=view.set_button_label,
                state=tk.NORMAL if view.set_button_enabled else tk.DISABLED,
                bg=view.set_button_color,
                disabledforeground=TEXT_COLOR,
            )
            self.status_label.config(text=view.status_text)
        else:
            self.heading_label.config(text=view.heading_text)
            self.prompt_label.config(text=view.prompt_text)
            self.placeholder_label.config(text=view.answer_placeholder)
            if self.answer_var.get() != view.answer_text:
                self.answer_var.set(view.answer_text)
            self.submit_button.config(
                text=view.submit_label,
                font=BUTTON_FONT_EMPHASIZED if view.submit_emphasized else BUTTON_FONT,
            )

    def _show_screen(self, screen: Screen) -> None:
        if screen is self._screen:
            return
        if screen is Screen.RINGING:
            self.set_frame.pack_forget()
            self.ring_frame.pack(fill=tk.BOTH, expand=True)
            self.answer_entry.focus_set()
        else:
            self.ring_frame.pack_forget()
            self.set_frame.pack(fill=tk.BOTH, expand=True)
        self._screen = screen
