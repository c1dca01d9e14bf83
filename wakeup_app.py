import logging
import tkinter as tk

from alarms.manager import AlarmManager
from alarms.sounds import AlarmSoundPlayer
from alarms.window import AlarmClockWindow
from audio_io import create_pyaudio, list_output_devices
from config import Config, load_config, setup_logging
from time_utils import resolve_timezone

logger = logging.getLogger("wakeup")


def log_output_devices() -> None:
    try:
        pa = create_pyaudio()
    except Exception as exc:  # pragma: no cover - no audio backend
        logger.warning("Cannot enumerate audio devices: %s", exc)
        return
    try:
        for device in list_output_devices(pa):
            logger.debug(
                "[OUT] Index %s: %s | rate=%s | channels=%s",
                device.index,
                device.name,
                device.rate,
                device.channels,
            )
    finally:
        pa.terminate()


def build_app(config: Config, root: tk.Tk) -> AlarmClockWindow:
    tz = resolve_timezone(config.timezone_name)
    sound_player = AlarmSoundPlayer(
        config.alarm_sound_path,
        generate_missing=config.alarm_sound_generate,
        device_index=config.output_device_index,
    )
    manager = AlarmManager(sound_player=sound_player)
    window = AlarmClockWindow(
        root,
        manager,
        tz=tz,
        tick_interval_ms=config.tick_interval_ms,
        title=config.window_title,
    )
    manager.on_alarm_triggered = window.on_alarm_triggered
    return window


def main() -> None:
    config = load_config()
    setup_logging(config.log_level, config.log_dir)
    logger.info("Starting wake-up alarm (sound=%s)", config.alarm_sound_path)
    if not config.alarm_sound_generate and not config.alarm_sound_path.exists():
        logger.warning("Alarm sound file is missing and generation is off: %s", config.alarm_sound_path)
    if config.debug:
        log_output_devices()

    root = tk.Tk()
    window = build_app(config, root)
    window.start()
    try:
        root.mainloop()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    finally:
        window.stop()
        window.manager.shutdown()


if __name__ == "__main__":
    main()
