from __future__ import annotations

import logging
import wave
from dataclasses import dataclass
from pathlib import Path
from threading import Event, Lock, Thread
from typing import Callable, Iterator, Optional

import numpy as np

from audio_io import AudioPlayer, create_pyaudio

logger = logging.getLogger(__name__)

CHUNK_FRAMES = 1024
STOP_JOIN_TIMEOUT = 0.25


class AudioResourceError(Exception):
    """The alarm sound could not be located, generated, opened or played."""


@dataclass
class AlarmClip:
    pcm: bytes
    rate: int
    channels: int
    sample_width: int

    @property
    def frame_bytes(self) -> int:
        return self.channels * self.sample_width

    def chunks(self, frames_per_chunk: int = CHUNK_FRAMES) -> Iterator[bytes]:
        step = frames_per_chunk * self.frame_bytes
        for offset in range(0, len(self.pcm), step):
            yield self.pcm[offset : offset + step]


def ensure_alarm_sound(
    path: Path,
    duration_seconds: float = 2.0,
    sample_rate: int = 24000,
    freq: float = 880.0,
    beep_ms: int = 250,
) -> None:
    if path.exists():
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    t = np.arange(int(duration_seconds * sample_rate)) / sample_rate
    tone = 0.4 * np.sin(2 * np.pi * freq * t)
    # on/off beep pattern
    gate = (np.floor(t * 1000 / beep_ms) % 2 == 0).astype(np.float64)
    samples = (tone * gate * 32767).astype(np.int16)
    with wave.open(str(path), "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(sample_rate)
        wav.writeframes(samples.tobytes())
    logger.info("Generated default alarm sound at %s", path)


def load_alarm_clip(path: Path, generate_missing: bool = False) -> AlarmClip:
    if generate_missing:
        try:
            ensure_alarm_sound(path)
        except OSError as exc:
            raise AudioResourceError(f"Cannot generate alarm sound at {path}: {exc}") from exc
    if not path.exists():
        raise AudioResourceError(f"Alarm sound not found: {path}")
    try:
        with wave.open(str(path), "rb") as wav:
            clip = AlarmClip(
                pcm=wav.readframes(wav.getnframes()),
                rate=wav.getframerate(),
                channels=wav.getnchannels(),
                sample_width=wav.getsampwidth(),
            )
    except (OSError, EOFError, wave.Error) as exc:
        raise AudioResourceError(f"Cannot open alarm sound {path}: {exc}") from exc
    if not clip.pcm:
        raise AudioResourceError(f"Alarm sound is empty: {path}")
    return clip


class AlarmSoundPlayer:
    """Loops the alarm sound on a daemon thread until stopped.

    Only one playback session exists at a time. Every failure is logged and
    swallowed so the alarm state machine never sees an audio error.
    """

    def __init__(
        self,
        sound_path: Path,
        generate_missing: bool = True,
        device_index: Optional[int] = None,
        pa_factory: Callable[[], object] = create_pyaudio,
    ):
        self.sound_path = sound_path
        self.generate_missing = generate_missing
        self.device_index = device_index
        self._pa_factory = pa_factory
        self._stop_event = Event()
        self._lock = Lock()
        self._thread: Optional[Thread] = None

    @property
    def is_playing(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start_loop(self) -> None:
        with self._lock:
            if self.is_playing:
                logger.debug("Alarm sound already playing")
                return
            try:
                clip = load_alarm_clip(self.sound_path, generate_missing=self.generate_missing)
            except AudioResourceError as exc:
                logger.error("Alarm sound unavailable, ringing silently: %s", exc)
                return
            # one stop event per playback session
            self._stop_event = Event()
            self._thread = Thread(
                target=self._play_loop, args=(clip, self._stop_event), name="alarm-sound", daemon=True
            )
            self._thread.start()
        logger.info("Alarm sound started (%s)", self.sound_path)

    def stop_loop(self, timeout: float = STOP_JOIN_TIMEOUT) -> None:
        with self._lock:
            thread = self._thread
            stop_event = self._stop_event
            self._thread = None
        if thread is None:
            return
        stop_event.set()
        thread.join(timeout=timeout)
        if thread.is_alive():
            logger.debug("Alarm sound thread still finishing its last chunk")
        logger.info("Alarm sound stopped")

    def _play_loop(self, clip: AlarmClip, stop_event: Event) -> None:
        try:
            pa = self._pa_factory()
        except Exception as exc:
            logger.error("Audio subsystem unavailable: %s", exc)
            return
        try:
            player = AudioPlayer(
                pa,
                rate=clip.rate,
                channels=clip.channels,
                sample_width=clip.sample_width,
                device_index=self.device_index,
            )
        except Exception as exc:
            logger.error("Failed to open output stream: %s", exc)
            pa.terminate()
            return
        try:
            while not stop_event.is_set():
                for chunk in clip.chunks():
                    if stop_event.is_set():
                        break
                    player.play_bytes(chunk)
        except OSError as exc:
            logger.error("Alarm playback failed: %s", exc)
        finally:
            player.close()
            pa.terminate()
