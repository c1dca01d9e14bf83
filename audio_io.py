import logging
from dataclasses import dataclass
from typing import List, Optional

import pyaudio

logger = logging.getLogger(__name__)


def create_pyaudio() -> pyaudio.PyAudio:
    pa = pyaudio.PyAudio()
    return pa


@dataclass
class OutputDeviceInfo:
    index: int
    name: str
    rate: int
    channels: int


def list_output_devices(pa: pyaudio.PyAudio) -> List[OutputDeviceInfo]:
    devices: List[OutputDeviceInfo] = []
    for i in range(pa.get_device_count()):
        info = pa.get_device_info_by_index(i)
        if int(info.get("maxOutputChannels", 0)) > 0:
            devices.append(
                OutputDeviceInfo(
                    index=i,
                    name=info.get("name", "unknown"),
                    rate=int(info.get("defaultSampleRate", 44100)),
                    channels=int(info.get("maxOutputChannels", 1)),
                )
            )
    return devices


class AudioPlayer:
    def __init__(
        self,
        pa: pyaudio.PyAudio,
        rate: int,
        channels: int = 1,
        sample_width: int = 2,
        device_index: Optional[int] = None,
    ):
        self.pa = pa
        self.rate = rate
        self.channels = channels
        self.stream = self.pa.open(
            format=self.pa.get_format_from_width(sample_width),
            channels=channels,
            rate=self.rate,
            output=True,
            output_device_index=device_index,
        )
        logger.debug("Opened output stream (rate=%s, channels=%s, device=%s)", rate, channels, device_index)

    def play_bytes(self, audio_bytes: bytes) -> None:
        self.stream.write(audio_bytes)

    def close(self) -> None:
        # closing an active stream discards queued buffers instead of draining them
        self.stream.close()
