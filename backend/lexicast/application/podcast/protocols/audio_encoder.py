from pathlib import Path
from typing import Protocol

from lexicast.application.podcast.use_cases.dtos import MediaProbe


class AudioEncoderProtocol(Protocol):
    async def probe(self, source: Path) -> MediaProbe: ...

    async def transcode(self, source: Path, output: Path, bitrate_kbps: int) -> bool: ...
