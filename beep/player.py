from __future__ import annotations

import asyncio
from typing import Protocol

from loguru import logger

from .types import PlaybackOutcome


COMMAND_NOT_FOUND = 127


class SoundPlayer(Protocol):
    async def play(self, sound_file: str, repeat: int) -> PlaybackOutcome:
        """Play `sound_file` `repeat` times and report the exit status."""
        ...


def build_playback_script(sound_file: str, repeat: int) -> str:
    """PowerShell one-liner; single quotes in the path are doubled."""
    escaped = sound_file.replace("'", "''")
    play = f"(New-Object Media.SoundPlayer '{escaped}').PlaySync()"
    if repeat <= 1:
        return play
    return f"1..{repeat} | ForEach-Object {{ {play} }}"


class PowerShellSoundPlayer:
    """Plays a .wav through `System.Media.SoundPlayer` in a PowerShell child process."""

    def __init__(self, *, executable: str = "powershell") -> None:
        self.executable = executable

    def command(self, sound_file: str, repeat: int) -> list[str]:
        return [self.executable, "-NoProfile", "-Command", build_playback_script(sound_file, repeat)]

    async def play(self, sound_file: str, repeat: int) -> PlaybackOutcome:
        argv = self.command(sound_file, repeat)
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            return PlaybackOutcome(exit_code=COMMAND_NOT_FOUND, stderr=str(e))

        _, stderr = await proc.communicate()
        code = proc.returncode if proc.returncode is not None else 1
        return PlaybackOutcome(exit_code=code, stderr=(stderr or b"").decode("utf-8", errors="replace"))


class NullSoundPlayer:
    """Logs instead of playing (dry runs, non-Windows hosts)."""

    async def play(self, sound_file: str, repeat: int) -> PlaybackOutcome:
        logger.info(f"beep (dry run): {sound_file} x{repeat}")
        return PlaybackOutcome(exit_code=0)
