"""
LAME encoder wrapper
  • Finds a working `lame` (env override, PATH, then next to this program).
  • Converts the synthesized WAV to VBR MP3.
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys

log = logging.getLogger(__name__)

# ---------- Constants -------------------------------------------------------

LAME_PATH = os.getenv("TTS_LAME_PATH")
LAME_QUALITY = os.getenv("TTS_LAME_QUALITY", "2")
LAME_EXE = "lame.exe" if os.name == "nt" else "lame"


class EncoderNotFound(RuntimeError):
    pass


class EncoderError(RuntimeError):
    def __init__(self, returncode: int, stderr: str):
        super().__init__(stderr)
        self.returncode = returncode
        self.stderr = stderr


# ---------- Helpers ---------------------------------------------------------

def is_available(lame_path: str) -> bool:
    """True if `<lame_path> --help` starts and exits cleanly."""
    try:
        proc = subprocess.run(
            [lame_path, "--help"],
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except OSError:
        return False
    return proc.returncode == 0


def candidates():
    if LAME_PATH:
        yield LAME_PATH
    yield "lame"
    program_dir = os.path.dirname(os.path.abspath(sys.argv[0]))
    yield os.path.join(program_dir, LAME_EXE)


def find_lame() -> str:
    for path in candidates():
        if is_available(path):
            log.debug("Using LAME at %s", path)
            return path
        log.debug("LAME not usable at %s", path)
    raise EncoderNotFound("LAME encoder not found.")


def convert_to_mp3(lame_path: str, wav_path: str, mp3_path: str) -> str:
    cmd = [lame_path, f"-V{LAME_QUALITY}", wav_path, mp3_path]
    log.debug("Running %s", cmd)
    proc = subprocess.Popen(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
    # drains stdout and stderr together before waiting
    _, err = proc.communicate()
    if proc.returncode != 0:
        raise EncoderError(proc.returncode, err.decode("utf-8", errors="replace"))
    return mp3_path
