from __future__ import annotations
from pathlib import Path


def project_root() -> Path:
    # genotone/ is one level under the repository root
    return Path(__file__).resolve().parents[1]


ROOT_DIR = project_root()
DEFAULT_EXPORT_DIR = ROOT_DIR / "exports"
DEFAULT_SETTINGS_PATH = ROOT_DIR / "settings.json"

# Standard MIDI File layout
TICKS_PER_QUARTER = 480
SMF_FORMAT = 1
SMF_TRACK_COUNT = 1
MAX_DIVISION = 0x7FFF  # top bit set would mean SMPTE timing
MAX_VLQ = 0x0FFFFFFF  # four 7-bit groups
MAX_TEMPO_US = 0xFFFFFF  # set_tempo carries 3 bytes
MICROSECONDS_PER_MINUTE = 60_000_000

# Sequence -> notes defaults
DEFAULT_TEMPO_BPM = 120
DEFAULT_NOTE_LENGTH = 0.25  # quarter notes
DEFAULT_OCTAVE = 4
DEFAULT_VELOCITY = 64
MAX_BASES = 100
UNTITLED_SEQUENCE = "Untitled Sequence"
DEFAULT_BASE_MAPPING = {"A": "C", "T": "D", "C": "E", "G": "F"}
DNA_BASES = "ATCG"
