from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from genotone import config
from genotone.midi.builder import notes_from_records
from genotone.midi.encoder import encode_notes
from genotone.state import NoteRecord

logger = logging.getLogger(__name__)


def write_midi_bytes(data: bytes, out_path: Path) -> Path:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(data)
    logger.info("Wrote %d bytes to %s", len(data), out_path)
    return out_path


def export_midi(
    notes: List[NoteRecord],
    out_path: Path,
    tempo_bpm: float = config.DEFAULT_TEMPO_BPM,
    ticks_per_quarter: int = config.TICKS_PER_QUARTER,
) -> Path:
    """
    Writes a single-track format 1 MIDI file.
    Nothing is written if any note or the tempo is invalid.
    """
    events = notes_from_records(notes, ticks_per_quarter)
    data = encode_notes(events, tempo_bpm, ticks_per_quarter)
    return write_midi_bytes(data, out_path)
