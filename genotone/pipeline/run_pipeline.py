from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional, Union

from genotone.dna.fasta import parse_fasta, read_fasta
from genotone.dna.mapping import sequence_to_notes
from genotone.midi.builder import build_track, notes_from_records
from genotone.midi.encoder import encode
from genotone.state import ExportSession, Settings

logger = logging.getLogger(__name__)

ProgressFn = Optional[Callable[[int, str], None]]


def run_pipeline(source: Union[str, Path], settings: Settings, progress: ProgressFn = None) -> ExportSession:
    """
    source is either sequence text or a Path to a FASTA file.
    """
    settings.validate()
    warnings = []

    def emit(pct: int, msg: str) -> None:
        logger.info("[%3d%%] %s", pct, msg)
        if progress:
            progress(pct, msg)

    emit(5, "Parsing sequence…")
    record = read_fasta(source) if isinstance(source, Path) else parse_fasta(source)
    if record.dropped:
        warnings.append(f"Dropped {record.dropped} invalid characters: {''.join(record.invalid_chars)}")

    sequence = record.sequence
    if 0 < settings.max_bases < len(sequence):
        warnings.append(f"Only the first {settings.max_bases} of {len(sequence)} bases are played.")

    emit(30, "Mapping bases to notes…")
    notes = sequence_to_notes(sequence, settings)

    emit(60, "Building track…")
    events = notes_from_records(notes, settings.ticks_per_quarter)
    track = build_track(events, settings.tempo_bpm)

    emit(85, "Encoding MIDI…")
    data = encode(track, settings.ticks_per_quarter)

    emit(100, "Done.")
    return ExportSession(
        name=record.name,
        sequence=sequence,
        settings=settings,
        notes=notes,
        midi_bytes=data,
        warnings=warnings,
    )
