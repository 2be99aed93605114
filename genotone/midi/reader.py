from __future__ import annotations

import io
from pathlib import Path
from typing import List, Tuple, Union

import mido

from genotone.state import NoteRecord


def _open(source: Union[Path, str, bytes]) -> mido.MidiFile:
    if isinstance(source, (bytes, bytearray)):
        return mido.MidiFile(file=io.BytesIO(bytes(source)))
    return mido.MidiFile(str(source))


def read_midi(source: Union[Path, str, bytes]) -> Tuple[List[NoteRecord], float]:
    """
    Reads a MIDI file (path or raw bytes) back into quarter-note NoteRecords.
    Returns: (notes, tempo_bpm of the first set_tempo, 120 if there is none)

    note_on with velocity 0 is treated as note_off. Times stay in quarter
    notes, so the tempo map does not affect them.
    """
    mid = _open(source)
    tpq = mid.ticks_per_beat
    tempo = None

    notes: List[NoteRecord] = []
    active = {}  # (channel, pitch) -> [(start_tick, velocity), ...]
    tick = 0

    for msg in mido.merge_tracks(mid.tracks):
        tick += msg.time

        if msg.type == "set_tempo":
            if tempo is None:
                tempo = msg.tempo
            continue

        if msg.type == "note_on" and msg.velocity > 0:
            active.setdefault((msg.channel, msg.note), []).append((tick, msg.velocity))

        elif msg.type in ("note_off", "note_on"):
            stack = active.get((msg.channel, msg.note))
            if stack:
                start, vel = stack.pop(0)
                notes.append(
                    NoteRecord(
                        pitch=int(msg.note),
                        start=start / tpq,
                        duration=(tick - start) / tpq,
                        velocity=int(vel),
                    )
                )

    notes.sort(key=lambda n: (n.start, n.pitch))
    bpm = mido.tempo2bpm(tempo) if tempo is not None else 120.0
    return notes, bpm
