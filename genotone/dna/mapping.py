from __future__ import annotations

from typing import List

from genotone.midi.errors import InvalidInputError
from genotone.state import NoteRecord, Settings

PITCH_CLASSES = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}
ACCIDENTALS = {"#": 1, "b": -1}


def note_to_midi(name: str, octave: int) -> int:
    """Note name ('C', 'F#', 'Bb') plus octave to a MIDI number; C4 = 60."""
    if not name or name[0].upper() not in PITCH_CLASSES:
        raise InvalidInputError(f"unknown note name {name!r}")

    pc = PITCH_CLASSES[name[0].upper()]
    for ch in name[1:]:
        if ch not in ACCIDENTALS:
            raise InvalidInputError(f"unknown note name {name!r}")
        pc += ACCIDENTALS[ch]

    pitch = (int(octave) + 1) * 12 + pc
    if not 0 <= pitch <= 127:
        raise InvalidInputError(f"{name}{octave} is outside the MIDI range")
    return pitch


def sequence_to_notes(sequence: str, settings: Settings) -> List[NoteRecord]:
    """
    One note per base, back to back, each settings.note_length quarter notes long.
    Bases without a mapping are silent but still take up their slot.
    """
    if settings.max_bases > 0:
        sequence = sequence[: settings.max_bases]

    pitches = {base.upper(): note_to_midi(note, settings.octave) for base, note in settings.base_mapping.items()}

    notes: List[NoteRecord] = []
    for i, base in enumerate(sequence):
        pitch = pitches.get(base)
        if pitch is None:
            continue
        notes.append(
            NoteRecord(
                pitch=pitch,
                start=i * settings.note_length,
                duration=settings.note_length,
                velocity=settings.velocity,
                base=base,
            )
        )
    return notes
