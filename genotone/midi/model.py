from __future__ import annotations
from dataclasses import dataclass
from typing import List, Union


@dataclass(frozen=True)
class NoteEvent:
    pitch: int
    start_tick: int
    duration_tick: int
    velocity: int = 64

    @property
    def end_tick(self) -> int:
        return self.start_tick + self.duration_tick


# Track events. Each one knows its own bytes (everything after the delta-time).


@dataclass(frozen=True)
class NoteOn:
    tick: int
    pitch: int
    velocity: int

    def data(self) -> bytes:
        return bytes((0x90, self.pitch, self.velocity))


@dataclass(frozen=True)
class NoteOff:
    tick: int
    pitch: int
    velocity: int = 0

    def data(self) -> bytes:
        return bytes((0x80, self.pitch, self.velocity))


@dataclass(frozen=True)
class TempoMeta:
    tick: int
    microseconds_per_quarter: int

    def data(self) -> bytes:
        us = self.microseconds_per_quarter
        return bytes((0xFF, 0x51, 0x03, (us >> 16) & 0xFF, (us >> 8) & 0xFF, us & 0xFF))


@dataclass(frozen=True)
class EndOfTrack:
    tick: int

    def data(self) -> bytes:
        return b"\xFF\x2F\x00"


MidiEvent = Union[NoteOn, NoteOff, TempoMeta, EndOfTrack]
MIDI_EVENT_TYPES = (NoteOn, NoteOff, TempoMeta, EndOfTrack)
Track = List[MidiEvent]
