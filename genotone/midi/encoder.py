from __future__ import annotations

import logging
import struct
from typing import Sequence, Tuple

from genotone import config
from genotone.midi.builder import build_track, check_division
from genotone.midi.errors import TrackInvariantError
from genotone.midi.model import MIDI_EVENT_TYPES, NoteEvent, NoteOff, NoteOn, TempoMeta, Track

logger = logging.getLogger(__name__)


def encode_vlq(value: int) -> bytes:
    """
    Encode a non-negative integer as a MIDI variable-length quantity.

    The low 7 bits are peeled off first and the remaining value shifted right
    until it is zero; the loop runs at least once, so 0 encodes as one byte.
    The groups come out least significant first, so they are reversed and
    every byte except the last gets the 0x80 continuation bit.
    """
    if value < 0:
        raise ValueError(f"VLQ value must be non-negative, got {value}")
    if value > config.MAX_VLQ:
        raise ValueError(f"VLQ value {value} exceeds 0x{config.MAX_VLQ:X}")

    groups = []
    while True:
        groups.append(value & 0x7F)
        value >>= 7
        if value == 0:
            break
    groups.reverse()

    for i in range(len(groups) - 1):
        groups[i] |= 0x80
    return bytes(groups)


def decode_vlq(data: bytes, offset: int = 0) -> Tuple[int, int]:
    """Read one VLQ at offset. Returns (value, offset of the next byte)."""
    value = 0
    while True:
        if offset >= len(data):
            raise ValueError("truncated variable-length quantity")
        byte = data[offset]
        offset += 1
        value = (value << 7) | (byte & 0x7F)
        if not byte & 0x80:
            return value, offset


def _chunk(magic: bytes, body: bytes) -> bytes:
    return magic + struct.pack(">I", len(body)) + body


def encode_header(ticks_per_quarter: int = config.TICKS_PER_QUARTER) -> bytes:
    check_division(ticks_per_quarter)
    return _chunk(
        b"MThd",
        struct.pack(">HHH", config.SMF_FORMAT, config.SMF_TRACK_COUNT, ticks_per_quarter),
    )


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def check_event(event) -> None:
    """Raise TrackInvariantError unless the event can be written as a legal SMF event."""
    if not isinstance(event, MIDI_EVENT_TYPES):
        raise TrackInvariantError(f"unknown track event {event!r}")
    if not _is_int(event.tick) or not 0 <= event.tick <= config.MAX_VLQ:
        raise TrackInvariantError(f"tick out of range 0-0x{config.MAX_VLQ:X} in {event!r}")

    if isinstance(event, (NoteOn, NoteOff)):
        for value in (event.pitch, event.velocity):
            if not _is_int(value) or not 0 <= value <= 127:
                raise TrackInvariantError(f"data byte out of range 0-127 in {event!r}")
    elif isinstance(event, TempoMeta):
        us = event.microseconds_per_quarter
        if not _is_int(us) or not 1 <= us <= config.MAX_TEMPO_US:
            raise TrackInvariantError(f"tempo out of range 1-0x{config.MAX_TEMPO_US:X} in {event!r}")


def encode_events(track: Track) -> bytes:
    """
    Serialize a track's events (the MTrk body): stable sort by tick, then delta + data per event.
    Every event is checked before any byte is produced.
    """
    for event in track:
        check_event(event)

    out = bytearray()
    last_tick = 0
    for event in sorted(track, key=lambda e: e.tick):
        delta = event.tick - last_tick
        if delta < 0:
            raise TrackInvariantError(f"negative delta-time {delta} at {event!r}")
        out += encode_vlq(delta)
        out += event.data()
        last_tick = event.tick
    return bytes(out)


def encode(track: Track, ticks_per_quarter: int = config.TICKS_PER_QUARTER) -> bytes:
    """Encode a track as a complete format 1, single track Standard MIDI File."""
    header = encode_header(ticks_per_quarter)
    body = encode_events(track)
    logger.debug("Encoded %d events into %d track bytes", len(track), len(body))
    return header + _chunk(b"MTrk", body)


def encode_notes(
    notes: Sequence[NoteEvent],
    tempo_bpm: float,
    ticks_per_quarter: int = config.TICKS_PER_QUARTER,
) -> bytes:
    check_division(ticks_per_quarter)
    return encode(build_track(notes, tempo_bpm), ticks_per_quarter)
