from __future__ import annotations

import logging
import math
from numbers import Real
from typing import Iterable, List, Sequence

from genotone import config
from genotone.midi.errors import InvalidInputError
from genotone.midi.model import EndOfTrack, NoteEvent, NoteOff, NoteOn, TempoMeta, Track
from genotone.state import NoteRecord

logger = logging.getLogger(__name__)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def round_half_up(value: float) -> int:
    # halves go up; builtin round() would send 2.5 to 2
    return int(math.floor(value + 0.5))


def _as_float(name: str, value) -> float:
    if isinstance(value, bool):
        raise InvalidInputError(f"{name} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"{name} must be a number, got {value!r}") from e


def _check_7bit(name: str, value) -> None:
    if not _is_int(value) or not 0 <= value <= 127:
        raise InvalidInputError(f"{name} must be an integer in 0-127, got {value!r}")


def check_division(ticks_per_quarter) -> None:
    if not _is_int(ticks_per_quarter) or not 1 <= ticks_per_quarter <= config.MAX_DIVISION:
        raise InvalidInputError(
            f"ticks_per_quarter must be an integer in 1-{config.MAX_DIVISION}, got {ticks_per_quarter!r}"
        )


def tempo_to_microseconds(tempo_bpm: float) -> int:
    """Microseconds per quarter note for a tempo in BPM, as carried by set_tempo."""
    if isinstance(tempo_bpm, bool) or not isinstance(tempo_bpm, Real):
        raise InvalidInputError(f"tempo must be a number, got {tempo_bpm!r}")
    if not math.isfinite(tempo_bpm) or tempo_bpm <= 0:
        raise InvalidInputError(f"tempo must be a positive number, got {tempo_bpm!r}")

    us = round_half_up(config.MICROSECONDS_PER_MINUTE / tempo_bpm)
    if not 1 <= us <= config.MAX_TEMPO_US:
        raise InvalidInputError(f"tempo {tempo_bpm!r} BPM does not fit a 24-bit set_tempo value")
    return us


def validate_note(note: NoteEvent) -> None:
    _check_7bit("pitch", note.pitch)
    _check_7bit("velocity", note.velocity)
    if not _is_int(note.start_tick) or note.start_tick < 0:
        raise InvalidInputError(f"start_tick must be a non-negative integer, got {note.start_tick!r}")
    if not _is_int(note.duration_tick) or note.duration_tick < 0:
        raise InvalidInputError(f"duration_tick must be a non-negative integer, got {note.duration_tick!r}")
    if note.end_tick > config.MAX_VLQ:
        raise InvalidInputError(f"note ends at tick {note.end_tick}, beyond the SMF delta-time range")


def notes_from_records(
    records: Iterable[NoteRecord],
    ticks_per_quarter: int = config.TICKS_PER_QUARTER,
) -> List[NoteEvent]:
    """
    Convert quarter-note timed records to tick timed NoteEvents.
    Times are rounded to the nearest tick; two notes landing on the same tick is fine.
    """
    check_division(ticks_per_quarter)

    out: List[NoteEvent] = []
    for i, r in enumerate(records):
        start = _as_float(f"note {i}: start", r.start)
        duration = _as_float(f"note {i}: duration", r.duration)
        if not math.isfinite(start) or start < 0:
            raise InvalidInputError(f"note {i}: start must be non-negative, got {r.start!r}")
        if not math.isfinite(duration) or duration <= 0:
            raise InvalidInputError(f"note {i}: duration must be positive, got {r.duration!r}")
        _check_7bit(f"note {i}: pitch", r.pitch)
        _check_7bit(f"note {i}: velocity", r.velocity)

        out.append(
            NoteEvent(
                pitch=r.pitch,
                start_tick=round_half_up(start * ticks_per_quarter),
                duration_tick=round_half_up(duration * ticks_per_quarter),
                velocity=r.velocity,
            )
        )
    return out


def build_track(notes: Sequence[NoteEvent], tempo_bpm: float) -> Track:
    """
    Expand notes into a track: one tempo event at tick 0, an on/off pair per
    note in input order, and a closing end-of-track at the latest tick.

    Every input is validated before any event is produced.
    """
    tempo_us = tempo_to_microseconds(tempo_bpm)
    for note in notes:
        validate_note(note)

    track: Track = [TempoMeta(tick=0, microseconds_per_quarter=tempo_us)]
    last_tick = 0
    for note in notes:
        track.append(NoteOn(tick=note.start_tick, pitch=note.pitch, velocity=note.velocity))
        track.append(NoteOff(tick=note.end_tick, pitch=note.pitch))
        last_tick = max(last_tick, note.end_tick)
    track.append(EndOfTrack(tick=last_tick))

    logger.debug("Built track: %d notes, %d events, tempo %d us/quarter", len(notes), len(track), tempo_us)
    return track
