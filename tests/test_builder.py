"""Track building and quarter-note -> tick conversion."""

from __future__ import annotations

import math

import pytest

from genotone.midi.builder import build_track, notes_from_records, round_half_up, tempo_to_microseconds
from genotone.midi.errors import InvalidInputError
from genotone.midi.model import EndOfTrack, NoteEvent, NoteOff, NoteOn, TempoMeta
from genotone.state import NoteRecord


class TestTempo:
    @pytest.mark.parametrize(
        "bpm, expected",
        [(120, 500000), (60, 1000000), (90, 666667), (140, 428571), (120.5, 497925)],
    )
    def test_microseconds(self, bpm, expected):
        assert tempo_to_microseconds(bpm) == expected

    @pytest.mark.parametrize("bpm", [0, -120, math.nan, math.inf, "120", None, True])
    def test_invalid(self, bpm):
        with pytest.raises(InvalidInputError):
            tempo_to_microseconds(bpm)

    def test_too_slow_for_24_bits(self):
        with pytest.raises(InvalidInputError):
            tempo_to_microseconds(3)
        assert tempo_to_microseconds(4) == 15000000


class TestBuildTrack:
    def test_empty(self):
        assert build_track([], 120) == [TempoMeta(0, 500000), EndOfTrack(0)]

    def test_single_note(self):
        track = build_track([NoteEvent(60, 0, 480, 64)], 120)
        assert track == [
            TempoMeta(0, 500000),
            NoteOn(0, 60, 64),
            NoteOff(480, 60, 0),
            EndOfTrack(480),
        ]

    def test_pairs_in_input_order(self):
        notes = [NoteEvent(64, 480, 240, 100), NoteEvent(60, 0, 960, 80)]
        track = build_track(notes, 120)
        assert track[1:5] == [
            NoteOn(480, 64, 100),
            NoteOff(720, 64),
            NoteOn(0, 60, 80),
            NoteOff(960, 60),
        ]
        # end of track sits at the latest tick even when it is not the last note's
        assert track[-1] == EndOfTrack(960)

    def test_every_on_has_matching_off(self):
        notes = [NoteEvent(p, i * 120, (i % 3) * 60, 90) for i, p in enumerate(range(40, 70))]
        track = build_track(notes, 100)
        ons = [e for e in track if isinstance(e, NoteOn)]
        offs = [e for e in track if isinstance(e, NoteOff)]
        assert len(ons) == len(offs) == len(notes)
        for on, off in zip(ons, offs):
            assert on.pitch == off.pitch
            assert off.tick >= on.tick
            assert off.velocity == 0
        assert sum(isinstance(e, TempoMeta) for e in track) == 1
        assert sum(isinstance(e, EndOfTrack) for e in track) == 1
        assert track[-1].tick == max(e.tick for e in track)

    def test_zero_length_note(self):
        track = build_track([NoteEvent(60, 240, 0, 64)], 120)
        assert track[1] == NoteOn(240, 60, 64)
        assert track[2] == NoteOff(240, 60)

    @pytest.mark.parametrize(
        "note",
        [
            NoteEvent(128, 0, 10, 64),
            NoteEvent(-1, 0, 10, 64),
            NoteEvent(60, 0, 10, 128),
            NoteEvent(60, -1, 10, 64),
            NoteEvent(60, 0, -10, 64),
            NoteEvent(60.0, 0, 10, 64),
            NoteEvent(60, 0x0FFFFFFF, 1, 64),
        ],
    )
    def test_invalid_notes(self, note):
        with pytest.raises(InvalidInputError):
            build_track([NoteEvent(60, 0, 10, 64), note], 120)

    def test_invalid_tempo(self):
        with pytest.raises(InvalidInputError):
            build_track([NoteEvent(60, 0, 10, 64)], 0)


class TestNotesFromRecords:
    def test_rounding(self):
        records = [
            NoteRecord(60, 0, 1, 64),
            NoteRecord(62, 0.25, 0.25, 64),
            NoteRecord(64, 1 / 3, 1 / 3, 64),
        ]
        assert notes_from_records(records) == [
            NoteEvent(60, 0, 480, 64),
            NoteEvent(62, 120, 120, 64),
            NoteEvent(64, 160, 160, 64),
        ]

    def test_half_tick_rounds_up(self):
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3
        notes = notes_from_records([NoteRecord(60, 1.25, 0.25, 64)], ticks_per_quarter=2)
        assert notes == [NoteEvent(60, 3, 1, 64)]

    def test_collisions_are_allowed(self):
        records = [NoteRecord(60, 0.0001, 1, 64), NoteRecord(61, 0.0002, 1, 64)]
        notes = notes_from_records(records)
        assert notes[0].start_tick == notes[1].start_tick == 0

    def test_tiny_duration_rounds_to_zero(self):
        notes = notes_from_records([NoteRecord(60, 1, 0.0001, 64)])
        assert notes == [NoteEvent(60, 480, 0, 64)]

    def test_custom_division(self):
        notes = notes_from_records([NoteRecord(60, 1.5, 0.5, 64)], ticks_per_quarter=96)
        assert notes == [NoteEvent(60, 144, 48, 64)]

    @pytest.mark.parametrize(
        "record",
        [
            NoteRecord(60, -0.5, 1, 64),
            NoteRecord(60, 0, 0, 64),
            NoteRecord(60, 0, -1, 64),
            NoteRecord(60, 0, math.nan, 64),
            NoteRecord(60, "soon", 1, 64),
            NoteRecord(200, 0, 1, 64),
            NoteRecord(60, 0, 1, -3),
        ],
    )
    def test_invalid_records(self, record):
        with pytest.raises(InvalidInputError):
            notes_from_records([record])

    @pytest.mark.parametrize("division", [0, -480, 0x8000, 480.0])
    def test_invalid_division(self, division):
        with pytest.raises(InvalidInputError):
            notes_from_records([], ticks_per_quarter=division)
