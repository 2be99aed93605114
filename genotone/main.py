from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from genotone import config
from genotone.midi.errors import InvalidInputError, TrackInvariantError
from genotone.midi.reader import read_midi
from genotone.pipeline.export_midi import export_session
from genotone.pipeline.run_pipeline import run_pipeline
from genotone.state import Settings
from genotone.utils.logging import setup_logging

logger = logging.getLogger("genotone")

EXIT_MISSING_INPUT = 1
EXIT_INVALID_INPUT = 2
EXIT_INTERNAL = 70


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="genotone", description="Turn a DNA sequence into a MIDI file.")
    ap.add_argument("input", type=Path, help="FASTA or plain sequence file")
    ap.add_argument("-o", "--output", type=Path, default=None, help="output .mid path")
    ap.add_argument("--config", type=Path, default=None, help="settings JSON file")
    ap.add_argument("--tempo", type=float, default=None, help="beats per minute")
    ap.add_argument("--note-length", type=float, default=None, help="quarter notes per base")
    ap.add_argument("--octave", type=int, default=None)
    ap.add_argument("--velocity", type=int, default=None)
    ap.add_argument("--max-bases", type=int, default=None, help="0 plays the whole sequence")
    ap.add_argument("--inspect", action="store_true", help="read the written file back and summarize it")
    ap.add_argument("-v", "--verbose", action="store_true")
    ap.add_argument("--log-file", type=Path, default=None)
    return ap


def settings_from_args(args: argparse.Namespace) -> Settings:
    if args.config is not None:
        settings = Settings.load(args.config)
    elif config.DEFAULT_SETTINGS_PATH.exists():
        settings = Settings.load(config.DEFAULT_SETTINGS_PATH)
    else:
        settings = Settings()

    overrides = {
        "tempo_bpm": args.tempo,
        "note_length": args.note_length,
        "octave": args.octave,
        "velocity": args.velocity,
        "max_bases": args.max_bases,
    }
    for key, value in overrides.items():
        if value is not None:
            setattr(settings, key, value)
    return settings


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)

    if not args.input.exists():
        logger.error("Input file not found: %s", args.input)
        return EXIT_MISSING_INPUT

    out_path = args.output or config.DEFAULT_EXPORT_DIR / (args.input.stem + ".mid")

    try:
        settings = settings_from_args(args)
        session = run_pipeline(args.input, settings)
    except FileNotFoundError as e:
        logger.error("File not found: %s", e)
        return EXIT_MISSING_INPUT
    except InvalidInputError as e:
        logger.error("Invalid input: %s", e)
        return EXIT_INVALID_INPUT
    except TrackInvariantError:
        logger.exception("Internal error while building the MIDI track")
        return EXIT_INTERNAL

    for w in session.warnings:
        logger.warning(w)
    export_session(session, out_path)
    logger.info("%s: %d bases, %d notes -> %s", session.name, len(session.sequence), len(session.notes), out_path)

    if args.inspect:
        notes, bpm = read_midi(out_path)
        logger.info("Read back %d notes at %.1f BPM", len(notes), bpm)
        for n in notes[:16]:
            logger.info("  pitch %3d  start %7.3f  dur %6.3f  vel %3d", n.pitch, n.start, n.duration, n.velocity)

    return 0


if __name__ == "__main__":
    sys.exit(main())
