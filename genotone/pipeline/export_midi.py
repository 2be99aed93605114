from __future__ import annotations
from pathlib import Path

from genotone.midi.export_midi import write_midi_bytes
from genotone.state import ExportSession


def export_session(session: ExportSession, out_path: Path) -> Path:
    if not session.midi_bytes:
        raise RuntimeError(f"Session {session.name!r} has not been encoded yet.")
    return write_midi_bytes(session.midi_bytes, out_path)
