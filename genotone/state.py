from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Dict, List, Optional

from genotone import config
from genotone.midi.errors import InvalidInputError

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    tempo_bpm: float = config.DEFAULT_TEMPO_BPM
    note_length: float = config.DEFAULT_NOTE_LENGTH
    octave: int = config.DEFAULT_OCTAVE
    velocity: int = config.DEFAULT_VELOCITY
    max_bases: int = config.MAX_BASES  # 0 = whole sequence
    ticks_per_quarter: int = config.TICKS_PER_QUARTER
    base_mapping: Dict[str, str] = field(default_factory=lambda: dict(config.DEFAULT_BASE_MAPPING))

    @classmethod
    def load(cls, path: Path) -> "Settings":
        """
        Load settings from a JSON file. Unknown keys are ignored.
        Unreadable JSON or wrongly typed values raise InvalidInputError.
        """
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise InvalidInputError(f"Settings file {path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise InvalidInputError(f"Settings file {path} must hold a JSON object")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning("Ignoring unknown settings in %s: %s", path, ", ".join(unknown))
        settings = cls(**{k: v for k, v in data.items() if k in known})
        settings.validate()
        return settings

    def validate(self) -> None:
        """Check field types; value ranges are checked where the values are used."""
        for name in ("tempo_bpm", "note_length"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidInputError(f"{name} must be a number, got {value!r}")
        for name in ("octave", "velocity", "max_bases", "ticks_per_quarter"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidInputError(f"{name} must be an integer, got {value!r}")
        if not isinstance(self.base_mapping, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in self.base_mapping.items()
        ):
            raise InvalidInputError(f"base_mapping must map bases to note names, got {self.base_mapping!r}")

    def save(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(asdict(self), indent=2), encoding="utf-8")


@dataclass(frozen=True)
class NoteRecord:
    """One note in quarter-note time, as handed over by the sequence mapping."""
    pitch: int
    start: float
    duration: float
    velocity: int = config.DEFAULT_VELOCITY
    base: Optional[str] = None


@dataclass
class FastaRecord:
    name: str
    sequence: str
    dropped: int = 0
    invalid_chars: List[str] = field(default_factory=list)


@dataclass
class ExportSession:
    name: str
    sequence: str
    settings: Settings
    notes: List[NoteRecord] = field(default_factory=list)
    midi_bytes: bytes = b""
    warnings: List[str] = field(default_factory=list)
