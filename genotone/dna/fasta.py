from __future__ import annotations

import logging
from pathlib import Path

from genotone import config
from genotone.midi.errors import InvalidInputError
from genotone.state import FastaRecord

logger = logging.getLogger(__name__)


def parse_fasta(content: str) -> FastaRecord:
    """
    Parse FASTA or bare sequence text.

    '>' lines name the sequence (the last one wins), every other non-empty line
    is sequence data. Anything that is not A/T/C/G is dropped.
    """
    if not content or not content.strip():
        raise InvalidInputError("No content provided")

    name = ""
    raw = []
    for line in content.splitlines():
        line = line.strip()
        if line.startswith(">"):
            name = line[1:].strip()
        elif line:
            raw.append(line.upper())

    joined = "".join(raw)
    sequence = "".join(ch for ch in joined if ch in config.DNA_BASES)
    if not sequence:
        raise InvalidInputError("No valid DNA bases found (A, T, C, G)")

    dropped = len(joined) - len(sequence)
    invalid = sorted({ch for ch in joined if ch not in config.DNA_BASES})
    if dropped:
        logger.warning("Dropped %d non-ATCG characters: %s", dropped, "".join(invalid))

    return FastaRecord(
        name=name or config.UNTITLED_SEQUENCE,
        sequence=sequence,
        dropped=dropped,
        invalid_chars=invalid,
    )


def read_fasta(path: Path) -> FastaRecord:
    if not path.exists():
        raise FileNotFoundError(str(path))
    try:
        content = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise InvalidInputError(f"{path} is not UTF-8 text: {e}") from e
    return parse_fasta(content)
