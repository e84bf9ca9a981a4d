from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import os

from dotenv import find_dotenv, load_dotenv

DEFAULT_WHISPER_PY = "/opt/whisper-venv/bin/python3"
DEFAULT_MODEL = "small"
DEFAULT_ERRLOG = "/tmp/whisper_last_error.log"


@dataclass(frozen=True)
class RunConfig:
    python: Path
    model: str
    device: Optional[str]  # None -> auto-detect
    word_timestamps: bool
    input_path: Path
    base: str
    errlog: Path = Path(DEFAULT_ERRLOG)


def default_base(input_path: Path) -> str:
    """Input file name with its last extension stripped: meeting.wav -> meeting."""
    name = Path(input_path).name
    stem, dot, _ext = name.rpartition(".")
    return stem if dot and stem else name


def load_env(dotenv_path: Optional[Path] = None) -> None:
    # real environment wins over .env
    load_dotenv(dotenv_path or find_dotenv(usecwd=True), override=False)


def interpreter_ok(python: Path) -> bool:
    return python.is_file() and os.access(python, os.X_OK)
