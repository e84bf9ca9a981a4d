from __future__ import annotations
from pathlib import Path
from typing import List, Optional

OUTPUT_EXTS = ("txt", "srt", "vtt", "json")


def expected_outputs(base: str) -> List[Path]:
    return [Path(f"{base}.{ext}") for ext in OUTPUT_EXTS]


def _candidates(input_path: Path, ext: str) -> List[Path]:
    # older whisper appends to the full input name; current releases write <stem>.<ext> to cwd
    return [Path(f"{input_path}.{ext}"), Path(f"{input_path.stem}.{ext}")]


def rename_outputs(input_path: Path, base: str) -> List[Path]:
    """
    Move whisper's outputs to <base>.<ext>. An existing <base>.<ext> is left
    untouched and missing sources are skipped. Returns the paths that were written.
    """
    moved: List[Path] = []
    for ext in OUTPUT_EXTS:
        dest = Path(f"{base}.{ext}")
        if dest.exists():
            continue
        src: Optional[Path] = next(
            (c for c in _candidates(input_path, ext) if c.is_file()), None
        )
        if src is None:
            continue
        try:
            src.rename(dest)
        except FileNotFoundError:
            continue
        moved.append(dest)
    return moved
