from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import List
import subprocess

from .config import RunConfig

# exit code a shell reports when the command cannot be launched
LAUNCH_FAILED = 127


@dataclass(frozen=True)
class RunResult:
    device: str
    returncode: int
    stderr_tail: List[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


def build_command(config: RunConfig, device: str) -> List[str]:
    cmd = [
        str(config.python),
        "-m",
        "whisper",
        str(config.input_path),
        "--model",
        config.model,
        "--device",
        device,
        "--output_format",
        "all",
    ]
    if config.word_timestamps:
        cmd += ["--word_timestamps", "True"]
    return cmd


def _tail(path: Path, n: int = 20) -> List[str]:
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError:
        return []
    return text.rstrip().splitlines()[-n:]


def clear_errlog(path: Path) -> None:
    path.unlink(missing_ok=True)


def run_whisper(config: RunConfig, device: str) -> RunResult:
    """One whisper attempt on `device`. stderr goes to the error log; never raises on failure."""
    clear_errlog(config.errlog)
    config.errlog.parent.mkdir(parents=True, exist_ok=True)
    cmd = build_command(config, device)
    with config.errlog.open("w", encoding="utf-8") as err:
        try:
            rc = subprocess.run(cmd, stderr=err).returncode
        except OSError as e:
            err.write(f"{e}\n")
            rc = LAUNCH_FAILED
    tail = _tail(config.errlog) if rc != 0 else []
    return RunResult(device=device, returncode=rc, stderr_tail=tail)
