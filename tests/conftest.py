from pathlib import Path
import stat
import sys

import pytest

from whisper_run.config import RunConfig

STUB_TORCH = '''
import os

if os.environ.get("FAKE_TORCH_MISSING") == "1":
    raise ImportError("no torch here")

__version__ = "2.3.0+stub"


class version:
    cuda = "12.1"


class cuda:
    @staticmethod
    def is_available():
        return os.environ.get("FAKE_CUDA") == "1"

    @staticmethod
    def get_device_name(idx):
        return "Stub GPU %d" % idx
'''

# records argv, writes <stem>.<ext> like current whisper, exits with $FAKE_WHISPER_RC
STUB_WHISPER_MAIN = '''
import json, os, sys
from pathlib import Path

log = os.environ.get("FAKE_WHISPER_LOG")
if log:
    with open(log, "a", encoding="utf-8") as f:
        f.write(json.dumps(sys.argv[1:]) + "\\n")

rc = int(os.environ.get("FAKE_WHISPER_RC", "0"))
if rc:
    sys.stderr.write("RuntimeError: CUDA out of memory\\n")
    sys.exit(rc)

stem = Path(sys.argv[1]).stem
for ext in ("txt", "srt", "vtt", "json"):
    Path(stem + "." + ext).write_text("hello", encoding="utf-8")
'''


def write_executable(path: Path, body: str) -> Path:
    path.write_text(body, encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    wd = tmp_path / "work"
    wd.mkdir()
    monkeypatch.chdir(wd)
    return wd


@pytest.fixture
def stubs(tmp_path, monkeypatch):
    """Put stub torch + whisper packages on PYTHONPATH for child interpreters."""
    root = tmp_path / "stubs"
    (root / "torch").mkdir(parents=True)
    (root / "torch" / "__init__.py").write_text(STUB_TORCH, encoding="utf-8")
    (root / "whisper").mkdir()
    (root / "whisper" / "__init__.py").write_text("", encoding="utf-8")
    (root / "whisper" / "__main__.py").write_text(STUB_WHISPER_MAIN, encoding="utf-8")
    monkeypatch.setenv("PYTHONPATH", str(root))
    monkeypatch.delenv("DEVICE", raising=False)
    monkeypatch.delenv("FAKE_CUDA", raising=False)
    monkeypatch.delenv("FAKE_TORCH_MISSING", raising=False)
    monkeypatch.delenv("FAKE_WHISPER_RC", raising=False)
    return root


@pytest.fixture
def python_exe():
    return Path(sys.executable)


@pytest.fixture
def make_config(tmp_path, python_exe):
    def _make(**kw):
        values = dict(
            python=python_exe,
            model="small",
            device=None,
            word_timestamps=False,
            input_path=Path("meeting.wav"),
            base="meeting",
            errlog=tmp_path / "whisper_last_error.log",
        )
        values.update(kw)
        return RunConfig(**values)

    return _make
