from __future__ import annotations
from pathlib import Path
from typing import List, Optional
import os
import shutil
import subprocess

import typer

# Runs inside the whisper interpreter; reads the override from $DEVICE.
PROBE_SCRIPT = r"""
import os, sys
env = os.getenv("DEVICE")
try:
    import torch
except Exception:
    print(env if env else "cpu")
    sys.exit(0)

if env:
    if env.lower().startswith("cuda") and not torch.cuda.is_available():
        print("cpu")
    else:
        print(env)
else:
    print("cuda" if torch.cuda.is_available() else "cpu")
"""

DIAG_SCRIPT = r"""
try:
    import torch
    print("torch:", torch.__version__)
    print("torch.version.cuda:", torch.version.cuda)
    print("torch.cuda.is_available():", torch.cuda.is_available())
    if torch.cuda.is_available():
        try:
            print("cuda device:", torch.cuda.get_device_name(0))
        except Exception as e:
            print("cuda device name error:", e)
except Exception as e:
    print("ERROR checking torch:", e)
"""


def is_cpu(device: str) -> bool:
    return device.strip().lower() == "cpu"


def _last_line(text: str) -> str:
    lines = [ln.strip() for ln in text.splitlines() if ln.strip()]
    return lines[-1] if lines else ""


def detect_device(python: Path, override: Optional[str] = None) -> str:
    """
    Ask the whisper interpreter which device to use.

    A CUDA override is downgraded to "cpu" when torch reports no CUDA; any
    other override is kept as-is. Without an override, "cuda" is chosen when
    available. If the probe itself cannot run, the override (or "cpu") is used.
    """
    fallback = override or "cpu"
    env = dict(os.environ)
    env.pop("DEVICE", None)
    if override:
        env["DEVICE"] = override

    try:
        proc = subprocess.run(
            [str(python), "-c", PROBE_SCRIPT],
            capture_output=True,
            text=True,
            env=env,
        )
    except OSError as e:
        typer.echo(f"⚠️  Device probe could not start ({e}); using {fallback}", err=True)
        return fallback

    device = _last_line(proc.stdout)
    if proc.returncode != 0 or not device:
        typer.echo(
            f"⚠️  Device probe failed (exit {proc.returncode}); using {fallback}",
            err=True,
        )
        return fallback
    return device


def _nvidia_smi() -> List[str]:
    exe = shutil.which("nvidia-smi")
    if not exe:
        return ["nvidia-smi not found"]
    try:
        proc = subprocess.run([exe], capture_output=True, text=True)
    except OSError as e:
        return [f"ERROR running nvidia-smi: {e}"]
    out = (proc.stdout + proc.stderr).rstrip().splitlines()
    if proc.returncode != 0:
        out.append(f"(nvidia-smi exited {proc.returncode})")
    return out


def _torch_report(python: Path) -> List[str]:
    try:
        proc = subprocess.run(
            [str(python), "-c", DIAG_SCRIPT], capture_output=True, text=True
        )
    except OSError as e:
        return [f"ERROR running {python}: {e}"]
    return (proc.stdout + proc.stderr).rstrip().splitlines()


def gpu_diagnostics(python: Path) -> List[str]:
    """Lines describing the GPU state: nvidia-smi output, then torch's view from the venv."""
    lines = ["---- GPU Diagnostics ----", "nvidia-smi output:"]
    lines += _nvidia_smi()
    lines += ["", "Python CUDA diagnostics (from venv):"]
    lines += _torch_report(python)
    lines += ["", "---- end diagnostics ----"]
    return lines
