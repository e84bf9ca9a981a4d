from __future__ import annotations
from typing import Callable

import typer

from .config import RunConfig
from .device import detect_device, gpu_diagnostics, is_cpu
from .outputs import expected_outputs, rename_outputs
from .runner import RunResult, run_whisper

Echo = Callable[[str], None]


def _report_failure(result: RunResult, echo: Echo) -> None:
    if result.stderr_tail:
        echo("---- last error output ----")
        for line in result.stderr_tail:
            echo(f"    {line}")


def transcribe(config: RunConfig, echo: Echo = typer.echo) -> int:
    """
    Detect the device, run whisper, fall back to CPU once, then rename outputs.

    Returns the process exit status: 0 on success, otherwise the exit code of
    the last failed whisper attempt.
    """
    device = detect_device(config.python, config.device)

    echo("==> Whisper run")
    echo(f"    Model:  {config.model}")
    echo(f"    Device: {device}")
    echo(f"    Input:  {config.input_path}")
    echo(f"    Output: {config.base}.*")

    result = run_whisper(config, device)
    if result.succeeded:
        echo(f"==> Completed on {device}")
    else:
        echo(f"==> Initial run failed (exit {result.returncode}) on device '{device}'.")
        _report_failure(result, echo)
        if is_cpu(device):
            return result.returncode

        for line in gpu_diagnostics(config.python):
            echo(line)

        echo("==> Retrying on cpu...")
        retry = run_whisper(config, "cpu")
        if not retry.succeeded:
            _report_failure(retry, echo)
            echo(f"==> Retry on cpu failed (exit {retry.returncode}). See above diagnostics.")
            return retry.returncode
        echo("==> Completed on cpu")

    rename_outputs(config.input_path, config.base)

    echo("==> Done!")
    echo("Files generated:")
    for p in expected_outputs(config.base):
        echo(f"  {p}")
    return 0
