from typing import Optional
from pathlib import Path
import sys

import click
import typer

from . import __version__
from .config import (
    DEFAULT_ERRLOG,
    DEFAULT_MODEL,
    DEFAULT_WHISPER_PY,
    RunConfig,
    default_base,
    interpreter_ok,
    load_env,
)
from .pipeline import transcribe

PROG = "whisper-run"

app = typer.Typer(
    help="Run whisper on an audio file: GPU when available, CPU fallback, tidy output names.",
    add_completion=False,
)


def _version_callback(value: bool):
    if value:
        typer.echo(f"{PROG} {__version__}")
        raise typer.Exit()


TRUTHY = {"true", "1", "yes", "on"}


def wants_word_timestamps(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in TRUTHY


def _usage():
    typer.echo(f"Usage: {PROG} <input_audio> [output_basename]")
    typer.echo(f"Example: {PROG} meeting.wav")


@app.command(context_settings={"allow_extra_args": True})
def main(
    input: Optional[Path] = typer.Argument(
        None, help="Audio file to transcribe (wav/mp3/m4a...)"
    ),
    base: Optional[str] = typer.Argument(
        None, help="Output base name (default: input name without extension)"
    ),
    python: Path = typer.Option(
        Path(DEFAULT_WHISPER_PY),
        "--python",
        envvar="WHISPER_PY",
        help="Interpreter of the venv that has openai-whisper installed",
    ),
    model: str = typer.Option(
        DEFAULT_MODEL, "--model", "-m", envvar="MODEL", help="whisper model name"
    ),
    device: Optional[str] = typer.Option(
        None,
        "--device",
        envvar="DEVICE",
        help='"cpu", "cuda", "cuda:N"... (default: auto-detect)',
    ),
    word_timestamps: str = typer.Option(
        "false",
        "--word-timestamps",
        envvar="WORDTS",
        help='"true" asks whisper for word-level timestamps; anything else is off',
    ),
    errlog: Path = typer.Option(
        Path(DEFAULT_ERRLOG),
        "--errlog",
        envvar="WHISPER_ERRLOG",
        help="Where whisper's stderr from the last attempt is kept",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """Transcribe INPUT → <base>.txt/.srt/.vtt/.json."""
    if input is None:
        _usage()
        raise typer.Exit(code=1)

    if not interpreter_ok(python):
        typer.echo(
            f"ERROR: WHISPER_PY='{python}' not executable. "
            "Please set WHISPER_PY to your venv python.",
            err=True,
        )
        raise typer.Exit(code=2)

    config = RunConfig(
        python=python,
        model=model,
        device=(device or "").strip() or None,
        word_timestamps=wants_word_timestamps(word_timestamps),
        input_path=input,
        base=base or default_base(input),
        errlog=errlog,
    )
    rc = transcribe(config)
    if rc != 0:
        raise typer.Exit(code=rc)


def run():
    """Console entry point: load .env, then hand over to typer."""
    load_env()
    try:
        rc = app(prog_name=PROG, standalone_mode=False)
    except click.UsageError as e:
        typer.echo(f"ERROR: {e.format_message()}", err=True)
        _usage()
        sys.exit(1)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except click.Abort:
        typer.echo("Aborted!", err=True)
        sys.exit(1)
    sys.exit(rc or 0)
