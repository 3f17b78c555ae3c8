"""CLI encode command for recpipe."""

import logging
from pathlib import Path

import click

from recpipe.cli.exit_codes import ExitCode
from recpipe.cli.runner import run_command, run_with_progress
from recpipe.config.models import RecPipeConfig
from recpipe.exceptions import (
    EncodeError,
    EncoderProcessError,
    EncoderSpawnError,
    MediaProbeError,
    MissingDurationError,
    StreamSelectionError,
)
from recpipe.executor.encoder import EncodeOrchestrator

logger = logging.getLogger(__name__)


def _exit_code_for(error: EncodeError) -> ExitCode:
    if isinstance(error, (StreamSelectionError, MissingDurationError)):
        return ExitCode.INVALID_MEDIA
    if isinstance(error, EncoderSpawnError):
        return ExitCode.TOOL_NOT_AVAILABLE
    if isinstance(error, MediaProbeError):
        return ExitCode.INVALID_MEDIA
    if isinstance(error, EncoderProcessError):
        return ExitCode.ENCODE_FAILED
    return ExitCode.GENERAL_ERROR


@click.command("encode")
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("target", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--quiet", "-q", is_flag=True, help="Do not show a progress line.")
@click.pass_obj
def encode_command(
    obj: dict,
    source: Path,
    target: Path,
    quiet: bool,
) -> None:
    """Transcode a recording to AV1.

    SOURCE is the recording to transcode. TARGET is overwritten. A partial
    TARGET is left in place if encoding fails.
    """
    config: RecPipeConfig = obj["config"]
    orchestrator = EncodeOrchestrator.from_config(config)

    try:
        run_command(
            run_with_progress(
                lambda channel: orchestrator.transcode(source, target, channel),
                label="Encoding",
                capacity=config.progress.capacity,
                show=not quiet,
            ),
            "Encoding",
        )
    except EncodeError as e:
        logger.debug("Encode failed", exc_info=True)
        click.echo(f"Error: {e}", err=True)
        if isinstance(e, EncoderProcessError):
            for line in e.stderr_tail:
                click.echo(f"  {line}", err=True)
        raise SystemExit(_exit_code_for(e)) from e

    click.echo(f"Encoded {target}")
