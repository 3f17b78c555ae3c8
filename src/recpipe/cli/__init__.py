"""CLI module for recpipe."""

import dataclasses
import logging
from pathlib import Path

import click

from recpipe.cli.exit_codes import ExitCode
from recpipe.config.loader import get_config
from recpipe.config.models import RecPipeConfig
from recpipe.logging.config import configure_logging

logger = logging.getLogger(__name__)


def _apply_logging_overrides(
    config: RecPipeConfig,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> RecPipeConfig:
    """Return config with CLI logging options applied."""
    overrides: dict[str, object] = {}
    if log_level is not None:
        overrides["level"] = log_level
    if log_file is not None:
        overrides["file"] = log_file
    if log_json:
        overrides["format"] = "json"
    if not overrides:
        return config
    return dataclasses.replace(
        config, logging=dataclasses.replace(config.logging, **overrides)
    )


@click.group()
@click.version_option(package_name="recpipe")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ~/.recpipe/config.toml).",
)
@click.option(
    "--server-url",
    default=None,
    help="Recording server base URL (overrides config).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    server_url: str | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """recpipe - Transcode recordings and move them to and from EPGStation."""
    ctx.ensure_object(dict)

    # Preserve a config injected by tests
    if "config" not in ctx.obj:
        try:
            config = get_config(config_path, server_url=server_url)
        except ValueError as e:
            click.echo(f"Error: invalid configuration: {e}", err=True)
            raise SystemExit(ExitCode.CONFIG_ERROR) from e
        ctx.obj["config"] = _apply_logging_overrides(
            config, log_level, log_file, log_json
        )

    configure_logging(ctx.obj["config"].logging)
    logger.debug("recpipe starting: server=%s", ctx.obj["config"].server.url)


def _register_commands() -> None:
    from recpipe.cli.encode import encode_command
    from recpipe.cli.recorded import recorded_group

    main.add_command(encode_command)
    main.add_command(recorded_group)


_register_commands()
