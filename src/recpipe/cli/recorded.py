"""CLI commands for recordings on the EPGStation server."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click

from recpipe.cli.exit_codes import ExitCode
from recpipe.cli.runner import run_command, run_with_progress
from recpipe.config.models import RecPipeConfig
from recpipe.core.formatting import format_file_size
from recpipe.domain.models import RecordId, VideoFileId
from recpipe.epgstation.client import EPGStationClient
from recpipe.epgstation.models import Record, RecordedQuery, VideoFileProperty
from recpipe.exceptions import (
    TransferConnectionError,
    TransferError,
    TransferIOError,
    TransferProtocolError,
    TransferStatusError,
)

logger = logging.getLogger(__name__)


def _exit_code_for(error: TransferError) -> ExitCode:
    if isinstance(error, TransferConnectionError):
        return ExitCode.SERVER_UNREACHABLE
    if isinstance(error, TransferStatusError):
        return ExitCode.SERVER_ERROR
    if isinstance(error, TransferProtocolError):
        return ExitCode.PROTOCOL_ERROR
    if isinstance(error, TransferIOError):
        return ExitCode.FILE_IO_ERROR
    return ExitCode.GENERAL_ERROR


def _fail(error: TransferError) -> None:
    logger.debug("Transfer failed", exc_info=True)
    click.echo(f"Error: {error}", err=True)
    raise SystemExit(_exit_code_for(error)) from error


def _format_record_line(record: Record) -> str:
    files = ", ".join(
        f"{f.id}:{f.type or '?'}"
        + (f" ({format_file_size(f.size)})" if f.size is not None else "")
        for f in record.video_files
    )
    return f"{record.id:>8}  {record.name or '(untitled)'}  [{files}]"


@click.group("recorded")
def recorded_group() -> None:
    """List, download and upload recordings on the server."""


@recorded_group.command("list")
@click.option("--keyword", default=None, help="Filter by keyword.")
@click.option("--channel-id", type=int, default=None, help="Filter by channel id.")
@click.option("--rule-id", type=int, default=None, help="Filter by rule id.")
@click.option("--genre", type=int, default=None, help="Filter by genre code.")
@click.option(
    "--has-original-file/--any-file",
    default=None,
    help="Only recordings that still have the original TS.",
)
@click.option("--reverse", is_flag=True, default=False, help="Oldest first.")
@click.option("--offset", type=int, default=0, show_default=True)
@click.option("--limit", type=int, default=24, show_default=True)
@click.option("--json", "json_output", is_flag=True, help="Output raw JSON records.")
@click.pass_obj
def list_command(
    obj: dict,
    keyword: str | None,
    channel_id: int | None,
    rule_id: int | None,
    genre: int | None,
    has_original_file: bool | None,
    reverse: bool,
    offset: int,
    limit: int,
    json_output: bool,
) -> None:
    """List recordings matching the given filters."""
    config: RecPipeConfig = obj["config"]
    query = RecordedQuery(
        is_reverse=reverse or None,
        rule_id=rule_id,
        channel_id=channel_id,
        genre=genre,
        keyword=keyword,
        has_original_file=has_original_file,
    )

    async def _query() -> list[Record]:
        async with EPGStationClient.from_config(config.server) as client:
            return await client.query_records(query, offset, limit)

    try:
        records = run_command(_query(), "Listing")
    except TransferError as e:
        _fail(e)
        return

    if json_output:
        payload = [r.model_dump(mode="json", by_alias=True) for r in records]
        click.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return
    if not records:
        click.echo("No recordings found.")
        return
    for record in records:
        click.echo(_format_record_line(record))


@recorded_group.command("download")
@click.argument("video_file_id", type=int)
@click.argument("target", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--quiet", "-q", is_flag=True, help="Do not show a progress line.")
@click.pass_obj
def download_command(
    obj: dict,
    video_file_id: int,
    target: Path,
    quiet: bool,
) -> None:
    """Download video file VIDEO_FILE_ID to TARGET."""
    config: RecPipeConfig = obj["config"]

    async def _download() -> None:
        async with EPGStationClient.from_config(config.server) as client:
            await run_with_progress(
                lambda channel: client.download_file(
                    VideoFileId(video_file_id), target, channel
                ),
                label="Downloading",
                capacity=config.progress.capacity,
                show=not quiet,
            )

    try:
        run_command(_download(), "Download")
    except TransferError as e:
        _fail(e)
        return
    click.echo(f"Downloaded {target}")


@recorded_group.command("upload")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--record-id", type=int, required=True, help="Recording to attach to.")
@click.option("--parent-directory", required=True, help="Parent directory name.")
@click.option("--view-name", required=True, help="Display name of the file.")
@click.option(
    "--file-type",
    type=click.Choice(["ts", "encoded"]),
    default="encoded",
    show_default=True,
)
@click.option("--sub-directory", default=None, help="Optional sub-directory.")
@click.option("--file-name", default=None, help="Name sent to the server.")
@click.option("--quiet", "-q", is_flag=True, help="Do not show a progress line.")
@click.pass_obj
def upload_command(
    obj: dict,
    file: Path,
    record_id: int,
    parent_directory: str,
    view_name: str,
    file_type: str,
    sub_directory: str | None,
    file_name: str | None,
    quiet: bool,
) -> None:
    """Upload FILE and attach it to a recording."""
    config: RecPipeConfig = obj["config"]
    file_property = VideoFileProperty(
        file_name=file_name or file.name,
        file_type=file_type,
        parent_directory_name=parent_directory,
        view_name=view_name,
        sub_directory=sub_directory,
    )

    async def _upload() -> None:
        async with EPGStationClient.from_config(config.server) as client:
            await run_with_progress(
                lambda channel: client.upload_file(
                    file, file_property, RecordId(record_id), channel
                ),
                label="Uploading",
                capacity=config.progress.capacity,
                show=not quiet,
            )

    try:
        run_command(_upload(), "Upload")
    except TransferError as e:
        _fail(e)
        return
    click.echo(f"Uploaded {file}")
