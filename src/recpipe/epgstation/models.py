"""EPGStation API request and response models.

Responses are validated with pydantic; unknown server fields are kept on
the model so records are returned as the server sent them.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field

from recpipe.domain.models import RecordId, VideoFileId


class VideoFile(BaseModel):
    """A file attached to a recording (original TS or encoded)."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    id: VideoFileId
    name: str | None = None
    filename: str | None = None
    type: str | None = None
    size: int | None = None


class Record(BaseModel):
    """Recorded program entry from /api/recorded."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    id: RecordId
    name: str | None = None
    channel_id: int | None = Field(default=None, alias="channelId")
    start_at: int | None = Field(default=None, alias="startAt")
    end_at: int | None = Field(default=None, alias="endAt")
    is_recording: bool | None = Field(default=None, alias="isRecording")
    video_files: list[VideoFile] = Field(default_factory=list, alias="videoFiles")


class RecordedEndpointResponse(BaseModel):
    """Body of GET /api/recorded."""

    model_config = ConfigDict(extra="allow")

    records: list[Record]
    total: int | None = None


@dataclass(frozen=True)
class VideoFileProperty:
    """Metadata required to upload a file to a recording."""

    file_name: str
    file_type: str
    parent_directory_name: str
    view_name: str
    sub_directory: str | None = None

    def __post_init__(self) -> None:
        """Validate required fields."""
        if not self.file_name:
            raise ValueError("file_name is required")
        if not self.file_type:
            raise ValueError("file_type is required")

    def form_fields(self, record_id: RecordId) -> dict[str, str]:
        """Text fields of the multipart upload form, in request order.

        The sub-directory field is only present when set.
        """
        fields = {
            "recordedId": str(record_id),
            "parentDirectoryName": self.parent_directory_name,
            "viewName": self.view_name,
            "fileType": self.file_type,
        }
        if self.sub_directory is not None:
            fields["subDirectory"] = self.sub_directory
        return fields


def _format_value(value: bool | int | str) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass
class RecordedQuery:
    """Filter and sort criteria for listing recordings.

    Offset and limit are not part of the query; the client appends them.
    Entries in ``extra`` are passed through verbatim, after the typed
    filters.
    """

    is_half_width: bool = True
    is_reverse: bool | None = None
    rule_id: int | None = None
    channel_id: int | None = None
    genre: int | None = None
    keyword: str | None = None
    has_original_file: bool | None = None
    extra: dict[str, str] = field(default_factory=dict)

    def to_parameters(self) -> list[tuple[str, str]]:
        """Convert to query-string pairs using the API's parameter names."""
        typed: list[tuple[str, bool | int | str | None]] = [
            ("isHalfWidth", self.is_half_width),
            ("isReverse", self.is_reverse),
            ("ruleId", self.rule_id),
            ("channelId", self.channel_id),
            ("genre", self.genre),
            ("keyword", self.keyword),
            ("hasOriginalFile", self.has_original_file),
        ]
        params = [
            (key, _format_value(value)) for key, value in typed if value is not None
        ]
        params.extend((key, str(value)) for key, value in self.extra.items())
        return params
