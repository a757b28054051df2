"""Track entity: one row of the denormalized tracks dataset.

A track combines catalog metadata (artist, album, track), Spotify audio
features, YouTube/Spotify engagement counters and a couple of flags. The
table carries no primary key, so duplicate (artist, track, album) rows
are legal.

Source fixtures use the spellings of the published dataset
(``Album_type``, ``most_playedon``, ``EnergyLiveness`` ...); these are
folded onto field names by ``normalize_record`` before validation.
"""

from __future__ import annotations

import re
from enum import Enum
from functools import lru_cache
from typing import Annotated, Any, Mapping

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, TypeAdapter


class AlbumType(str, Enum):
    """Release type of the album a track appears on."""

    SINGLE = "single"
    ALBUM = "album"
    COMPILATION = "compilation"


class MostPlayedOn(str, Enum):
    """Platform on which a track collected most of its plays."""

    SPOTIFY = "Spotify"
    YOUTUBE = "Youtube"


def _enum_member(enum_cls: type[Enum]):
    """Build a validator that matches enum values case-insensitively."""

    def parse(value: Any) -> Any:
        if isinstance(value, enum_cls):
            return value
        if isinstance(value, str):
            wanted = value.strip().lower()
            for member in enum_cls:
                if member.value.lower() == wanted:
                    return member
            allowed = ", ".join(m.value for m in enum_cls)
            raise ValueError(f"expected one of {allowed}, got {value!r}")
        return value

    return parse


def _parse_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text == "true":
            return True
        if text == "false":
            return False
    raise ValueError(f"expected true or false, got {value!r}")


def _parse_count(value: Any) -> Any:
    # Exported spreadsheets store counters as "1234.0".
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            number = float(text)
            return int(number) if number.is_integer() else number
    return value


Flag = Annotated[bool, BeforeValidator(_parse_flag)]
Count = Annotated[int, BeforeValidator(_parse_count), Field(ge=0)]
AlbumTypeField = Annotated[AlbumType, BeforeValidator(_enum_member(AlbumType))]
PlatformField = Annotated[MostPlayedOn, BeforeValidator(_enum_member(MostPlayedOn))]


class Track(BaseModel):
    """A single track row.

    Instances are immutable and hashable. Item access (``track["views"]``)
    mirrors attribute access so predicates can evaluate tracks and
    operator rows alike.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    artist: str
    track: str
    album: str
    album_type: AlbumTypeField

    # Audio features
    danceability: float
    energy: float
    loudness: float
    speechiness: float
    acousticness: float
    instrumentalness: float
    liveness: float
    valence: float
    tempo: float
    duration_min: float

    # YouTube video metadata
    title: str
    channel: str

    # Engagement
    views: Count
    likes: Count
    comments: Count
    stream: Count

    # Flags
    licensed: Flag
    official_video: Flag
    most_played_on: PlatformField

    # Stored as delivered; never recomputed from energy / liveness
    energy_liveness: float

    def __getitem__(self, column: str) -> Any:
        try:
            return getattr(self, column)
        except AttributeError as e:
            raise KeyError(f"Column '{column}' not found") from e

    @classmethod
    def coerce(cls, column: str, value: Any) -> Any:
        """Coerce a raw value to the type stored in ``column``.

        Raises:
            KeyError: If ``column`` is not a track column.
            pydantic.ValidationError: If the value cannot be coerced.
        """
        return _column_adapter(column).validate_python(value)


TRACK_COLUMNS: tuple[str, ...] = tuple(Track.model_fields)

_HEADER_ALIASES = {
    "most_playedon": "most_played_on",
    "mostplayedon": "most_played_on",
    "energyliveness": "energy_liveness",
    "durationmin": "duration_min",
    "officialvideo": "official_video",
    "albumtype": "album_type",
}


def normalize_column_name(name: str) -> str:
    """Fold a source header onto a track column name."""
    key = re.sub(r"[^a-z0-9]+", "_", str(name).strip().lower()).strip("_")
    return _HEADER_ALIASES.get(key, key)


def normalize_record(record: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``record`` keyed by track column names."""
    return {normalize_column_name(key): value for key, value in record.items()}


@lru_cache(maxsize=None)
def _column_adapter(column: str) -> TypeAdapter:
    field = Track.model_fields.get(column)
    if field is None:
        raise KeyError(f"Column '{column}' not found")
    if not field.metadata:
        return TypeAdapter(field.annotation)
    return TypeAdapter(Annotated[(field.annotation, *field.metadata)])
