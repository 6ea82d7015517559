"""Data models for scraped listing records."""
from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class ContentShape(str, Enum):
    """How a site's listing is read: from parsed markup or from the page handle."""

    CONTENT = "content"
    HANDLE = "handle"


class SiteDescriptor(BaseModel):
    """Static per-site configuration, loaded once per run."""

    model_config = ConfigDict(frozen=True)

    service_name: str = Field(..., description="Site identifier, also the output directory")
    start_url: str
    content_shape: ContentShape


class ParsedDate(BaseModel):
    """A listing date resolved to an absolute point in time."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["timestamp"] = "timestamp"
    value: datetime
    # True when the label was "today/yesterday HH:MM" and so carries a clock time
    same_day_token: bool = False


class RawDate(BaseModel):
    """A listing date label that could not be parsed; never used for cutoff."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["raw"] = "raw"
    text: str


TimestampOrRaw = Annotated[Union[ParsedDate, RawDate], Field(discriminator="kind")]


def format_listing_date(date: ParsedDate | RawDate) -> str:
    """Render a listing date for the snapshot file."""
    if isinstance(date, ParsedDate):
        if date.same_day_token:
            return date.value.strftime("%Y-%m-%d %H:%M")
        return date.value.strftime("%Y-%m-%d")
    if isinstance(date, RawDate):
        return date.text
    raise TypeError(f"Unsupported listing date: {date!r}")


class DebugInfo(BaseModel):
    """Where a record came from: the page URL and its position on that page."""

    model_config = ConfigDict(frozen=True)

    url: str
    idx: int


class Record(BaseModel):
    """One listing entry extracted from a site page."""

    model_config = ConfigDict(frozen=True)

    id: str = ""
    title: str = ""
    price: float | str = Field(default="", description="Numeric price, or the stripped text when not a number")
    url: str = ""
    date: TimestampOrRaw
    img_url: str = ""
    description: str = ""
    debug_info: DebugInfo

    @field_serializer("date")
    def _serialize_date(self, date: ParsedDate | RawDate) -> str:
        return format_listing_date(date)
