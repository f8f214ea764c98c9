"""
Data models for the rows appended to the noise check reports.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar, Optional, Tuple


@dataclass
class NoiseCountRecord:
    """A station channel reporting more summary rows than expected."""

    COLUMNS: ClassVar[Tuple[str, ...]] = (
        "timestamp",
        "station",
        "blacklist",
        "channel",
        "count",
    )

    timestamp: datetime
    station: str
    blacklist: bool
    channel: str  # e.g. 'pga-true' for the vertical pga component
    count: int

    def to_row(self) -> tuple:
        return (self.timestamp, self.station, self.blacklist, self.channel, self.count)


@dataclass
class RatioRecord:
    """Ratio between the largest vertical and horizontal reading of a station.

    Stations without both vertical and horizontal readings carry ``None``
    for the ratio and the maxima.
    """

    COLUMNS: ClassVar[Tuple[str, ...]] = (
        "timestamp",
        "station",
        "blacklist",
        "ratio",
        "max_vertical",
        "max_horizontal",
    )

    timestamp: datetime
    station: str
    blacklist: bool
    ratio: Optional[float]
    max_vertical: Optional[float]
    max_horizontal: Optional[float]

    def to_row(self) -> tuple:
        return (
            self.timestamp,
            self.station,
            self.blacklist,
            self.ratio,
            self.max_vertical,
            self.max_horizontal,
        )
