"""Data models for items, points of interest and circle selections."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Final, Literal, Sequence

from map_explore.timeutils import tzinfo_from_name

EARTH_RADIUS_M: Final[float] = 6_371_000.0
# Local scale used to turn a planar offset into degrees (circle rendering only).
METERS_PER_DEGREE: Final[float] = 111_320.0

DEFAULT_CENTER: Final[tuple[float, float]] = (55.2708, 25.2048)
DEFAULT_ZOOM: Final[float] = 11
SINGLE_ITEM_ZOOM: Final[float] = 14
MULTI_ITEM_ZOOM: Final[float] = 12
FOCUS_ZOOM: Final[float] = 14

# ~111 m at the equator; shrinks in longitude away from it.
DEFAULT_PROXIMITY_DEG: Final[float] = 0.001
DEFAULT_CIRCLE_SEGMENTS: Final[int] = 64


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """A WGS84 position in decimal degrees.

    Attributes:
        longitude: Longitude in [-180, 180].
        latitude: Latitude in [-90, 90].
    """

    longitude: float
    latitude: float

    @classmethod
    def from_lonlat(cls, values: Sequence[float]) -> GeoPoint:
        """Build from a ``[lon, lat]`` pair (GeoJSON order)."""

        lon, lat = values
        return cls(longitude=float(lon), latitude=float(lat))

    def as_lonlat(self) -> list[float]:
        return [self.longitude, self.latitude]


@dataclass(frozen=True, slots=True)
class Item:
    """One timestamped sample of a tracked item.

    Several items share an ``id``; together they form that item's trajectory.
    """

    id: str
    coordinates: GeoPoint
    timestamp: datetime
    kind: Literal["item"] = field(default="item", init=False)


@dataclass(frozen=True, slots=True)
class NamedPoint:
    """A point of interest."""

    name: str
    coordinates: GeoPoint
    kind: Literal["point"] = field(default="point", init=False)


Member = Item | NamedPoint


def member_type(member: Member) -> str:
    """Display type of a selection member ("Item" or "Point")."""

    match getattr(member, "kind", None):
        case "item":
            return "Item"
        case "point":
            return "Point"
    raise TypeError(f"未知成员类型：{member!r}")


def member_label(member: Member) -> str:
    """Display name of a selection member: item id or point name."""

    match getattr(member, "kind", None):
        case "item":
            return member.id
        case "point":
            return member.name
    raise TypeError(f"未知成员类型：{member!r}")


@dataclass(frozen=True, slots=True)
class DragState:
    """An in-progress circle definition.

    Attributes:
        center: Circle center, fixed for the whole drag.
        radius_m: Live radius in meters.
        resizing: True when the drag re-defines an already committed circle.
    """

    center: GeoPoint
    radius_m: float
    resizing: bool = False


@dataclass(frozen=True, slots=True)
class CircleSelection:
    """A committed circle and every entity that fell inside it.

    Members are ordered items first, then points, each in dataset order.
    """

    center: GeoPoint
    radius_m: float
    members: tuple[Member, ...]

    @property
    def items(self) -> list[Item]:
        return [m for m in self.members if isinstance(m, Item)]

    @property
    def points(self) -> list[NamedPoint]:
        return [m for m in self.members if isinstance(m, NamedPoint)]


@dataclass(frozen=True, slots=True)
class FilterResult:
    """Items matching an identifier filter and the points near them."""

    query: str
    filtered_items: tuple[Item, ...]
    matched_points: tuple[NamedPoint, ...]

    @property
    def is_active(self) -> bool:
        return bool(self.query.strip())


@dataclass(frozen=True, slots=True)
class Viewport:
    """Recommended camera position."""

    center: GeoPoint
    zoom: float


@dataclass(frozen=True, slots=True)
class DashboardConfig:
    """Tunable parameters of a dashboard session.

    Attributes:
        default_center: (lon, lat) used when nothing is filtered.
        default_zoom: Zoom used with ``default_center``.
        single_item_zoom: Zoom when the filter matches exactly one item.
        multi_item_zoom: Zoom when the filter matches several items.
        focus_zoom: Zoom used when focusing on a selection member.
        proximity_deg: Box half-size (degrees) of the "nearby" point test.
        circle_segments: Vertices used to draw a selection circle.
        tz_name: IANA zone for displayed timestamps; None keeps them as stored.
    """

    default_center: tuple[float, float] = DEFAULT_CENTER
    default_zoom: float = DEFAULT_ZOOM
    single_item_zoom: float = SINGLE_ITEM_ZOOM
    multi_item_zoom: float = MULTI_ITEM_ZOOM
    focus_zoom: float = FOCUS_ZOOM
    proximity_deg: float = DEFAULT_PROXIMITY_DEG
    circle_segments: int = DEFAULT_CIRCLE_SEGMENTS
    tz_name: str | None = None

    def __post_init__(self) -> None:
        if self.proximity_deg < 0:
            raise ValueError(f"proximity_deg 不能为负数：{self.proximity_deg}")
        if self.circle_segments < 3:
            raise ValueError(f"circle_segments 至少为 3：{self.circle_segments}")
        if self.tz_name:
            tzinfo_from_name(self.tz_name)

    @property
    def default_point(self) -> GeoPoint:
        return GeoPoint.from_lonlat(self.default_center)
