"""Dataset loading (CSV / JSON) and the built-in demo dataset.

Coordinates are validated here, at the boundary; the query modules assume
in-range input.
"""

from __future__ import annotations

import csv
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Sequence

from map_explore.models import GeoPoint, Item, NamedPoint
from map_explore.timeutils import parse_timestamp

logger = logging.getLogger(__name__)

ITEM_FIELDS = ("id", "longitude", "latitude", "timestamp")
POINT_FIELDS = ("name", "longitude", "latitude")


@dataclass(frozen=True, slots=True)
class CsvSummary:
    """Quick summary of CSV parsing."""

    rows_total: int
    rows_parsed: int
    rows_skipped: int
    fieldnames: Sequence[str]


def _parse_float(value: str) -> float:
    return float(value.strip())


def parse_geopoint(lon: Any, lat: Any) -> GeoPoint:
    """Build a GeoPoint, rejecting values outside the WGS84 range.

    Raises:
        ValueError: If a value is not a number or is out of range.
    """

    lon_f = _parse_float(lon) if isinstance(lon, str) else float(lon)
    lat_f = _parse_float(lat) if isinstance(lat, str) else float(lat)
    # also rejects NaN
    if not -180.0 <= lon_f <= 180.0:
        raise ValueError(f"经度超出范围：{lon_f}")
    if not -90.0 <= lat_f <= 90.0:
        raise ValueError(f"纬度超出范围：{lat_f}")
    return GeoPoint(longitude=lon_f, latitude=lat_f)


def _check_fields(fieldnames: Sequence[str], required: Sequence[str], path: Path) -> None:
    missing = [f for f in required if f not in fieldnames]
    if missing:
        raise KeyError(f"{path} 缺少必要字段：{missing}. 实际字段：{list(fieldnames)}")


def _summarize(rows_total: int, rows_parsed: int, fieldnames: Sequence[str], path: Path) -> CsvSummary:
    summary = CsvSummary(
        rows_total=rows_total,
        rows_parsed=rows_parsed,
        rows_skipped=rows_total - rows_parsed,
        fieldnames=fieldnames,
    )
    if summary.rows_skipped > 0:
        logger.warning("%s 中有 %s 行解析失败已跳过", path, summary.rows_skipped)
    return summary


def load_items_csv(csv_path: str | Path) -> tuple[list[Item], CsvSummary]:
    """Load items from a CSV with columns id, longitude, latitude, timestamp.

    Args:
        csv_path: Path to the CSV.

    Returns:
        (items, summary)

    Raises:
        KeyError: If a required column is missing.
    """

    p = Path(csv_path)
    rows_total = 0
    parsed: list[Item] = []

    with p.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        fieldnames = reader.fieldnames or ()
        _check_fields(fieldnames, ITEM_FIELDS, p)
        for row in reader:
            rows_total += 1
            try:
                item_id = (row["id"] or "").strip()
                if not item_id:
                    raise ValueError("empty id")
                parsed.append(
                    Item(
                        id=item_id,
                        coordinates=parse_geopoint(row["longitude"], row["latitude"]),
                        timestamp=parse_timestamp(row["timestamp"]),
                    )
                )
            except (ValueError, TypeError, AttributeError):
                # 损坏/空行，直接跳过
                continue

    return parsed, _summarize(rows_total, len(parsed), fieldnames, p)


def load_points_csv(csv_path: str | Path) -> tuple[list[NamedPoint], CsvSummary]:
    """Load points of interest from a CSV with columns name, longitude, latitude."""

    p = Path(csv_path)
    rows_total = 0
    parsed: list[NamedPoint] = []

    with p.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        fieldnames = reader.fieldnames or ()
        _check_fields(fieldnames, POINT_FIELDS, p)
        for row in reader:
            rows_total += 1
            try:
                parsed.append(
                    NamedPoint(
                        name=(row["name"] or "").strip(),
                        coordinates=parse_geopoint(row["longitude"], row["latitude"]),
                    )
                )
            except (ValueError, TypeError, AttributeError):
                continue

    return parsed, _summarize(rows_total, len(parsed), fieldnames, p)


def items_from_records(records: Iterable[dict[str, Any]]) -> list[Item]:
    """Items from ``{"id", "coordinates": [lon, lat], "timestamp"}`` records.

    Invalid records are skipped and counted in a warning.
    """

    out: list[Item] = []
    skipped = 0
    for rec in records:
        try:
            lon, lat = rec["coordinates"]
            out.append(
                Item(
                    id=str(rec["id"]),
                    coordinates=parse_geopoint(lon, lat),
                    timestamp=parse_timestamp(str(rec["timestamp"])),
                )
            )
        except (KeyError, ValueError, TypeError):
            skipped += 1
    if skipped:
        logger.warning("items 中有 %s 条记录无效已跳过", skipped)
    return out


def points_from_records(records: Iterable[dict[str, Any]]) -> list[NamedPoint]:
    """Points from ``{"name", "coordinates": [lon, lat]}`` records."""

    out: list[NamedPoint] = []
    skipped = 0
    for rec in records:
        try:
            lon, lat = rec["coordinates"]
            out.append(NamedPoint(name=str(rec["name"]), coordinates=parse_geopoint(lon, lat)))
        except (KeyError, ValueError, TypeError):
            skipped += 1
    if skipped:
        logger.warning("points 中有 %s 条记录无效已跳过", skipped)
    return out


def load_json(json_path: str | Path) -> tuple[list[Item], list[NamedPoint]]:
    """Load ``{"items": [...], "points": [...]}`` from a JSON file.

    Raises:
        ValueError: If the file is not valid JSON or not an object.
    """

    p = Path(json_path)
    try:
        doc = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"JSON 解析失败：{p}（{exc}）") from exc
    if not isinstance(doc, dict):
        raise ValueError(f"JSON 顶层应为对象：{p}")
    return items_from_records(doc.get("items", [])), points_from_records(doc.get("points", []))


def write_items_csv(items: Iterable[Item], out_path: str | Path) -> None:
    p = Path(out_path)
    with p.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=list(ITEM_FIELDS))
        w.writeheader()
        for it in items:
            w.writerow(
                {
                    "id": it.id,
                    "longitude": it.coordinates.longitude,
                    "latitude": it.coordinates.latitude,
                    "timestamp": it.timestamp.isoformat(),
                }
            )


def write_points_csv(points: Iterable[NamedPoint], out_path: str | Path) -> None:
    p = Path(out_path)
    with p.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=list(POINT_FIELDS))
        w.writeheader()
        for pt in points:
            w.writerow(
                {
                    "name": pt.name,
                    "longitude": pt.coordinates.longitude,
                    "latitude": pt.coordinates.latitude,
                }
            )


_SAMPLE_ITEMS: list[dict[str, Any]] = [
    # Downtown
    {"id": "1", "coordinates": [55.2744, 25.2048], "timestamp": "2024-02-01T10:00:00Z"},
    {"id": "1", "coordinates": [55.2885, 25.2048], "timestamp": "2024-02-01T11:30:00Z"},
    {"id": "1", "coordinates": [55.3034, 25.2285], "timestamp": "2024-02-01T13:00:00Z"},
    # Marina
    {"id": "2", "coordinates": [55.1367, 25.0806], "timestamp": "2024-02-01T09:00:00Z"},
    {"id": "2", "coordinates": [55.1484, 25.0889], "timestamp": "2024-02-01T10:15:00Z"},
    {"id": "2", "coordinates": [55.1321, 25.0656], "timestamp": "2024-02-01T11:45:00Z"},
    # Business Bay
    {"id": "3", "coordinates": [55.2644, 25.1872], "timestamp": "2024-02-01T14:00:00Z"},
    {"id": "3", "coordinates": [55.2697, 25.1927], "timestamp": "2024-02-01T15:30:00Z"},
    {"id": "3", "coordinates": [55.2585, 25.1833], "timestamp": "2024-02-01T17:00:00Z"},
]

_SAMPLE_POINTS: list[dict[str, Any]] = [
    {"name": "Burj Khalifa", "coordinates": [55.2744, 25.2048]},
    {"name": "Dubai Mall", "coordinates": [55.2796, 25.1972]},
    {"name": "Dubai Marina", "coordinates": [55.1367, 25.0806]},
    {"name": "Palm Jumeirah", "coordinates": [55.1384, 25.1123]},
    {"name": "Dubai International Airport", "coordinates": [55.3644, 25.2532]},
    {"name": "Burj Al Arab", "coordinates": [55.1854, 25.1412]},
    {"name": "Dubai Creek", "coordinates": [55.3241, 25.2485]},
    {"name": "Gold Souk", "coordinates": [55.2852, 25.2867]},
]


def sample_items() -> list[Item]:
    """Demo trajectories of three items around Dubai."""

    return items_from_records(_SAMPLE_ITEMS)


def sample_points() -> list[NamedPoint]:
    """Demo points of interest around Dubai."""

    return points_from_records(_SAMPLE_POINTS)


def load_datasets(
    items_path: str | Path | None = None,
    points_path: str | Path | None = None,
) -> tuple[list[Item], list[NamedPoint]]:
    """Load items and points from CSV or JSON files, or fall back to the demo data.

    A ``.json`` path may carry both datasets; ``items_path`` is used for items
    and ``points_path`` for points.
    """

    items: list[Item]
    points: list[NamedPoint]

    if items_path is None:
        items = sample_items()
    elif Path(items_path).suffix.lower() == ".json":
        items, _ = load_json(items_path)
    else:
        items, _ = load_items_csv(items_path)

    if points_path is None:
        points = sample_points()
    elif Path(points_path).suffix.lower() == ".json":
        _, points = load_json(points_path)
    else:
        points, _ = load_points_csv(points_path)

    logger.info("loaded items=%s points=%s", len(items), len(points))
    return items, points
