"""Command-line interface for map_explore.

Run:
    python -m map_explore filter --id 2
    python -m map_explore select --center-lon 55.2744 --center-lat 25.2048 --radius-m 500
"""

from __future__ import annotations

import argparse
import json
import logging
import math
import sys
from pathlib import Path
from typing import Any

from map_explore.dashboard import MapDashboard
from map_explore.datasets import (
    load_datasets,
    sample_items,
    sample_points,
    write_items_csv,
    write_points_csv,
)
from map_explore.features import circle_collection, path_feature
from map_explore.models import (
    DEFAULT_CIRCLE_SEGMENTS,
    DEFAULT_PROXIMITY_DEG,
    EARTH_RADIUS_M,
    DashboardConfig,
    GeoPoint,
)
from map_explore.path import path_length_m
from map_explore.timeutils import format_timestamp


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _dashboard(args: argparse.Namespace) -> MapDashboard:
    items, points = load_datasets(args.items, args.points)
    config = DashboardConfig(proximity_deg=args.proximity_deg, tz_name=args.tz)
    return MapDashboard(items, points, config)


def _cmd_filter(args: argparse.Namespace) -> int:
    dash = _dashboard(args)
    res = dash.set_filter(args.id)
    vp = dash.viewport

    _print_json(
        {
            "query": res.query,
            "items": len(res.filtered_items),
            "matched_points": [p.name for p in res.matched_points],
            "path": path_feature(dash.path),
            "path_length_m": round(path_length_m(dash.path), 1),
            "viewport": {"center": vp.center.as_lonlat(), "zoom": vp.zoom},
            "timeline": [
                {"id": it.id, "timestamp": format_timestamp(it.timestamp, args.tz)}
                for it in sorted(res.filtered_items, key=lambda it: it.timestamp)
            ],
        }
    )
    return 0


def _cmd_select(args: argparse.Namespace) -> int:
    dash = _dashboard(args)
    if args.id:
        dash.set_filter(args.id)

    if args.radius_m < 0:
        raise ValueError(f"半径不能为负数：{args.radius_m}")
    center = GeoPoint(longitude=args.center_lon, latitude=args.center_lat)
    # 用“拖动”事件模拟：中心点按下 -> 沿经线移动到半径处 -> 松开
    edge = GeoPoint(
        longitude=args.center_lon,
        latitude=args.center_lat + math.degrees(args.radius_m / EARTH_RADIUS_M),
    )
    dash.toggle_drawing()
    dash.pointer_down(center)
    dash.pointer_move(edge)
    dash.pointer_up()

    selection = dash.circle_selection
    if selection is None:
        print("未生成圆形选区", file=sys.stderr)
        return 1

    _print_json(
        {
            "center": selection.center.as_lonlat(),
            "radius_m": round(selection.radius_m, 1),
            "found": len(selection.members),
            "members": dash.selection_rows(),
        }
    )
    return 0


def _cmd_circle(args: argparse.Namespace) -> int:
    if args.radius_m < 0:
        raise ValueError(f"半径不能为负数：{args.radius_m}")
    center = GeoPoint(longitude=args.center_lon, latitude=args.center_lat)
    _print_json(circle_collection(center, args.radius_m, args.segments))
    return 0


def _cmd_export_sample(args: argparse.Namespace) -> int:
    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    write_items_csv(sample_items(), out_dir / "items.csv")
    write_points_csv(sample_points(), out_dir / "points.csv")
    print(f"已导出：{out_dir / 'items.csv'}, {out_dir / 'points.csv'}")
    return 0


def _add_dataset_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--items", type=str, default=None, help="items 数据（CSV 或 JSON），缺省用内置示例")
    p.add_argument("--points", type=str, default=None, help="points 数据（CSV 或 JSON），缺省用内置示例")
    p.add_argument(
        "--proximity-deg",
        type=float,
        default=DEFAULT_PROXIMITY_DEG,
        help="“附近”判定阈值（度，经纬度分别比较；0.001 约 111m）",
    )
    p.add_argument("--tz", type=str, default=None, help="显示时间用的时区（IANA，如 Asia/Dubai），缺省保持原样")


def _add_center_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--center-lon", type=float, required=True, help="圆心经度")
    p.add_argument("--center-lat", type=float, required=True, help="圆心纬度")
    p.add_argument("--radius-m", type=float, required=True, help="半径（米）")


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""

    p = argparse.ArgumentParser(prog="map_explore")
    p.add_argument("-v", "--verbose", action="store_true", help="输出调试日志")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_f = sub.add_parser("filter", help="按 item id 过滤，输出轨迹/附近点/视角")
    _add_dataset_args(p_f)
    p_f.add_argument("--id", type=str, required=True, help="item id（不区分大小写的子串匹配）")
    p_f.set_defaults(func=_cmd_filter)

    p_s = sub.add_parser("select", help="圆形选区：列出圆内的 items 与 points")
    _add_dataset_args(p_s)
    _add_center_args(p_s)
    p_s.add_argument("--id", type=str, default=None, help="先按 item id 过滤再选区")
    p_s.set_defaults(func=_cmd_select)

    p_c = sub.add_parser("circle", help="输出圆形选区的 GeoJSON")
    _add_center_args(p_c)
    p_c.add_argument("--segments", type=int, default=DEFAULT_CIRCLE_SEGMENTS, help="多边形顶点数")
    p_c.set_defaults(func=_cmd_circle)

    p_e = sub.add_parser("export-sample", help="导出内置示例数据为 CSV")
    p_e.add_argument("--out-dir", type=str, default="sample_data", help="输出目录")
    p_e.set_defaults(func=_cmd_export_sample)

    return p


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""

    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        return int(args.func(args))
    except (KeyError, ValueError, OSError) as exc:
        print(f"错误：{exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
