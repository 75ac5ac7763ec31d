from __future__ import annotations

from pathlib import Path

import pydeck as pdk
import streamlit as st

from map_explore import selection as sel
from map_explore.dashboard import MapDashboard
from map_explore.datasets import load_datasets
from map_explore.models import DashboardConfig, GeoPoint
from map_explore.path import path_length_m

ITEM_COLOR = [255, 107, 107]
POINT_COLOR = [51, 154, 240]


@st.cache_data(show_spinner=False)
def _load(items_path: str, points_path: str, mtime: float):
    _ = mtime  # part of cache key so updated files reload automatically
    return load_datasets(items_path or None, points_path or None)


def _mtime(*paths: str) -> float:
    return max((Path(p).stat().st_mtime for p in paths if p and Path(p).exists()), default=0.0)


def _dashboard_key(items_path: str, points_path: str, proximity_deg: float, tz_name: str) -> tuple:
    return (items_path, points_path, proximity_deg, tz_name, _mtime(items_path, points_path))


def _session(items_path: str, points_path: str, proximity_deg: float, tz_name: str) -> MapDashboard:
    """One dashboard per browser session, rebuilt when the inputs or the files change."""

    key = _dashboard_key(items_path, points_path, proximity_deg, tz_name)
    if st.session_state.get("dashboard_key") != key:
        items, points = _load(items_path, points_path, key[-1])
        config = DashboardConfig(proximity_deg=proximity_deg, tz_name=tz_name or None)
        st.session_state["dashboard"] = MapDashboard(items, points, config)
        st.session_state["dashboard_key"] = key
    return st.session_state["dashboard"]


def _layers(dash: MapDashboard) -> list[pdk.Layer]:
    fc = dash.feature_layers()
    layers: list[pdk.Layer] = []
    if fc["path"] is not None:
        layers.append(
            pdk.Layer(
                "GeoJsonLayer",
                data={"type": "FeatureCollection", "features": [fc["path"]]},
                get_line_color=ITEM_COLOR,
                line_width_min_pixels=2,
            )
        )
    if fc["circle"] is not None:
        layers.append(
            pdk.Layer(
                "GeoJsonLayer",
                data=fc["circle"],
                filled=True,
                get_fill_color=POINT_COLOR + [25 if dash.is_drawing else 40],
                get_line_color=POINT_COLOR,
                line_width_min_pixels=1,
                point_radius_min_pixels=4,
            )
        )
    layers.append(
        pdk.Layer(
            "GeoJsonLayer",
            data=fc["items"],
            get_fill_color=ITEM_COLOR,
            get_line_color=[255, 255, 255],
            point_radius_min_pixels=8,
            pickable=True,
        )
    )
    layers.append(
        pdk.Layer(
            "GeoJsonLayer",
            data=fc["points"],
            get_fill_color=POINT_COLOR,
            get_line_color=[255, 255, 255],
            point_radius_min_pixels=6,
            pickable=True,
        )
    )
    return layers


def main() -> None:
    st.set_page_config(page_title="地图探索：轨迹与圆形选区", layout="wide")
    st.title("地图探索：按 ID 过滤轨迹，画圆选取周边")

    with st.sidebar:
        st.subheader("数据")
        items_path = st.text_input("items 路径（CSV/JSON，留空用示例）", value="")
        points_path = st.text_input("points 路径（CSV/JSON，留空用示例）", value="")
        proximity_deg = st.number_input("附近判定阈值（度）", value=0.001, step=0.0005, format="%.4f")
        tz_name = st.text_input("显示时区（IANA，留空保持原样）", value="Asia/Dubai")

    try:
        dash = _session(items_path, points_path, float(proximity_deg), tz_name.strip())
    except (KeyError, ValueError, OSError) as exc:
        st.error(f"数据读取失败：{exc}")
        return

    with st.sidebar:
        st.subheader("按 Item ID 过滤")
        c1, c2 = st.columns([4, 1])
        query = c1.text_input("Item ID", value=dash.filter_result.query, label_visibility="collapsed")
        if c2.button("✕", disabled=not dash.filter_result.is_active):
            dash.clear_filter()
            st.rerun()
        if query != dash.filter_result.query:
            dash.set_filter(query)

        res = dash.filter_result
        if res.is_active:
            st.caption(f"找到 {len(res.filtered_items)} 个 item 位置；相关 points：{len(res.matched_points)}")

        st.subheader("圆形选区")
        if st.button("取消" if dash.is_drawing else "画圆", use_container_width=True):
            dash.toggle_drawing()

        lon = st.number_input("指针经度", value=dash.viewport.center.longitude, format="%.6f")
        lat = st.number_input("指针纬度", value=dash.viewport.center.latitude, format="%.6f")
        pointer = GeoPoint(longitude=float(lon), latitude=float(lat))

        b1, b2, b3 = st.columns(3)
        if b1.button("按下", disabled=not isinstance(dash.state, sel.Placing)):
            dash.pointer_down(pointer)
        if b2.button("移动", disabled=not isinstance(dash.state, sel.Dragging)):
            dash.pointer_move(pointer)
        if b3.button("松开", disabled=not isinstance(dash.state, sel.Dragging)):
            dash.pointer_up()

        if dash.circle_selection is not None:
            r1, r2 = st.columns(2)
            if r1.button("调整半径"):
                dash.resize()
            if r2.button("清除选区"):
                dash.clear_selection()

        drag = dash.drag_state
        if drag is not None:
            st.info(f"当前半径：{round(drag.radius_m)}m")

    vp = dash.viewport
    st.pydeck_chart(
        pdk.Deck(
            layers=_layers(dash),
            initial_view_state=pdk.ViewState(
                longitude=vp.center.longitude,
                latitude=vp.center.latitude,
                zoom=vp.zoom,
            ),
            tooltip={"text": "{title}\n{timestamp}"},
        )
    )

    if dash.path is not None:
        st.caption(f"轨迹：{len(dash.path)} 个点，总长约 {path_length_m(dash.path) / 1000.0:.2f} km")

    current = dash.circle_selection
    if current is not None:
        st.subheader(f"半径 {round(current.radius_m)}m 内的点（共 {len(current.members)} 个）")
        rows = dash.selection_rows()
        st.dataframe(rows, use_container_width=True)
        labels = [f"{r['type']} {r['label']}（{r['distance_m']}m）" for r in rows]
        if labels:
            picked = st.selectbox("定位到", options=range(len(labels)), format_func=lambda i: labels[i])
            if st.button("定位"):
                dash.focus_member(current.members[picked])
                st.rerun()


if __name__ == "__main__":
    main()
