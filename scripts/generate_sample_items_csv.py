from __future__ import annotations

import argparse
import csv
import random
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from pathlib import Path


@dataclass(frozen=True, slots=True)
class Cluster:
    name: str
    lat: float
    lon: float


CLUSTERS = [
    Cluster("Burj Khalifa", 25.2048, 55.2744),
    Cluster("Dubai Marina", 25.0806, 55.1367),
    Cluster("Business Bay", 25.1872, 55.2644),
    Cluster("Dubai Creek", 25.2485, 55.3241),
    Cluster("Palm Jumeirah", 25.1123, 55.1384),
]


def generate_items(
    *,
    ids: int,
    per_id: int,
    seed: int,
    start: datetime,
) -> list[dict[str, str]]:
    """Generate fake items.csv rows: each id wanders between clusters."""

    rng = random.Random(seed)
    out: list[dict[str, str]] = []

    for n in range(1, ids + 1):
        cur = start + timedelta(minutes=rng.uniform(0, 120))
        cluster = rng.choice(CLUSTERS)
        for _ in range(per_id):
            # Occasionally move to another cluster
            if rng.random() < 0.25:
                cluster = rng.choice(CLUSTERS)
            lat = cluster.lat + rng.uniform(-0.004, 0.004)
            lon = cluster.lon + rng.uniform(-0.004, 0.004)
            cur = cur + timedelta(minutes=rng.uniform(10, 90))
            out.append(
                {
                    "id": str(n),
                    "longitude": f"{lon:.6f}",
                    "latitude": f"{lat:.6f}",
                    "timestamp": cur.isoformat().replace("+00:00", "Z"),
                }
            )

    # rows are written shuffled on purpose: path building must sort by time
    rng.shuffle(out)
    return out


def main() -> int:
    p = argparse.ArgumentParser(description="Generate fake items.csv / points.csv for demo/testing.")
    p.add_argument("--out-dir", type=str, default="sample_data", help="Output directory")
    p.add_argument("--ids", type=int, default=5, help="Number of distinct item ids")
    p.add_argument("--per-id", type=int, default=20, help="Rows per item id")
    p.add_argument("--seed", type=int, default=42, help="Random seed (reproducible)")
    p.add_argument("--start", type=str, default="2024-02-01 08:00:00", help="Start time (UTC)")
    args = p.parse_args()

    start = datetime.fromisoformat(args.start).replace(tzinfo=UTC)
    rows = generate_items(ids=args.ids, per_id=args.per_id, seed=args.seed, start=start)

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    items_path = out_dir / "items.csv"
    with items_path.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=["id", "longitude", "latitude", "timestamp"])
        w.writeheader()
        w.writerows(rows)

    points_path = out_dir / "points.csv"
    with points_path.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=["name", "longitude", "latitude"])
        w.writeheader()
        for c in CLUSTERS:
            w.writerow({"name": c.name, "longitude": f"{c.lon:.6f}", "latitude": f"{c.lat:.6f}"})

    print(f"Generated: {items_path} (rows={len(rows)}, seed={args.seed}), {points_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
