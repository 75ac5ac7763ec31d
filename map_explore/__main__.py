"""Module entry point: python -m map_explore ..."""

from __future__ import annotations

from map_explore.cli import main


if __name__ == "__main__":
    raise SystemExit(main())


