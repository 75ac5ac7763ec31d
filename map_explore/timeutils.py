"""Time parsing and formatting utilities."""

from __future__ import annotations

from datetime import UTC, datetime, tzinfo

from zoneinfo import ZoneInfo


def tzinfo_from_name(tz_name: str) -> tzinfo:
    """Create tzinfo from an IANA timezone name.

    Args:
        tz_name: Timezone name like "Asia/Dubai".

    Returns:
        tzinfo instance.

    Raises:
        ValueError: If timezone name is invalid on this system.
    """

    try:
        return ZoneInfo(tz_name)
    except Exception as exc:  # ZoneInfo raises KeyError / ZoneInfoNotFoundError (platform dependent)
        raise ValueError(f"无效时区：{tz_name!r}。例如可用：Asia/Dubai") from exc


def parse_timestamp(text: str) -> datetime:
    """Parse an ISO-8601 timestamp to a timezone-aware datetime.

    Supported formats:
      - "2024-02-01T10:00:00Z"
      - "2024-02-01T10:00:00+04:00"
      - "2024-02-01 10:00:00" (no offset: treated as UTC)

    Raises:
        ValueError: If cannot parse.
    """

    s = text.strip()
    if s.endswith(("Z", "z")):
        s = s[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(s)
    except ValueError as exc:
        raise ValueError(f"无法解析时间：{text!r}。建议格式：2024-02-01T10:00:00Z") from exc

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


def format_timestamp(dt: datetime, tz_name: str | None = None) -> str:
    """ISO string, optionally converted to ``tz_name`` first."""

    if tz_name:
        dt = dt.astimezone(tzinfo_from_name(tz_name))
    return dt.isoformat()
