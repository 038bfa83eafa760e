"""Cooperative cancellation for paginated listings."""

from datetime import UTC, datetime

from adminrbac.domain.exceptions import DeadlineExceeded


def check_deadline(deadline: datetime | None, what: str = "listing") -> None:
    """Raise DeadlineExceeded if ``deadline`` (timezone-aware) has passed."""
    if deadline is None:
        return
    if datetime.now(UTC) >= deadline:
        raise DeadlineExceeded(f"Deadline passed during {what}")


def clamp_limit(limit: int | None, default: int = 20, maximum: int = 100) -> int:
    if not limit:
        return default
    return min(max(limit, 1), maximum)
