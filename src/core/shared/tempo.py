"""Relógio do domínio. Sempre timezone-aware (UTC)."""

from datetime import datetime, timezone


def agora() -> datetime:
    return datetime.now(timezone.utc)
