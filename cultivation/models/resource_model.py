# cultivation/models/resource_model.py
from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any


@dataclass(frozen=True)
class CacheEntry:
    """Launcher resources cached for a single client version."""

    version: str
    metadata_backup_link: str | None = None
    fetched_at: str | None = None  # ISO-8601

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CacheEntry:
        return cls(
            version=str(data["version"]),
            metadata_backup_link=data.get("metadata_backup_link") or None,
            fetched_at=data.get("fetched_at"),
        )
