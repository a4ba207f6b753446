"""Data shapes for update center ingestion.

`UpdateCenter` is the transient, in-memory view of one fetched
update-center.json document. Only the top-level metadata is typed; the
nested sections (core, plugins, deprecations, ...) stay opaque JSON values
because ingestion only walks `plugins` (and peeks at `deprecations`).

`Plugin` is the persisted record, one row in the `plugins` table.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from sqlalchemy import Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class Plugin(Base):
    __tablename__ = "plugins"

    id: Mapped[int | None] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str | None] = mapped_column(String, nullable=True)
    scm: Mapped[str | None] = mapped_column(String, nullable=True)
    release_timestamp: Mapped[str | None] = mapped_column(String, nullable=True)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "scm": self.scm,
            "release_timestamp": self.release_timestamp,
        }

    def __repr__(self) -> str:
        return (
            f"Plugin(id={self.id!r}, name={self.name!r}, scm={self.scm!r}, "
            f"release_timestamp={self.release_timestamp!r})"
        )


def _str_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None


@dataclass(frozen=True)
class UpdateCenter:
    connection_check_url: str | None = None
    generation_timestamp: str | None = None
    id: str | None = None
    core: Any = None
    deprecations: Any = None
    plugins: Any = None
    signature: Any = None
    update_center_version: Any = None
    warnings: Any = None

    @classmethod
    def from_json(cls, payload: dict[str, Any]) -> UpdateCenter:
        # Unknown top-level keys are ignored.
        return cls(
            connection_check_url=_str_or_none(payload.get("connectionCheckUrl")),
            generation_timestamp=_str_or_none(payload.get("generationTimestamp")),
            id=_str_or_none(payload.get("id")),
            core=payload.get("core"),
            deprecations=payload.get("deprecations"),
            plugins=payload.get("plugins"),
            signature=payload.get("signature"),
            update_center_version=payload.get("updateCenterVersion"),
            warnings=payload.get("warnings"),
        )

    def plugin_entries(self) -> Iterator[dict[str, Any]]:
        """Yield plugin objects in document order.

        The real update center keys plugins by name; a bare list is accepted
        as well. Entries that are not JSON objects are skipped.
        """
        if isinstance(self.plugins, dict):
            entries: Any = self.plugins.values()
        elif isinstance(self.plugins, list):
            entries = self.plugins
        else:
            return
        for entry in entries:
            if isinstance(entry, dict):
                yield entry

    def deprecation_url(self, plugin_name: str) -> str | None:
        if not isinstance(self.deprecations, dict):
            return None
        entry = self.deprecations.get(plugin_name)
        if isinstance(entry, dict):
            return _str_or_none(entry.get("url"))
        return None
