from __future__ import annotations

import logging
from pathlib import Path

from sqlalchemy import create_engine, select
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker

from pluginhealth.models import Base, Plugin

logger = logging.getLogger(__name__)


class PluginStore:
    """Explicit repository over the `plugins` table.

    Every call opens its own session and commits on success, so each write
    is independent; there is no transaction spanning several saves.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def find_all(self) -> list[Plugin]:
        with self._session_factory() as session:
            return list(session.scalars(select(Plugin).order_by(Plugin.id)))

    def find_by_name(self, name: str | None) -> Plugin | None:
        if name is None:
            return None
        with self._session_factory() as session:
            stmt = select(Plugin).where(Plugin.name == name).order_by(Plugin.id).limit(1)
            return session.scalars(stmt).first()

    def save(self, plugin: Plugin) -> Plugin:
        """Insert when `plugin.id` is unset (None or 0), replace the row with that id otherwise."""
        with self._session_factory() as session, session.begin():
            if not plugin.id:
                record = Plugin(
                    name=plugin.name,
                    scm=plugin.scm,
                    release_timestamp=plugin.release_timestamp,
                )
                session.add(record)
            else:
                record = session.merge(
                    Plugin(
                        id=plugin.id,
                        name=plugin.name,
                        scm=plugin.scm,
                        release_timestamp=plugin.release_timestamp,
                    )
                )
            session.flush()
        logger.debug("Saved %r", record)
        return record


def _ensure_sqlite_parent(database_url: str) -> None:
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return
    db = url.database
    if db and db != ":memory:" and not db.startswith("file:"):
        Path(db).parent.mkdir(parents=True, exist_ok=True)


def create_store(database_url: str, *, echo: bool = False) -> PluginStore:
    """Build an engine for `database_url`, create the schema and return a store."""
    _ensure_sqlite_parent(database_url)
    engine = create_engine(database_url, echo=echo)
    Base.metadata.create_all(engine)
    return PluginStore(sessionmaker(engine, expire_on_commit=False))
