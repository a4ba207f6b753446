from __future__ import annotations

import logging

from pluginhealth.collectors.update_center import fetch_update_center, plugin_from_entry
from pluginhealth.config import require_source
from pluginhealth.models import Plugin, UpdateCenter
from pluginhealth.store import PluginStore

logger = logging.getLogger(__name__)


class IngestionService:
    """Fetch an update center manifest and upsert one record per plugin entry.

    The manifest is fetched and decoded in full before the first write, so a
    network or parse failure leaves the store untouched. Writes are then
    issued one by one; a persistence error propagates and stops the run.

    With `upsert_by_name` (the default) an existing record with the same
    plugin name lends its id to the save, which turns it into a replace.
    Without it every run inserts fresh rows.
    """

    def __init__(self, store: PluginStore, *, upsert_by_name: bool = True) -> None:
        self.store = store
        self.upsert_by_name = upsert_by_name

    def fetch_and_store(self, source_url: str | None, *, timeout_s: float = 30.0) -> list[Plugin]:
        source = require_source(source_url)
        update_center = fetch_update_center(source, timeout_s=timeout_s)
        return self.store_update_center(update_center)

    def store_update_center(self, update_center: UpdateCenter) -> list[Plugin]:
        """Upsert one record per plugin entry of an already decoded manifest."""
        entries = list(update_center.plugin_entries())
        logger.info(
            "Update center %s (generated %s) lists %d plugins",
            update_center.id,
            update_center.generation_timestamp,
            len(entries),
        )

        saved: list[Plugin] = []
        replaced = 0
        deprecated = 0
        for entry in entries:
            plugin = plugin_from_entry(entry)

            if self.upsert_by_name:
                existing = self.store.find_by_name(plugin.name)
                if existing is not None:
                    plugin.id = existing.id
                    replaced += 1

            deprecation_url = update_center.deprecation_url(plugin.name) if plugin.name else None
            if deprecation_url:
                deprecated += 1
                logger.debug("Plugin %s is deprecated: %s", plugin.name, deprecation_url)

            saved.append(self.store.save(plugin))

        logger.info(
            "Stored %d plugins (%d inserted, %d replaced, %d deprecated)",
            len(saved),
            len(saved) - replaced,
            replaced,
            deprecated,
        )
        return saved
