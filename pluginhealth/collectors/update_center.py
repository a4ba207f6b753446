"""Jenkins update center collector.

Fetches an update-center.json document (e.g.
https://updates.jenkins.io/current/update-center.actual.json) and maps each
entry of its `plugins` section onto a `Plugin` record.

Source forms accepted:
  - http(s)://...   fetched with requests
  - file:///...     read from disk
  - a plain path    read from disk

Only `name`, `scm` and `releaseTimestamp` are copied, verbatim. Values are
not normalized or validated; an absent field becomes None.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from urllib.parse import unquote, urlparse

import requests  # pyright: ignore[reportMissingModuleSource]

from pluginhealth.models import Plugin, UpdateCenter

logger = logging.getLogger(__name__)

_HTTP_SCHEMES = {"http", "https"}


def _fetch_text_http(url: str, *, timeout_s: float) -> str:
    headers = {
        "Accept": "application/json",
        "User-Agent": "pluginhealth/0.1 (update-center)",
    }
    try:
        with requests.get(url, headers=headers, timeout=timeout_s) as resp:
            resp.raise_for_status()
            return resp.text
    except requests.HTTPError as e:
        status = e.response.status_code if e.response is not None else "?"
        raise RuntimeError(f"Update center request failed ({status}) for {url}") from e
    except requests.RequestException as e:
        raise RuntimeError(f"Update center request failed (network) for {url}") from e


def _read_text_file(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise RuntimeError(f"Update center file could not be read: {path}") from e


def _fetch_text(source: str, *, timeout_s: float = 30.0) -> str:
    parsed = urlparse(source)
    scheme = parsed.scheme.lower()

    if scheme in _HTTP_SCHEMES:
        return _fetch_text_http(source, timeout_s=timeout_s)
    if scheme == "file":
        return _read_text_file(Path(unquote(parsed.path)))
    # Bare paths, including Windows drive letters which urlparse reads as a scheme.
    if scheme == "" or len(scheme) == 1:
        return _read_text_file(Path(source))

    raise ValueError(f"Refusing to fetch unexpected URL: {source}")


def parse_update_center(text: str, *, source: str = "<string>") -> UpdateCenter:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise RuntimeError(f"Update center response was not valid JSON for {source}") from e

    if not isinstance(payload, dict):
        raise RuntimeError(
            f"Update center response was not valid JSON for {source}: "
            f"expected an object, got {type(payload).__name__}"
        )
    return UpdateCenter.from_json(payload)


def fetch_update_center(source: str, *, timeout_s: float = 30.0) -> UpdateCenter:
    """Retrieve and decode the whole manifest. Nothing is persisted here."""
    logger.info("Fetching update center from %s", source)
    text = _fetch_text(source, timeout_s=timeout_s)
    return parse_update_center(text, source=source)


def _verbatim(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    # Non-string JSON values keep their JSON spelling.
    return json.dumps(value, ensure_ascii=False)


def plugin_from_entry(entry: dict[str, Any]) -> Plugin:
    return Plugin(
        name=_verbatim(entry.get("name")),
        scm=_verbatim(entry.get("scm")),
        release_timestamp=_verbatim(entry.get("releaseTimestamp")),
    )


def collect_update_center_sample() -> UpdateCenter:
    """Small offline manifest for tests / demos."""
    now = datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%S.000Z")
    return UpdateCenter.from_json(
        {
            "connectionCheckUrl": "https://www.google.com/",
            "generationTimestamp": now,
            "id": "default",
            "core": {"name": "core", "version": "2.440"},
            "deprecations": {
                "cucumber-reports": {
                    "url": "https://plugins.jenkins.io/cucumber-reports/#deprecation"
                }
            },
            "plugins": {
                "cucumber-reports": {
                    "name": "cucumber-reports",
                    "scm": "https://github.com/jenkinsci/cucumber-reports-plugin",
                    "releaseTimestamp": "2023-03-20T10:41:51.00Z",
                },
                "workflow-cps": {
                    "name": "workflow-cps",
                    "scm": "https://github.com/jenkinsci/workflow-cps-plugin",
                    "releaseTimestamp": "2024-01-09T15:30:04.00Z",
                },
            },
            "signature": {},
            "updateCenterVersion": "1",
            "warnings": [],
        }
    )
