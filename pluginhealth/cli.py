# cli.py

from __future__ import annotations

import argparse
import json
import logging

from sqlalchemy.exc import SQLAlchemyError

from pluginhealth.collectors.update_center import collect_update_center_sample
from pluginhealth.config import ConfigError, Settings
from pluginhealth.logging_setup import setup_logging
from pluginhealth.service import IngestionService
from pluginhealth.store import create_store
from pluginhealth.workflows import list_workflow_uses

logger = logging.getLogger(__name__)


def _cmd_ingest(args: argparse.Namespace, settings: Settings) -> int:
    store = create_store(settings.database_url)
    service = IngestionService(store, upsert_by_name=not args.by_id)

    if args.sample:
        saved = service.store_update_center(collect_update_center_sample())
        print(f"Stored {len(saved)} plugins from the offline sample")
        return 0

    saved = service.fetch_and_store(settings.update_center_url, timeout_s=float(args.timeout_s))
    print(f"Stored {len(saved)} plugins from {settings.update_center_url}")
    return 0


def _cmd_plugins(args: argparse.Namespace, settings: Settings) -> int:
    store = create_store(settings.database_url)
    plugins = store.find_all()

    if args.json:
        print(json.dumps([p.to_dict() for p in plugins], indent=2, ensure_ascii=False))
    else:
        for p in plugins:
            print(f"{p.id:>6}  {p.name}  {p.release_timestamp or '-'}  {p.scm or '-'}")
        print(f"{len(plugins)} plugins")
    return 0


def _cmd_workflows(args: argparse.Namespace, settings: Settings) -> int:
    uses = list_workflow_uses(settings.workflows_dir)

    if args.json:
        print(json.dumps(uses, indent=2, ensure_ascii=False))
    else:
        for ref in uses:
            print(ref)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="pluginhealth",
        description="Jenkins plugin health: update center ingestion and workflow inspection",
    )
    p.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: $PLUGINHEALTH_LOG_LEVEL or INFO)",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    ingest = sub.add_parser("ingest", help="Fetch the update center and upsert plugin records")
    ingest.add_argument(
        "--source",
        default=None,
        help="Update center URL or local path (default: $PLUGINHEALTH_UPDATE_CENTER_URL)",
    )
    ingest.add_argument(
        "--database-url",
        default=None,
        help="SQLAlchemy database URL (default: $PLUGINHEALTH_DATABASE_URL)",
    )
    ingest.add_argument("--timeout-s", default=30.0, help="Network timeout for the fetch")
    ingest.add_argument(
        "--by-id",
        action="store_true",
        help="Always insert new rows instead of replacing records with the same name",
    )
    ingest.add_argument(
        "--sample",
        action="store_true",
        help="Ingest a small built-in manifest instead of fetching (no network)",
    )
    ingest.set_defaults(func=_cmd_ingest)

    plugins = sub.add_parser("plugins", help="List stored plugin records")
    plugins.add_argument(
        "--database-url",
        default=None,
        help="SQLAlchemy database URL (default: $PLUGINHEALTH_DATABASE_URL)",
    )
    plugins.add_argument("--json", action="store_true", help="Output JSON instead of text")
    plugins.set_defaults(func=_cmd_plugins)

    workflows = sub.add_parser(
        "workflows", help="List reusable workflows referenced by jobs in a workflows directory"
    )
    workflows.add_argument(
        "--dir",
        default=None,
        help="Workflows directory (default: $PLUGINHEALTH_WORKFLOWS_DIR or .github/workflows)",
    )
    workflows.add_argument("--json", action="store_true", help="Output JSON instead of text")
    workflows.set_defaults(func=_cmd_workflows)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = Settings.from_env().with_overrides(
        update_center_url=getattr(args, "source", None),
        database_url=getattr(args, "database_url", None),
        workflows_dir=getattr(args, "dir", None),
        log_level=args.log_level.upper() if args.log_level else None,
    )
    setup_logging(settings.log_level)

    try:
        return int(args.func(args, settings))
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
    except (RuntimeError, ValueError) as e:
        logger.error("%s failed: %s", args.cmd, e)
    except SQLAlchemyError as e:
        logger.error("%s failed: database error: %s", args.cmd, e)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
