"""Reusable-workflow references in GitHub Actions workflow files.

A workflow job can delegate to another workflow:

  jobs:
    build:
      uses: jenkins-infra/github-reusable-workflows/.github/workflows/maven-cd.yml@v1

`list_workflow_uses` scans one directory (not recursively) and returns those
`uses` strings. Jobs without `uses` contribute nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from pluginhealth.config import DEFAULT_WORKFLOWS_DIR

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkflowJobDefinition:
    uses: str | None = None

    @classmethod
    def from_yaml(cls, data: Any) -> WorkflowJobDefinition:
        if not isinstance(data, dict):
            return cls()
        uses = data.get("uses")
        return cls(uses=uses if isinstance(uses, str) else None)


@dataclass(frozen=True)
class WorkflowDefinition:
    jobs: dict[str, WorkflowJobDefinition] = field(default_factory=dict)

    @classmethod
    def from_yaml(cls, data: Any) -> WorkflowDefinition:
        if not isinstance(data, dict):
            return cls()
        jobs = data.get("jobs")
        if not isinstance(jobs, dict):
            return cls()
        return cls(jobs={str(k): WorkflowJobDefinition.from_yaml(v) for k, v in jobs.items()})


def read_workflow_definition(path: str | Path) -> WorkflowDefinition:
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise RuntimeError(f"Workflow file is not valid YAML: {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise RuntimeError(f"Workflow file could not be read: {path}") from e
    return WorkflowDefinition.from_yaml(data)


def _workflow_files(directory: Path) -> list[Path]:
    # Sorted so the output order does not depend on the filesystem.
    return sorted(p for p in directory.iterdir() if p.is_file())


def list_workflow_uses(directory: str | Path = DEFAULT_WORKFLOWS_DIR) -> list[str]:
    directory = Path(directory)
    try:
        files = _workflow_files(directory)
    except OSError as e:
        logger.error("Could not read %s: %s", directory, e)
        return []

    uses: list[str] = []
    for path in files:
        definition = read_workflow_definition(path)
        for job in definition.jobs.values():
            if job.uses and job.uses.strip():
                uses.append(job.uses)
    return uses
