"""Read the Gradle Versions Plugin ``report.json`` into a ``DependencyAnalysis``.

Only the ``outdated`` and ``gradle`` sections matter here; ``current``,
``exceeded`` and ``unresolved`` are ignored. Nightly Gradle builds are parsed
but never reported as an update.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .models import (
    AvailableDependency,
    Dependencies,
    Dependency,
    DependencyAnalysis,
    GradleConfig,
    GradleVersion,
)


class ReportError(ValueError):
    pass


def _str_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


def _parse_gradle_version(raw: Any) -> GradleVersion | None:
    if not isinstance(raw, dict):
        return None
    return GradleVersion(
        version=str(raw.get("version") or ""),
        update_available=bool(raw.get("isUpdateAvailable", False)),
        reason=_str_or_none(raw.get("reason")),
        is_failure=bool(raw.get("isFailure", False)),
    )


def _parse_dependency(raw: Any) -> Dependency | None:
    if not isinstance(raw, dict):
        return None
    group, name = raw.get("group"), raw.get("name")
    if not isinstance(group, str) or not isinstance(name, str):
        return None
    available_any = raw.get("available")
    available = available_any if isinstance(available_any, dict) else {}
    return Dependency(
        group=group,
        name=name,
        version=str(raw.get("version") or ""),
        available=AvailableDependency(
            release=_str_or_none(available.get("release")),
            milestone=_str_or_none(available.get("milestone")),
            integration=_str_or_none(available.get("integration")),
        ),
        project_url=_str_or_none(raw.get("projectUrl")),
    )


def parse_report(data: Any) -> DependencyAnalysis:
    if not isinstance(data, dict):
        raise ReportError("Dependency report root must be a JSON object")
    outdated_any = data.get("outdated")
    outdated = outdated_any if isinstance(outdated_any, dict) else {}
    entries = outdated.get("dependencies")
    dependencies: list[Dependency] = []
    if isinstance(entries, list):
        for entry in entries:
            dep = _parse_dependency(entry)
            if dep is not None:
                dependencies.append(dep)

    gradle_any = data.get("gradle")
    gradle_raw = gradle_any if isinstance(gradle_any, dict) else {}
    gradle = GradleConfig(
        enabled=bool(gradle_raw.get("enabled", True)),
        running=_parse_gradle_version(gradle_raw.get("running")),
        current=_parse_gradle_version(gradle_raw.get("current")),
        release_candidate=_parse_gradle_version(gradle_raw.get("releaseCandidate")),
        nightly=_parse_gradle_version(gradle_raw.get("nightly")),
    )
    if not gradle.enabled:
        gradle.current = gradle.release_candidate = None
    return DependencyAnalysis(outdated=Dependencies(dependencies=dependencies), gradle=gradle)


def load_report(path: str | Path) -> DependencyAnalysis:
    p = Path(path)
    if not p.exists():
        raise ReportError(f"Dependency report not found: {p}")
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ReportError(f"Dependency report {p} is not valid JSON: {exc}") from exc
    return parse_report(data)


__all__ = ["ReportError", "parse_report", "load_report"]
