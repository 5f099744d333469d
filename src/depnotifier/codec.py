"""Decode previously filed issue bodies back into a ``DependencyAnalysis``.

Issue descriptions are the only record of what has been reported before, so
this module owns the line grammar on the read side (``builder`` owns the write
side). Decoding is lossy: project URLs and checkbox state are not recovered.
Lines that match neither grammar are skipped.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from .models import (
    AvailableDependency,
    Dependency,
    DependencyAnalysis,
    GradleConfig,
    GradleVersion,
    TrackerIssue,
)

GRADLE_DEPENDENCY_NAME = "Gradle"
GRADLE_RC_NAME = "(RC)"

_gradle_re = re.compile(r"^.*`([^`]*)` -> `([^`]*)`.*$")
_dependency_re = re.compile(r"^-.*?`([^`:]+):([^`:]+):\(([^`]*?) -> ([^`]*)\)`.*$")


def _strip_rc_marker(version: str) -> str:
    if version.endswith(GRADLE_RC_NAME):
        return version[: -len(GRADLE_RC_NAME)].rstrip()
    return version


def _decode_gradle_line(gradle: GradleConfig, line: str) -> None:
    m = _gradle_re.match(line)
    if not m:
        return
    gradle.running = GradleVersion(version=m.group(1), update_available=False)
    proposed = m.group(2)
    if GRADLE_RC_NAME in line:
        gradle.release_candidate = GradleVersion(
            version=_strip_rc_marker(proposed), update_available=True
        )
    else:
        gradle.current = GradleVersion(version=proposed, update_available=True)


def _decode_dependency_line(line: str) -> Dependency | None:
    m = _dependency_re.match(line)
    if not m:
        return None
    group, name, version, new_version = m.groups()
    return Dependency(
        group=group,
        name=name,
        version=version,
        available=AvailableDependency(release=new_version),
    )


def decode_issue(text: str | None) -> DependencyAnalysis:
    analysis = DependencyAnalysis()
    for line in (text or "").split("\n"):
        line = line.rstrip("\r")
        if not line:
            continue
        if GRADLE_DEPENDENCY_NAME in line:
            _decode_gradle_line(analysis.gradle, line)
            continue
        dependency = _decode_dependency_line(line)
        if dependency is not None:
            analysis.outdated.dependencies.append(dependency)
    return analysis


def decode_issues(issues: Iterable[TrackerIssue]) -> list[DependencyAnalysis]:
    return [decode_issue(issue.description) for issue in issues]


__all__ = ["decode_issue", "decode_issues", "GRADLE_DEPENDENCY_NAME", "GRADLE_RC_NAME"]
