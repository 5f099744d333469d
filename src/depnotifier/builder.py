from __future__ import annotations

from .codec import GRADLE_DEPENDENCY_NAME, GRADLE_RC_NAME
from .config import ConfigError
from .models import DependencyAnalysis, TrackerIssue
from .versions import DEFAULT_COMPARATOR, Ordering, VersionComparator

COUNT_PLACEHOLDER = "%count"


def is_actionable(analysis: DependencyAnalysis) -> bool:
    return analysis.outdated.count > 0 or analysis.gradle.is_update_available()


def render_dependency_lines(analysis: DependencyAnalysis) -> list[str]:
    lines: list[str] = []
    for dep in analysis.outdated:
        line = f"- [ ] `{dep.issue_representation}`"
        if dep.has_project_url:
            line = f"{line} - [{dep.project_url}]({dep.project_url})"
        lines.append(line)
    return lines


def _gradle_target(analysis: DependencyAnalysis) -> tuple[str, bool] | None:
    """Return ``(version, is_release_candidate)`` for the Gradle upgrade on offer."""
    gradle = analysis.gradle
    if gradle.has_current_version_update() and gradle.current is not None:
        return gradle.current.version, False
    if gradle.has_release_candidate_version_update() and gradle.release_candidate is not None:
        return gradle.release_candidate.version, True
    return None


def render_gradle_line(analysis: DependencyAnalysis) -> str | None:
    target = _gradle_target(analysis)
    if target is None:
        return None
    version, is_rc = target
    rendered = f"{version} {GRADLE_RC_NAME}" if is_rc else version
    running = analysis.gradle.running.version if analysis.gradle.running else ""
    return f"- [ ] {GRADLE_DEPENDENCY_NAME} `{running}` -> `{rendered}`"


def has_new_findings(
    baseline: DependencyAnalysis,
    merged: DependencyAnalysis,
    comparator: VersionComparator | None = None,
) -> bool:
    """Return True when ``merged`` reports something ``baseline`` does not.

    A dependency counts as new when its identity is missing from the baseline
    or its target release is ahead of the one already reported. Gradle follows
    the same rule on its target; the running version is ignored, and a stable
    release replacing a reported release candidate is new.
    """
    comparator = comparator or DEFAULT_COMPARATOR
    reported = {dep.key: dep for dep in baseline.outdated}
    for dep in merged.outdated:
        known = reported.get(dep.key)
        if known is None:
            return True
        order = comparator.compare(dep.available.new_release, known.available.new_release)
        if order is Ordering.GREATER:
            return True
    target = _gradle_target(merged)
    if target is None:
        return False
    reported_target = _gradle_target(baseline)
    if reported_target is None:
        return True
    (version, is_rc), (reported_version, reported_rc) = target, reported_target
    if reported_rc and not is_rc:
        return True
    return comparator.compare(version, reported_version) is Ordering.GREATER


def should_notify(
    baseline: DependencyAnalysis,
    merged: DependencyAnalysis,
    comparator: VersionComparator | None = None,
) -> bool:
    return is_actionable(merged) and has_new_findings(baseline, merged, comparator)


def build_issue(
    analysis: DependencyAnalysis, title_template: str | None, label_template: str | None
) -> TrackerIssue | None:
    if not title_template or not title_template.strip():
        raise ConfigError("Issue title template is missing (issue.title)")
    if not label_template or not label_template.strip():
        raise ConfigError("Issue label list is missing (issue.label)")

    dependency_lines = render_dependency_lines(analysis)
    gradle_line = render_gradle_line(analysis)
    if not dependency_lines and not gradle_line:
        return None

    count = len(dependency_lines) + (1 if gradle_line else 0)
    body = "\n".join(dependency_lines)
    if gradle_line:
        body += ("\n\n" if dependency_lines else "") + gradle_line
    return TrackerIssue(
        title=title_template.replace(COUNT_PLACEHOLDER, str(count)),
        description=body,
        labels=label_template.split(","),
    )


__all__ = [
    "COUNT_PLACEHOLDER",
    "is_actionable",
    "render_dependency_lines",
    "render_gradle_line",
    "has_new_findings",
    "should_notify",
    "build_issue",
]
