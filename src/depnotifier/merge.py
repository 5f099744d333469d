"""Fold several dependency analyses into one deduplicated analysis.

Merging is pairwise: ``older`` is folded into ``newer`` and ``newer`` wins
unless ``older`` knows about a further-ahead upgrade target for the same
``(group, name)``. Exactly one entry per identity survives. Inputs are never
mutated.
"""

from __future__ import annotations

from collections.abc import Iterable
from functools import reduce

from .models import Dependencies, Dependency, DependencyAnalysis, GradleConfig, GradleVersion
from .versions import DEFAULT_COMPARATOR, Ordering, VersionComparator


def _prefer(
    incumbent: Dependency, challenger: Dependency, comparator: VersionComparator
) -> Dependency:
    """Keep ``incumbent`` unless ``challenger`` targets a strictly newer release."""
    order = comparator.compare(incumbent.available.new_release, challenger.available.new_release)
    return challenger if order is Ordering.LESS else incumbent


def _index(
    dependencies: Iterable[Dependency], comparator: VersionComparator
) -> dict[tuple[str, str], Dependency]:
    out: dict[tuple[str, str], Dependency] = {}
    for dep in dependencies:
        seen = out.get(dep.key)
        out[dep.key] = dep if seen is None else _prefer(seen, dep, comparator)
    return out


def _prefer_gradle_target(
    older: GradleVersion | None,
    newer: GradleVersion | None,
    running_version: str | None,
    comparator: VersionComparator,
) -> GradleVersion | None:
    """Keep the further-ahead target; ``older`` only survives while ahead of running."""
    if newer is not None and not newer.update_available:
        return newer
    if older is None or comparator.compare(older.version, running_version) is not Ordering.GREATER:
        return newer
    if newer is None or comparator.compare(newer.version, older.version) is Ordering.LESS:
        return older
    return newer


def _merge_gradle(
    older: GradleConfig, newer: GradleConfig, comparator: VersionComparator
) -> GradleConfig:
    running = newer.running or older.running
    running_version = running.version if running else None
    return GradleConfig(
        enabled=newer.enabled,
        running=running,
        current=_prefer_gradle_target(older.current, newer.current, running_version, comparator),
        release_candidate=_prefer_gradle_target(
            older.release_candidate, newer.release_candidate, running_version, comparator
        ),
        nightly=newer.nightly or older.nightly,
    )


def merge_analyses(
    older: DependencyAnalysis,
    newer: DependencyAnalysis,
    comparator: VersionComparator | None = None,
) -> DependencyAnalysis:
    comparator = comparator or DEFAULT_COMPARATOR
    merged = _index(newer.outdated, comparator)
    carried: dict[tuple[str, str], Dependency] = {}
    for dep in older.outdated:
        if dep.key in merged:
            merged[dep.key] = _prefer(merged[dep.key], dep, comparator)
        elif dep.key in carried:
            carried[dep.key] = _prefer(carried[dep.key], dep, comparator)
        else:
            carried[dep.key] = dep
    outdated = Dependencies(dependencies=[*merged.values(), *carried.values()])
    return DependencyAnalysis(
        outdated=outdated,
        gradle=_merge_gradle(older.gradle, newer.gradle, comparator),
    )


def fold_analyses(
    analyses: Iterable[DependencyAnalysis],
    comparator: VersionComparator | None = None,
) -> DependencyAnalysis:
    return reduce(
        lambda acc, item: merge_analyses(acc, item, comparator),
        analyses,
        DependencyAnalysis(),
    )


def merge_with_report(
    existing: Iterable[DependencyAnalysis],
    fresh: DependencyAnalysis,
    comparator: VersionComparator | None = None,
) -> DependencyAnalysis:
    """Fold ``existing`` then merge ``fresh`` last so it wins ties."""
    return merge_analyses(fold_analyses(existing, comparator), fresh, comparator)


__all__ = ["merge_analyses", "fold_analyses", "merge_with_report"]
