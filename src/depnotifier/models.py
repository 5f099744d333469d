"""In-memory records shared by the codec, merger, builder and tracker client.

Everything here lives for the duration of a single notification run; nothing
is persisted. ``Dependency`` identity is ``(group, name)`` only; the version is
not part of it.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field


@dataclass
class AvailableDependency:
    release: str | None = None
    milestone: str | None = None
    integration: str | None = None

    @property
    def new_release(self) -> str | None:
        """Newest known version, preferring release over milestone over integration."""
        for candidate in (self.release, self.milestone, self.integration):
            if candidate:
                return candidate
        return None


@dataclass(eq=False)
class Dependency:
    group: str
    name: str
    version: str
    available: AvailableDependency = field(default_factory=AvailableDependency)
    project_url: str | None = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.group, self.name)

    @property
    def has_project_url(self) -> bool:
        return bool(self.project_url)

    @property
    def issue_representation(self) -> str:
        return f"{self.group}:{self.name}:({self.version} -> {self.available.new_release})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dependency):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)


@dataclass
class Dependencies:
    dependencies: list[Dependency] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.dependencies)

    def __iter__(self) -> Iterator[Dependency]:
        return iter(self.dependencies)


@dataclass
class GradleVersion:
    version: str = ""
    update_available: bool = False
    reason: str | None = None
    is_failure: bool = False


@dataclass
class GradleConfig:
    enabled: bool = True
    running: GradleVersion | None = None
    current: GradleVersion | None = None
    release_candidate: GradleVersion | None = None
    nightly: GradleVersion | None = None

    @staticmethod
    def _offers_update(candidate: GradleVersion | None) -> bool:
        return bool(candidate and candidate.update_available and candidate.version)

    def has_current_version_update(self) -> bool:
        return self._offers_update(self.current)

    def has_release_candidate_version_update(self) -> bool:
        return self._offers_update(self.release_candidate)

    def is_update_available(self) -> bool:
        return self.has_current_version_update() or self.has_release_candidate_version_update()


@dataclass
class DependencyAnalysis:
    outdated: Dependencies = field(default_factory=Dependencies)
    gradle: GradleConfig = field(default_factory=GradleConfig)


@dataclass
class TrackerIssue:
    title: str
    description: str
    labels: list[str] = field(default_factory=list)
    web_url: str | None = None
    iid: int | None = None


__all__ = [
    "AvailableDependency",
    "Dependency",
    "Dependencies",
    "GradleVersion",
    "GradleConfig",
    "DependencyAnalysis",
    "TrackerIssue",
]
