"""Pytest configuration for depnotifier tests.

Ensures the in-repo `src` directory is on `sys.path` so the package can be
imported without an editable install (`pip install -e .`).
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from depnotifier.models import (  # noqa: E402
    AvailableDependency,
    Dependencies,
    Dependency,
    DependencyAnalysis,
    GradleConfig,
    GradleVersion,
    TrackerIssue,
)


def make_dependency(
    group: str, name: str, version: str, release: str, project_url: str | None = None
) -> Dependency:
    return Dependency(
        group=group,
        name=name,
        version=version,
        available=AvailableDependency(release=release),
        project_url=project_url,
    )


def make_analysis(
    *deps: Dependency,
    running: str | None = None,
    current: str | None = None,
    rc: str | None = None,
) -> DependencyAnalysis:
    gradle = GradleConfig(
        running=GradleVersion(version=running) if running else None,
        current=GradleVersion(version=current, update_available=True) if current else None,
        release_candidate=GradleVersion(version=rc, update_available=True) if rc else None,
    )
    return DependencyAnalysis(outdated=Dependencies(dependencies=list(deps)), gradle=gradle)


class FakeTracker:
    """In-memory stand-in for the GitLab client."""

    def __init__(self, issues: list[TrackerIssue] | None = None, fail_on: str | None = None):
        self.issues = list(issues or [])
        self.fail_on = fail_on
        self.created: list[TrackerIssue] = []
        self.calls: list[str] = []

    def list_issues(self) -> list[TrackerIssue]:
        self.calls.append("list")
        if self.fail_on == "list":
            from depnotifier.gitlab import GitLabAPIError

            raise GitLabAPIError("GitLab API GET failed with 500", status=500)
        return list(self.issues)

    def create_issue(self, issue: TrackerIssue) -> TrackerIssue:
        self.calls.append("create")
        if self.fail_on == "create":
            from depnotifier.gitlab import GitLabAPIError

            raise GitLabAPIError("GitLab API POST failed with 403", status=403)
        self.created.append(issue)
        return TrackerIssue(
            title=issue.title,
            description=issue.description,
            labels=list(issue.labels),
            web_url=f"https://gitlab.test/acme/app/-/issues/{len(self.created)}",
            iid=len(self.created),
        )


SAMPLE_REPORT: dict[str, Any] = {
    "current": {"count": 1, "dependencies": []},
    "exceeded": {"count": 0, "dependencies": []},
    "unresolved": {"count": 0, "dependencies": []},
    "outdated": {
        "count": 2,
        "dependencies": [
            {
                "group": "com.example",
                "name": "lib",
                "version": "1.0",
                "projectUrl": "https://example.com/lib",
                "available": {"release": "2.0", "milestone": None, "integration": None},
            },
            {
                "group": "org.acme",
                "name": "widgets",
                "version": "3.1",
                "available": {"release": None, "milestone": "4.0-M1", "integration": None},
            },
        ],
    },
    "gradle": {
        "enabled": True,
        "running": {"version": "6.0", "isUpdateAvailable": False, "isFailure": False, "reason": ""},
        "current": {"version": "6.5", "isUpdateAvailable": True, "isFailure": False, "reason": ""},
        "releaseCandidate": {
            "version": "6.6-rc-1",
            "isUpdateAvailable": True,
            "isFailure": False,
            "reason": "",
        },
        "nightly": {
            "version": "6.7-20200720",
            "isUpdateAvailable": True,
            "isFailure": False,
            "reason": "",
        },
    },
}


@pytest.fixture
def fake_tracker() -> FakeTracker:
    return FakeTracker()
