"""Notification run orchestration.

A run moves through ``INIT -> FETCHED -> DONE``; any exception moves it to
``FAILED`` and is re-raised unchanged. There is no retry and no partial
state: the only tracker write is the final ``create_issue`` call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .builder import build_issue, should_notify
from .codec import decode_issues
from .errors import redact
from .gitlab import IssueTracker
from .logging import StructuredLogger, get_logger
from .merge import fold_analyses, merge_analyses
from .models import DependencyAnalysis, TrackerIssue
from .versions import DEFAULT_COMPARATOR, VersionComparator


class RunState(str, Enum):
    INIT = "init"
    FETCHED = "fetched"
    DONE = "done"
    FAILED = "failed"


@dataclass
class IssueSettings:
    title: str | None
    label: str | None


@dataclass
class NotificationResult:
    state: RunState = RunState.INIT
    baseline: DependencyAnalysis = field(default_factory=DependencyAnalysis)
    merged: DependencyAnalysis = field(default_factory=DependencyAnalysis)
    issue: TrackerIssue | None = None
    created: TrackerIssue | None = None
    existing_issues: int = 0

    @property
    def notified(self) -> bool:
        return self.created is not None


class Notifier:
    def __init__(
        self,
        tracker: IssueTracker,
        settings: IssueSettings,
        *,
        comparator: VersionComparator | None = None,
        logger: StructuredLogger | None = None,
        dry_run: bool = False,
    ) -> None:
        self.tracker = tracker
        self.settings = settings
        self.comparator = comparator or DEFAULT_COMPARATOR
        self.logger = logger or get_logger()
        self.dry_run = dry_run

    def _transition(self, result: NotificationResult, state: RunState) -> None:
        result.state = state
        self.logger.log_state(state.value)

    def _fetch(self, result: NotificationResult, fresh: DependencyAnalysis) -> None:
        with self.logger.timed_operation("list_issues"):
            issues = self.tracker.list_issues()
        result.existing_issues = len(issues)
        analyses = decode_issues(issues)
        for issue, analysis in zip(issues, analyses):
            if analysis.outdated.count == 0 and analysis.gradle.running is None:
                self.logger.warning(
                    "Open issue has no recognisable dependency lines",
                    issue_iid=issue.iid,
                    web_url=issue.web_url,
                )
        result.baseline = fold_analyses(analyses, self.comparator)
        result.merged = merge_analyses(result.baseline, fresh, self.comparator)
        self.logger.log_operation(
            "baseline_merged",
            existing_issues=result.existing_issues,
            baseline_count=result.baseline.outdated.count,
            merged_count=result.merged.outdated.count,
        )

    def _notify(self, result: NotificationResult) -> None:
        if not should_notify(result.baseline, result.merged, self.comparator):
            self.logger.info("No new dependency updates to report", decision="skip")
            return
        result.issue = build_issue(result.merged, self.settings.title, self.settings.label)
        if result.issue is None:
            self.logger.info("Nothing renderable to report", decision="skip")
            return
        if self.dry_run:
            self.logger.log_issue_action("create", result.issue.title, dry_run=True)
            return
        with self.logger.timed_operation("create_issue"):
            result.created = self.tracker.create_issue(result.issue)
        self.logger.log_issue_action(
            "created", result.created.title or result.issue.title, web_url=result.created.web_url
        )

    def run(self, fresh: DependencyAnalysis) -> NotificationResult:
        result = NotificationResult()
        self._transition(result, RunState.INIT)
        try:
            self._fetch(result, fresh)
            self._transition(result, RunState.FETCHED)
            self._notify(result)
        except Exception as exc:
            self._transition(result, RunState.FAILED)
            self.logger.log_error("dependency notification failed", error=redact(str(exc)))
            raise
        self._transition(result, RunState.DONE)
        return result


__all__ = ["RunState", "IssueSettings", "NotificationResult", "Notifier"]
