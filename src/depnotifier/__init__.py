"""depnotifier - file deduplicated GitLab issues for outdated Gradle dependencies.

High-level public API:

from depnotifier import Notifier, IssueSettings, load_report

fresh = load_report('build/dependencyUpdates/report.json')
notifier = Notifier(tracker, IssueSettings(title='Updates (%count)', label='dependencies'))
result = notifier.run(fresh)
print(result.state, result.created)

The CLI (``depnotifier notify``) wires this together with ``load_config`` and
``GitLabClient``.
"""

from __future__ import annotations

from .builder import build_issue, should_notify
from .codec import decode_issue
from .config import NotifierConfig, load_config
from .merge import fold_analyses, merge_analyses, merge_with_report
from .models import DependencyAnalysis, TrackerIssue
from .notifier import IssueSettings, NotificationResult, Notifier, RunState
from .report import load_report

__version__ = "0.1.0"

__all__ = [
    "load_config",
    "NotifierConfig",
    "load_report",
    "decode_issue",
    "merge_analyses",
    "fold_analyses",
    "merge_with_report",
    "build_issue",
    "should_notify",
    "DependencyAnalysis",
    "TrackerIssue",
    "Notifier",
    "IssueSettings",
    "NotificationResult",
    "RunState",
    "__version__",
]
