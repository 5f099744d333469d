"""Error taxonomy & redaction for run failures.

The notifier never recovers from collaborator failures; this module only
prepares them for safe reporting. ``classify_error`` maps an exception to a
coarse category and ``redact`` strips access tokens before anything is
printed or logged.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from .config import ConfigError
from .gitlab import GitLabAPIError
from .report import ReportError

_SENSITIVE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"glpat-[A-Za-z0-9_\-]{20,}"),  # GitLab personal access tokens
    re.compile(r"gl(?:cbt|dt|ptt|rt|soat)-[A-Za-z0-9_\-]{20,}"),  # other GitLab token kinds
    re.compile(r"(PRIVATE-TOKEN['\"]?\s*[:=]\s*['\"]?)[^\s'\",}]+", re.IGNORECASE),
]

_REDACTION_PLACEHOLDER = "<redacted>"

HTTP_UNAUTHORIZED = 401
HTTP_FORBIDDEN = 403
HTTP_NOT_FOUND = 404


@dataclass
class ErrorInfo:
    category: str
    message: str
    original_type: str
    transient: bool = False
    details: dict[str, Any] | None = None


def redact(text: str) -> str:
    """Redact sensitive tokens in arbitrary text."""
    if not text:
        return text
    redacted = text
    for pat in _SENSITIVE_PATTERNS:
        if pat.groups:
            redacted = pat.sub(lambda m: m.group(1) + _REDACTION_PLACEHOLDER, redacted)
        else:
            redacted = pat.sub(_REDACTION_PLACEHOLDER, redacted)
    return redacted


def classify_error(exc: BaseException) -> ErrorInfo:
    """Best-effort classification of a run failure.

    - GitLab 401/403 -> 'gitlab.auth'
    - GitLab 404 -> 'gitlab.not_found'
    - GitLab errors without a status, or network-y keywords -> 'network', transient
    - Config / report problems -> 'config' / 'parse'
    - Fallback -> 'generic'
    """
    msg = redact(str(exc) if exc else "")
    low = msg.lower()
    name = exc.__class__.__name__

    if isinstance(exc, GitLabAPIError):
        details = {"status": exc.status} if exc.status is not None else None
        if exc.status in (HTTP_UNAUTHORIZED, HTTP_FORBIDDEN):
            return ErrorInfo("gitlab.auth", msg, name, details=details)
        if exc.status == HTTP_NOT_FOUND:
            return ErrorInfo("gitlab.not_found", msg, name, details=details)
        if exc.status is None:
            return ErrorInfo("network", msg, name, transient=True)
        return ErrorInfo("gitlab.api", msg, name, transient=exc.status >= 500, details=details)
    if isinstance(exc, ConfigError):
        return ErrorInfo("config", msg, name)
    if isinstance(exc, ReportError):
        return ErrorInfo("parse", msg, name)
    if any(k in low for k in ("timeout", "timed out", "connection reset", "temporarily unavailable")):
        return ErrorInfo("network", msg, name, transient=True)
    return ErrorInfo("generic", msg, name)


__all__ = ["ErrorInfo", "classify_error", "redact"]
