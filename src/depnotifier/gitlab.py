from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol
from urllib.parse import quote

import requests

from .models import TrackerIssue

DEFAULT_API_URL = "https://gitlab.com/api/v4"
USER_AGENT = "depnotifier-rest/0.1.0"
HTTP_ERROR_STATUS = 400
REQUEST_TIMEOUT = 30


class GitLabAPIError(RuntimeError):
    """Raised when the GitLab REST API returns an error or cannot be reached."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        response_text: str | None = None,
    ):
        super().__init__(message)
        self.status = status
        self.response_text = response_text


class IssueTracker(Protocol):
    def list_issues(self) -> list[TrackerIssue]: ...

    def create_issue(self, issue: TrackerIssue) -> TrackerIssue: ...


def _issue_from_payload(entry: dict[str, Any]) -> TrackerIssue:
    labels_any = entry.get("labels")
    labels = [str(lbl) for lbl in labels_any] if isinstance(labels_any, list) else []
    iid = entry.get("iid")
    return TrackerIssue(
        title=str(entry.get("title") or ""),
        description=str(entry.get("description") or ""),
        labels=labels,
        web_url=entry.get("web_url") if isinstance(entry.get("web_url"), str) else None,
        iid=iid if isinstance(iid, int) else None,
    )


@dataclass
class GitLabClient:
    """Minimal GitLab issues client: list open issues and create one."""

    token: str
    project_id: str
    base_url: str = DEFAULT_API_URL
    labels: str | None = None
    session: requests.Session | None = None
    _session: requests.Session = field(init=False, repr=False)

    def __post_init__(self) -> None:  # pragma: no cover - simple wiring
        self._session = self.session or requests.Session()
        self._session.headers.setdefault("PRIVATE-TOKEN", self.token)
        self._session.headers.setdefault("Accept", "application/json")
        self._session.headers.setdefault("User-Agent", USER_AGENT)

    @property
    def _project_path(self) -> str:
        return f"/projects/{quote(str(self.project_id), safe='')}"

    # ---- REST helpers -------------------------------------------------
    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: Any | None = None,
    ) -> Any:
        url = f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"
        try:
            response = self._session.request(
                method,
                url,
                params=params,
                json=json_body,
                headers=self._session.headers,
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as exc:
            raise GitLabAPIError(f"GitLab API {method} {url} failed: {exc}") from exc
        if response.status_code >= HTTP_ERROR_STATUS:
            raise GitLabAPIError(
                f"GitLab API {method} {url} failed with {response.status_code}",
                status=response.status_code,
                response_text=response.text,
            )
        if not response.text:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise GitLabAPIError(
                f"GitLab API {method} {url} returned non-JSON content",
                status=response.status_code,
                response_text=response.text,
            ) from exc

    def _paginate(self, path: str, *, params: dict[str, Any] | None = None) -> list[Any]:
        params = dict(params or {})
        per_page = params.setdefault("per_page", 100)
        params.setdefault("page", 1)
        results: list[Any] = []
        while True:
            data = self._request("GET", path, params=params)
            if not isinstance(data, list):
                break
            results.extend(data)
            if len(data) < per_page:
                break
            params["page"] = params.get("page", 1) + 1
        return results

    # ---- Issue operations --------------------------------------------
    def list_issues(self) -> list[TrackerIssue]:
        # Oldest first so newer issues are folded last
        params: dict[str, Any] = {
            "state": "opened",
            "order_by": "created_at",
            "sort": "asc",
            "per_page": 100,
            "page": 1,
        }
        if self.labels:
            params["labels"] = self.labels
        data = self._paginate(f"{self._project_path}/issues", params=params)
        return [_issue_from_payload(entry) for entry in data if isinstance(entry, dict)]

    def create_issue(self, issue: TrackerIssue) -> TrackerIssue:
        payload: dict[str, Any] = {"title": issue.title, "description": issue.description}
        if issue.labels:
            payload["labels"] = ",".join(issue.labels)
        data = self._request("POST", f"{self._project_path}/issues", json_body=payload)
        if not isinstance(data, dict):
            raise GitLabAPIError("GitLab API returned an unexpected issue payload")
        created = _issue_from_payload(data)
        if not created.title:
            created.title = issue.title
        if not created.description:
            created.description = issue.description
        if not created.labels:
            created.labels = list(issue.labels)
        return created


__all__ = ["GitLabAPIError", "GitLabClient", "IssueTracker"]
