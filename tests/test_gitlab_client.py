import json
from dataclasses import dataclass
from typing import Any

import pytest
import requests

from depnotifier.gitlab import GitLabAPIError, GitLabClient
from depnotifier.models import TrackerIssue


@dataclass
class _DummyResponse:
    status_code: int
    payload: Any

    def json(self) -> Any:
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload

    @property
    def text(self) -> str:
        payload = self.payload
        if isinstance(payload, (dict, list)):
            return json.dumps(payload)
        if payload is None:
            return ""
        return str(payload)


class _DummySession:
    def __init__(self, responses: list[Any]):
        self._responses = responses
        self.request_log: list[tuple[str, str, dict[str, Any]]] = []
        self.headers: dict[str, str] = {}

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str],
        json: Any | None = None,
        params: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> _DummyResponse:
        self.request_log.append(
            (method, url, {"headers": dict(headers), "json": json, "params": dict(params or {})})
        )
        if not self._responses:
            raise AssertionError("No response queued for request")
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def _client(session: _DummySession, **kwargs: Any) -> GitLabClient:
    return GitLabClient(
        token="tkn",
        project_id=kwargs.pop("project_id", "1"),
        base_url="https://gitlab.test/api/v4",
        session=session,  # type: ignore[arg-type]
        **kwargs,
    )


def test_client_sets_private_token_header() -> None:
    session = _DummySession([_DummyResponse(200, [])])
    _client(session).list_issues()
    headers = session.request_log[0][2]["headers"]
    assert headers["PRIVATE-TOKEN"] == "tkn"
    assert headers["User-Agent"].startswith("depnotifier")


def test_create_issue_posts_comma_joined_labels() -> None:
    session = _DummySession(
        [
            _DummyResponse(
                201,
                {
                    "iid": 7,
                    "title": "Updates (1)",
                    "description": "- [ ] `a:b:(1 -> 2)`",
                    "labels": ["dependencies", "maintenance"],
                    "web_url": "https://gitlab.test/acme/app/-/issues/7",
                },
            )
        ]
    )
    created = _client(session).create_issue(
        TrackerIssue(
            title="Updates (1)",
            description="- [ ] `a:b:(1 -> 2)`",
            labels=["dependencies", "maintenance"],
        )
    )
    method, url, details = session.request_log[0]
    assert method == "POST"
    assert url == "https://gitlab.test/api/v4/projects/1/issues"
    assert details["json"] == {
        "title": "Updates (1)",
        "description": "- [ ] `a:b:(1 -> 2)`",
        "labels": "dependencies,maintenance",
    }
    assert created.web_url == "https://gitlab.test/acme/app/-/issues/7"
    assert created.iid == 7


def test_list_issues_paginates_and_filters_by_label() -> None:
    first_page = [{"iid": i, "title": f"t{i}", "description": "body"} for i in range(100)]
    session = _DummySession(
        [_DummyResponse(200, first_page), _DummyResponse(200, [{"iid": 100, "description": None}])]
    )
    issues = _client(session, labels="dependencies").list_issues()
    assert len(issues) == 101
    assert issues[-1].description == ""
    pages = [entry[2]["params"]["page"] for entry in session.request_log]
    assert pages == [1, 2]
    params = session.request_log[0][2]["params"]
    assert params["state"] == "opened"
    assert params["labels"] == "dependencies"
    assert params["order_by"] == "created_at"
    assert params["sort"] == "asc"


def test_project_path_is_url_encoded() -> None:
    session = _DummySession([_DummyResponse(200, [])])
    _client(session, project_id="acme/app").list_issues()
    assert session.request_log[0][1] == "https://gitlab.test/api/v4/projects/acme%2Fapp/issues"


def test_client_raises_on_error_status() -> None:
    session = _DummySession([_DummyResponse(403, {"message": "403 Forbidden"})])
    with pytest.raises(GitLabAPIError) as excinfo:
        _client(session).create_issue(TrackerIssue(title="x", description="y"))
    assert excinfo.value.status == 403
    assert "Forbidden" in (excinfo.value.response_text or "")


def test_client_wraps_transport_errors_without_retry() -> None:
    session = _DummySession([requests.ConnectionError("connection refused")])
    with pytest.raises(GitLabAPIError) as excinfo:
        _client(session).list_issues()
    assert excinfo.value.status is None
    assert len(session.request_log) == 1


def test_create_issue_rejects_unexpected_payload() -> None:
    session = _DummySession([_DummyResponse(201, ["not", "an", "issue"])])
    with pytest.raises(GitLabAPIError):
        _client(session).create_issue(TrackerIssue(title="x", description="y"))
