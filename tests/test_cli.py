from __future__ import annotations

import json
import textwrap
from pathlib import Path

import pytest
from conftest import SAMPLE_REPORT, FakeTracker

from depnotifier import cli
from depnotifier.models import TrackerIssue

CONFIG = textwrap.dedent(
    """\
    version: 1
    report:
      file: report.json
    gitlab:
      url: https://gitlab.test/api/v4
      project_id: 1
      token: tkn
    issue:
      title: "Dependency updates (%count)"
      label: "dependencies,maintenance"
    environment:
      load_dotenv: false
    """
)


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    (tmp_path / "depnotifier.config.yaml").write_text(CONFIG)
    (tmp_path / "report.json").write_text(json.dumps(SAMPLE_REPORT), encoding="utf-8")
    return tmp_path


def _config_arg(workspace: Path) -> list[str]:
    return ["--config", str(workspace / "depnotifier.config.yaml")]


def test_render_prints_issue_without_network(
    workspace: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    rc = cli.main(["--quiet", "render", *_config_arg(workspace)])
    out = capsys.readouterr().out
    assert rc == 0
    assert "Dependency updates (3)" in out
    assert "- [ ] `com.example:lib:(1.0 -> 2.0)` - [https://example.com/lib](https://example.com/lib)" in out
    assert "- [ ] `org.acme:widgets:(3.1 -> 4.0-M1)`" in out
    assert "- [ ] Gradle `6.0` -> `6.5`" in out


def test_notify_creates_issue(
    workspace: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    tracker = FakeTracker()
    monkeypatch.setattr(cli, "build_client", lambda cfg: tracker)

    rc = cli.main(["--quiet", "notify", *_config_arg(workspace)])

    assert rc == 0
    assert tracker.calls == ["list", "create"]
    assert "Created GitLab dependency update issue: https://gitlab.test/" in capsys.readouterr().out


def test_notify_skips_when_already_reported(
    workspace: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    body = "\n".join(
        [
            "- [ ] `com.example:lib:(1.0 -> 2.0)`",
            "- [ ] `org.acme:widgets:(3.1 -> 4.0-M1)`",
            "",
            "- [ ] Gradle `6.0` -> `6.5`",
        ]
    )
    tracker = FakeTracker(issues=[TrackerIssue(title="Dependency updates (3)", description=body)])
    monkeypatch.setattr(cli, "build_client", lambda cfg: tracker)

    rc = cli.main(["--quiet", "notify", *_config_arg(workspace)])

    assert rc == 0
    assert tracker.calls == ["list"]
    assert "No new dependency updates" in capsys.readouterr().out


def test_notify_dry_run(
    workspace: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    tracker = FakeTracker()
    monkeypatch.setattr(cli, "build_client", lambda cfg: tracker)
    rc = cli.main(["--quiet", "notify", "--dry-run", *_config_arg(workspace)])
    assert rc == 0
    assert tracker.calls == ["list"]
    assert "[dry-run] would create: Dependency updates (3)" in capsys.readouterr().out


def test_notify_api_failure_exits_non_zero(
    workspace: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    tracker = FakeTracker(fail_on="create")
    monkeypatch.setattr(cli, "build_client", lambda cfg: tracker)
    rc = cli.main(["--quiet", "notify", *_config_arg(workspace)])
    assert rc == 1
    assert "[gitlab.auth]" in capsys.readouterr().err


def test_notify_missing_report_fails(
    workspace: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    tracker = FakeTracker()
    monkeypatch.setattr(cli, "build_client", lambda cfg: tracker)
    (workspace / "report.json").unlink()
    rc = cli.main(["--quiet", "notify", *_config_arg(workspace)])
    assert rc == 1
    assert tracker.calls == []
    assert "[parse]" in capsys.readouterr().err


def test_missing_config_fails(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    rc = cli.main(["render", "--config", str(tmp_path / "missing.yaml")])
    assert rc == 1
    assert "[config]" in capsys.readouterr().err


def test_build_client_requires_project_id(workspace: Path) -> None:
    cfg = cli.load_config(workspace / "depnotifier.config.yaml")
    cfg.gitlab_project_id = None
    with pytest.raises(cli.ConfigError):
        cli.build_client(cfg)


def test_build_client_uses_config_values(workspace: Path) -> None:
    cfg = cli.load_config(workspace / "depnotifier.config.yaml")
    client = cli.build_client(cfg)
    assert client.project_id == "1"
    assert client.base_url == "https://gitlab.test/api/v4"
    assert client.labels == "dependencies,maintenance"


def test_notify_transient_failure_hints_rerun(
    workspace: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    tracker = FakeTracker(fail_on="list")
    monkeypatch.setattr(cli, "build_client", lambda cfg: tracker)
    rc = cli.main(["--quiet", "notify", *_config_arg(workspace)])
    err = capsys.readouterr().err
    assert rc == 1
    assert "[gitlab.api]" in err
    assert "re-running later may succeed" in err


def test_invalid_config_version_is_a_config_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = tmp_path / "depnotifier.config.yaml"
    path.write_text("version: one\n")
    rc = cli.main(["render", "--config", str(path)])
    assert rc == 1
    assert "[config]" in capsys.readouterr().err
