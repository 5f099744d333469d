"""Dependency update notifier CLI.

Subcommands:
  notify  -> merge the report with open GitLab issues and file a new issue
  render  -> print the issue the report alone would produce (no network)
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import Any

from depnotifier.builder import build_issue
from depnotifier.config import ConfigError, NotifierConfig, load_config
from depnotifier.env_auth import create_env_auth_manager, resolve_gitlab_token
from depnotifier.errors import classify_error
from depnotifier.gitlab import GitLabClient
from depnotifier.logging import configure_logging
from depnotifier.models import DependencyAnalysis
from depnotifier.notifier import IssueSettings, Notifier
from depnotifier.report import load_report
from depnotifier.versions import get_comparator

CONFIG_DEFAULT = "depnotifier.config.yaml"

_MAX_HELP_WIDTH = 100


class _HelpFormatter(argparse.HelpFormatter):
    def __init__(self, prog: str) -> None:
        super().__init__(prog, max_help_position=30, width=_MAX_HELP_WIDTH)


class _FormatterArgumentParser(argparse.ArgumentParser):
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("formatter_class", _HelpFormatter)
        super().__init__(*args, **kwargs)


def _build_parser() -> argparse.ArgumentParser:
    p = _FormatterArgumentParser(
        prog="depnotifier", description="File GitLab issues for outdated Gradle dependencies"
    )
    p.add_argument(
        "--quiet",
        action="store_true",
        help="Only log warnings and errors (env: DEPNOTIFIER_QUIET=1)",
    )
    sub = p.add_subparsers(
        dest="cmd",
        required=True,
        parser_class=_FormatterArgumentParser,
        metavar="<command>",
    )

    pn = sub.add_parser("notify", help="File a deduplicated dependency update issue")
    pn.add_argument("--config", default=CONFIG_DEFAULT)
    pn.add_argument("--report", type=Path, help="Override the dependency report path")
    pn.add_argument("--project-id", help="Override the GitLab project id or path")
    pn.add_argument("--dry-run", action="store_true", help="Build the issue but do not create it")

    pr = sub.add_parser("render", help="Print the issue for the report alone (no network)")
    pr.add_argument("--config", default=CONFIG_DEFAULT)
    pr.add_argument("--report", type=Path, help="Override the dependency report path")
    return p


def _load_fresh(cfg: NotifierConfig, args: argparse.Namespace) -> DependencyAnalysis:
    return load_report(args.report or cfg.report_file)


def build_client(cfg: NotifierConfig) -> GitLabClient:
    if not cfg.gitlab_project_id:
        raise ConfigError("GitLab project id is missing (gitlab.project_id or CI_PROJECT_ID)")
    token = resolve_gitlab_token(cfg, create_env_auth_manager(cfg))
    return GitLabClient(
        token=token,
        project_id=cfg.gitlab_project_id,
        base_url=cfg.gitlab_url,
        labels=cfg.issue_label,
    )


def _cmd_notify(cfg: NotifierConfig, args: argparse.Namespace) -> int:
    if args.project_id:
        cfg.gitlab_project_id = args.project_id
    fresh = _load_fresh(cfg, args)
    notifier = Notifier(
        build_client(cfg),
        IssueSettings(title=cfg.issue_title, label=cfg.issue_label),
        comparator=get_comparator(cfg.version_comparator),
        dry_run=args.dry_run or cfg.dry_run_default,
    )
    result = notifier.run(fresh)
    if result.created is not None:
        print(f"Created GitLab dependency update issue: {result.created.web_url}")
    elif result.issue is not None:
        print(f"[dry-run] would create: {result.issue.title}")
        print(result.issue.description)
    else:
        print("No new dependency updates to report")
    return 0


def _cmd_render(cfg: NotifierConfig, args: argparse.Namespace) -> int:
    issue = build_issue(_load_fresh(cfg, args), cfg.issue_title, cfg.issue_label)
    if issue is None:
        print("No dependency updates to report")
        return 0
    print(issue.title)
    print(f"labels: {', '.join(issue.labels)}")
    print()
    print(issue.description)
    return 0


_HANDLERS = {
    "notify": _cmd_notify,
    "render": _cmd_render,
}


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if not args.quiet and os.environ.get("DEPNOTIFIER_QUIET") == "1":
        args.quiet = True
    try:
        cfg = load_config(args.config)
        configure_logging(
            json_logging=cfg.logging_json_enabled,
            level="WARNING" if args.quiet else cfg.logging_level,
        )
        return _HANDLERS[args.cmd](cfg, args)
    except Exception as exc:
        info = classify_error(exc)
        print(f"[{info.category}] {info.message}", file=sys.stderr)
        if info.transient:
            print("This failure looks transient; re-running later may succeed", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
