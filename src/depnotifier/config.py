from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

import yaml

from .versions import get_comparator

DEFAULT_REPORT_FILE = "build/dependencyUpdates/report.json"
DEFAULT_GITLAB_URL = "https://gitlab.com/api/v4"


class ConfigError(RuntimeError):
    pass


@dataclass
class NotifierConfig:
    version: int
    source_file: Path
    report_file: Path
    gitlab_url: str
    gitlab_project_id: str | None
    gitlab_token: str | None
    issue_title: str | None
    issue_label: str | None
    version_comparator: str
    dry_run_default: bool
    # Logging configuration
    logging_json_enabled: bool
    logging_level: str
    # Environment authentication configuration
    env_auth_load_dotenv: bool
    env_auth_dotenv_path: str | None


def _resolve_env_var(value: Any) -> Any:
    """Resolve environment variable if value starts with $; unset resolves to None."""
    if isinstance(value, str) and value.startswith('$'):
        return os.getenv(value[1:])
    return value


def _optional_str(value: Any) -> str | None:
    value = _resolve_env_var(value)
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def load_config(path: str | Path) -> NotifierConfig:
    p = Path(path)
    if not p.exists():
        raise ConfigError(f'Configuration file not found: {p}')
    try:
        loaded = yaml.safe_load(p.read_text()) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f'Invalid YAML in {p}: {exc}') from exc
    if not isinstance(loaded, dict):
        raise ConfigError(f'Configuration root in {p} must be a mapping')
    raw = cast(dict[str, Any], loaded)
    report = cast(dict[str, Any], raw.get('report', {}) or {})
    gitlab = cast(dict[str, Any], raw.get('gitlab', {}) or {})
    issue = cast(dict[str, Any], raw.get('issue', {}) or {})
    behavior = cast(dict[str, Any], raw.get('behavior', {}) or {})
    logging_config = cast(dict[str, Any], raw.get('logging', {}) or {})
    env_auth = cast(dict[str, Any], raw.get('environment', {}) or {})

    comparator_name = str(behavior.get('version_comparator', 'lexicographic'))
    try:
        get_comparator(comparator_name)
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc

    try:
        version = int(raw.get('version', 1))
    except (TypeError, ValueError) as exc:
        raise ConfigError(f'Configuration version in {p} must be an integer') from exc

    # GitLab CI exposes the API root and project id to every job
    gitlab_url = (
        _optional_str(gitlab.get('url')) or os.getenv('CI_API_V4_URL') or DEFAULT_GITLAB_URL
    )
    project_id = _optional_str(gitlab.get('project_id')) or os.getenv('CI_PROJECT_ID')

    return NotifierConfig(
        version=version,
        source_file=p,
        report_file=p.parent / str(report.get('file', DEFAULT_REPORT_FILE)),
        gitlab_url=gitlab_url,
        gitlab_project_id=project_id,
        gitlab_token=_optional_str(gitlab.get('token')),
        issue_title=_optional_str(issue.get('title')),
        issue_label=_optional_str(issue.get('label')),
        version_comparator=comparator_name,
        dry_run_default=bool(behavior.get('dry_run_default', False)),
        logging_json_enabled=bool(logging_config.get('json_enabled', False)),
        logging_level=str(logging_config.get('level', 'INFO')),
        env_auth_load_dotenv=bool(env_auth.get('load_dotenv', True)),
        env_auth_dotenv_path=env_auth.get('dotenv_path'),
    )


__all__ = ["ConfigError", "NotifierConfig", "load_config"]
