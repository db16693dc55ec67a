import json
from pathlib import Path

from deploy_wait.core.config import Settings

PULL_REQUEST_EVENT = "pull_request"


def read_event_payload(event_path: str | None) -> dict:
    if not event_path:
        return {}
    try:
        payload = json.loads(Path(event_path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return {}
    return payload if isinstance(payload, dict) else {}


def resolve_commit_sha(settings: Settings) -> str | None:
    """Commit the workflow run is about.

    Pull request runs check out a merge commit, so the head of the proposed
    change is read from the event payload instead of ``GITHUB_SHA``.
    """
    if settings.commit_sha:
        return settings.commit_sha
    if settings.github_event_name == PULL_REQUEST_EVENT:
        payload = read_event_payload(settings.github_event_path)
        head = (payload.get("pull_request") or {}).get("head") or {}
        sha = head.get("sha")
        return sha or None
    return settings.github_sha
