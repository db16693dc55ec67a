"""Errors that end a watch run."""

from typing import Any


class DeployWaitError(Exception):
    """Base exception for deploy waiting."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationMissingError(DeployWaitError):
    """One or more required inputs were not provided."""

    def __init__(self, problems: list[str]):
        super().__init__("\n".join(problems), {"problems": problems})
        self.problems = problems


class FetchFailedError(DeployWaitError):
    """The deploy list endpoint returned no data."""

    def __init__(self, site_id: str):
        super().__init__("Failed to get deployments for site", {"site_id": site_id})


class CreationTimeoutError(DeployWaitError):
    """No deploy for the commit showed up in time."""

    def __init__(self, timeout_seconds: float, commit_sha: str):
        super().__init__(
            f"Timeout reached: Deployment was not created within {timeout_seconds:g} seconds.",
            {"timeout_seconds": timeout_seconds, "commit_sha": commit_sha},
        )
        self.timeout_seconds = timeout_seconds


class ReadinessTimeoutError(DeployWaitError):
    """The deploy never reached a ready state in time."""

    def __init__(self, timeout_seconds: float, last_state: str):
        super().__init__(
            f"Timeout reached: Deployment was not ready within {timeout_seconds:g} seconds. "
            f"Last known deployment state: {last_state}.",
            {"timeout_seconds": timeout_seconds, "last_state": last_state},
        )
        self.timeout_seconds = timeout_seconds
        self.last_state = last_state


class UrlUnavailableError(DeployWaitError):
    """The preview URL never answered successfully."""

    def __init__(self, url: str, attempts: int):
        super().__init__(f"Timeout reached: Unable to connect to {url}", {"url": url, "attempts": attempts})
        self.url = url
        self.attempts = attempts


def error_message(error: BaseException) -> str:
    message = getattr(error, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(error)
