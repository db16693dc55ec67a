from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_READY_TIMEOUT_SECONDS = 60


class WatchConfig(BaseModel):
    """Everything one watch run needs, resolved once at the boundary."""

    model_config = ConfigDict(frozen=True)

    netlify_token: str | None
    site_id: str | None
    context: str | None = None
    commit_sha: str | None

    api_url: str = "https://api.netlify.com/api/v1"
    domain: str = "netlify.app"

    create_timeout_seconds: float = 300
    wait_timeout_seconds: float = 900
    ready_timeout_seconds: float = DEFAULT_READY_TIMEOUT_SECONDS

    create_poll_seconds: float = 5
    wait_poll_seconds: float = 10
    url_poll_seconds: float = 3

    request_timeout_seconds: float = 30


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    netlify_token: str | None = None
    site_id: str | None = Field(default=None, validation_alias=AliasChoices("site_id", "input_site_id"))
    context: str | None = Field(default=None, validation_alias=AliasChoices("context", "input_context"))
    max_timeout: float = Field(
        default=DEFAULT_READY_TIMEOUT_SECONDS,
        validation_alias=AliasChoices("max_timeout", "input_max_timeout"),
    )
    commit_sha: str | None = Field(default=None, validation_alias=AliasChoices("commit_sha", "input_commit_sha"))

    github_event_name: str | None = None
    github_event_path: str | None = None
    github_sha: str | None = None
    github_output: str | None = None

    netlify_api_url: str = "https://api.netlify.com/api/v1"
    netlify_domain: str = "netlify.app"

    deploy_create_timeout_seconds: float = 60 * 5
    deploy_ready_timeout_seconds: float = 60 * 15
    deploy_create_poll_seconds: float = 5
    deploy_ready_poll_seconds: float = 10
    url_poll_seconds: float = 3
    http_request_timeout_seconds: float = 30

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["console", "json"] = "console"

    @field_validator(
        "netlify_token",
        "site_id",
        "context",
        "commit_sha",
        "github_event_name",
        "github_event_path",
        "github_sha",
        "github_output",
        mode="before",
    )
    @classmethod
    def _blank_as_unset(cls, value):
        # Actions pass unset inputs as empty strings.
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("max_timeout", mode="before")
    @classmethod
    def _fallback_max_timeout(cls, value):
        try:
            seconds = float(value)
        except (TypeError, ValueError):
            return DEFAULT_READY_TIMEOUT_SECONDS
        if seconds != seconds or seconds == 0:
            return DEFAULT_READY_TIMEOUT_SECONDS
        return seconds

    def to_watch_config(self, commit_sha: str | None) -> WatchConfig:
        return WatchConfig(
            netlify_token=self.netlify_token,
            site_id=self.site_id,
            context=self.context,
            commit_sha=commit_sha,
            api_url=self.netlify_api_url,
            domain=self.netlify_domain,
            create_timeout_seconds=self.deploy_create_timeout_seconds,
            wait_timeout_seconds=self.deploy_ready_timeout_seconds,
            ready_timeout_seconds=self.max_timeout,
            create_poll_seconds=self.deploy_create_poll_seconds,
            wait_poll_seconds=self.deploy_ready_poll_seconds,
            url_poll_seconds=self.url_poll_seconds,
            request_timeout_seconds=self.http_request_timeout_seconds,
        )
