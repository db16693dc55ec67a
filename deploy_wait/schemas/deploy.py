from pydantic import BaseModel, ConfigDict

from deploy_wait.models.enums import READY_STATES


class Deploy(BaseModel):
    """A deploy as returned by the Netlify API; unknown fields are dropped."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    site_id: str | None = None
    name: str | None = None
    commit_ref: str | None = None
    context: str | None = None
    branch: str | None = None
    state: str | None = None
    deploy_ssl_url: str | None = None

    @property
    def is_ready(self) -> bool:
        return self.state in READY_STATES

    def matches(self, commit_sha: str, context: str | None = None) -> bool:
        if self.commit_ref != commit_sha:
            return False
        return not context or self.context == context
