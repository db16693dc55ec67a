import httpx
import pytest
import structlog


class FakeClock:
    """Clock whose sleep advances time instantly."""

    def __init__(self, start: float = 1000.0):
        self.current = start
        self.start = start
        self.sleeps: list[float] = []

    def now(self) -> float:
        return self.current

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.current += seconds

    @property
    def elapsed(self) -> float:
        return self.current - self.start


class RecordingHandler:
    """httpx.MockTransport handler answering each request from a route table.

    Routes map ``(method, path)`` (or ``(method, full url)``) to a list of
    responses served in order; the last one repeats.
    """

    def __init__(self, routes: dict | None = None):
        self.routes = routes or {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self.routes:
            key = (request.method, str(request.url))
        responses = self.routes.get(key)
        if not responses:
            return httpx.Response(404, json={"message": "Not Found"})
        response = responses.pop(0) if len(responses) > 1 else responses[0]
        if isinstance(response, Exception):
            raise response
        return httpx.Response(response.status_code, headers=response.headers, content=response.content)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()


def deploy_payload(deploy_id: str, commit_ref: str, state: str = "building", context: str = "deploy-preview", name: str = "mysite") -> dict:
    return {
        "id": deploy_id,
        "site_id": "site-1",
        "name": name,
        "commit_ref": commit_ref,
        "context": context,
        "state": state,
        "branch": "feature",
        "admin_url": "https://app.netlify.com/sites/mysite",
    }
