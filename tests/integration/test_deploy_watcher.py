import io

import httpx
import pytest

from deploy_wait.core.config import WatchConfig
from deploy_wait.models.enums import Phase
from deploy_wait.services.outputs import ActionOutputs
from deploy_wait.workers.deploy_watcher import MISSING_COMMIT, MISSING_SITE_ID, MISSING_TOKEN, watch_deploy
from tests.conftest import RecordingHandler, deploy_payload

LIST_PATH = "/api/v1/sites/site-1/deploys"
DEPLOY_PATH = "/api/v1/sites/site-1/deploys/dep-1"
PREVIEW_URL = "https://dep-1--mysite.netlify.app"


def _config(**overrides) -> WatchConfig:
    values = {"netlify_token": "tok", "site_id": "site-1", "commit_sha": "abc123", "ready_timeout_seconds": 9}
    values.update(overrides)
    return WatchConfig(**values)


def _outputs(tmp_path) -> ActionOutputs:
    return ActionOutputs(str(tmp_path / "github_output"), stream=io.StringIO())


@pytest.mark.asyncio
async def test_full_run_publishes_outputs_and_succeeds(tmp_path, clock):
    api = RecordingHandler(
        {
            ("GET", LIST_PATH): [httpx.Response(200, json=[]), httpx.Response(200, json=[deploy_payload("dep-1", "abc123")])],
            ("GET", DEPLOY_PATH): [
                httpx.Response(200, json=deploy_payload("dep-1", "abc123", state="building")),
                httpx.Response(200, json=deploy_payload("dep-1", "abc123", state="ready")),
            ],
        }
    )
    site = RecordingHandler({("HEAD", "/"): [httpx.Response(502), httpx.Response(200)]})
    outputs = _outputs(tmp_path)

    result = await watch_deploy(
        _config(),
        outputs=outputs,
        clock=clock,
        api_transport=httpx.MockTransport(api),
        url_transport=httpx.MockTransport(site),
    )

    assert result.success
    assert result.deploy_id == "dep-1"
    assert result.url == PREVIEW_URL
    assert clock.sleeps == [5, 10, 3]
    assert (tmp_path / "github_output").read_text() == f"deploy_id=dep-1\nurl={PREVIEW_URL}\n"
    assert "Authorization" not in site.requests[0].headers
    assert not outputs.failed


@pytest.mark.asyncio
async def test_missing_configuration_fails_without_http_calls(tmp_path, clock):
    api = RecordingHandler()
    site = RecordingHandler()

    result = await watch_deploy(
        _config(netlify_token=None, site_id=None, commit_sha=None),
        outputs=_outputs(tmp_path),
        clock=clock,
        api_transport=httpx.MockTransport(api),
        url_transport=httpx.MockTransport(site),
    )

    assert not result.success
    assert result.failed_phase == Phase.CONFIGURATION
    assert result.error.splitlines() == [MISSING_TOKEN, MISSING_COMMIT, MISSING_SITE_ID]
    assert api.requests == []
    assert site.requests == []


@pytest.mark.asyncio
async def test_single_missing_value_is_reported(tmp_path, clock):
    api = RecordingHandler()

    result = await watch_deploy(
        _config(site_id=""),
        outputs=_outputs(tmp_path),
        clock=clock,
        api_transport=httpx.MockTransport(api),
    )

    assert result.error == MISSING_SITE_ID
    assert api.requests == []


@pytest.mark.asyncio
async def test_creation_timeout_skips_later_phases_and_outputs(tmp_path, clock):
    api = RecordingHandler({("GET", LIST_PATH): [httpx.Response(200, json=[])]})
    site = RecordingHandler()
    outputs = _outputs(tmp_path)

    result = await watch_deploy(
        _config(create_timeout_seconds=10),
        outputs=outputs,
        clock=clock,
        api_transport=httpx.MockTransport(api),
        url_transport=httpx.MockTransport(site),
    )

    assert result.failed_phase == Phase.CREATION
    assert result.error == "Timeout reached: Deployment was not created within 10 seconds."
    assert outputs.values == {}
    assert all(request.url.path == LIST_PATH for request in api.requests)
    assert site.requests == []


@pytest.mark.asyncio
async def test_readiness_failure_keeps_published_outputs(tmp_path, clock):
    api = RecordingHandler(
        {
            ("GET", LIST_PATH): [httpx.Response(200, json=[deploy_payload("dep-1", "abc123")])],
            ("GET", DEPLOY_PATH): [httpx.Response(200, json=deploy_payload("dep-1", "abc123", state="error"))],
        }
    )
    site = RecordingHandler()
    outputs = _outputs(tmp_path)

    result = await watch_deploy(
        _config(wait_timeout_seconds=5),
        outputs=outputs,
        clock=clock,
        api_transport=httpx.MockTransport(api),
        url_transport=httpx.MockTransport(site),
    )

    assert result.failed_phase == Phase.READINESS
    assert "Last known deployment state: error." in result.error
    assert outputs.values == {"deploy_id": "dep-1", "url": PREVIEW_URL}
    assert result.url == PREVIEW_URL
    assert site.requests == []


@pytest.mark.asyncio
async def test_unreachable_url_fails_run(tmp_path, clock):
    api = RecordingHandler(
        {
            ("GET", LIST_PATH): [httpx.Response(200, json=[deploy_payload("dep-1", "abc123")])],
            ("GET", DEPLOY_PATH): [httpx.Response(200, json=deploy_payload("dep-1", "abc123", state="ready"))],
        }
    )
    site = RecordingHandler({("HEAD", "/"): [httpx.ConnectError("name resolution failed")]})

    result = await watch_deploy(
        _config(),
        outputs=_outputs(tmp_path),
        clock=clock,
        api_transport=httpx.MockTransport(api),
        url_transport=httpx.MockTransport(site),
    )

    assert result.failed_phase == Phase.AVAILABILITY
    assert result.error == f"Timeout reached: Unable to connect to {PREVIEW_URL}"
    assert len(site.requests) == 3


@pytest.mark.asyncio
async def test_api_error_becomes_failure_message(tmp_path, clock):
    api = RecordingHandler({("GET", LIST_PATH): [httpx.Response(401, json={"code": 401, "message": "Access Denied"})]})

    result = await watch_deploy(
        _config(),
        outputs=_outputs(tmp_path),
        clock=clock,
        api_transport=httpx.MockTransport(api),
    )

    assert result.failed_phase == Phase.CREATION
    assert "401" in result.error
