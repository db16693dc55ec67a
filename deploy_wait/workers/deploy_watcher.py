from collections.abc import Awaitable

import httpx
import structlog

from deploy_wait.core.clock import Clock, SystemClock
from deploy_wait.core.config import WatchConfig
from deploy_wait.core.exceptions import ConfigurationMissingError
from deploy_wait.core.logging import get_logger
from deploy_wait.models.enums import Phase
from deploy_wait.schemas.deploy import Deploy
from deploy_wait.schemas.watch import PhaseResult, PollConfig, RunResult
from deploy_wait.services.deploys import DeployWaiter
from deploy_wait.services.netlify import NetlifyClient, build_preview_url
from deploy_wait.services.outputs import ActionOutputs
from deploy_wait.services.readiness import ReadinessService

MISSING_TOKEN = "Please set NETLIFY_TOKEN env variable to your Netlify Personal Access Token secret"
MISSING_COMMIT = "Could not determine GitHub commit"
MISSING_SITE_ID = "Required field `site_id` was not provided"


def missing_configuration(config: WatchConfig) -> list[str]:
    problems = []
    if not config.netlify_token:
        problems.append(MISSING_TOKEN)
    if not config.commit_sha:
        problems.append(MISSING_COMMIT)
    if not config.site_id:
        problems.append(MISSING_SITE_ID)
    return problems


class DeployWatcher:
    """Runs creation, readiness and availability waits for one commit in order."""

    def __init__(
        self,
        config: WatchConfig,
        netlify: NetlifyClient,
        http_client: httpx.AsyncClient,
        outputs: ActionOutputs | None = None,
        clock: Clock | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        self.config = config
        self.clock = clock or SystemClock()
        self.logger = logger or get_logger(__name__)
        self.outputs = outputs or ActionOutputs(logger=self.logger)
        self.deploys = DeployWaiter(netlify, self.clock, self.logger)
        self.readiness = ReadinessService(http_client, self.clock, self.logger)

    async def run(self) -> RunResult:
        config = self.config

        problems = missing_configuration(config)
        if problems:
            for problem in problems:
                self.logger.error("deploy_watcher.missing_configuration", problem=problem)
            return RunResult.failed(PhaseResult(Phase.CONFIGURATION, error=ConfigurationMissingError(problems)))

        self.logger.info(
            "deploy_watcher.waiting_for_creation",
            commit_sha=config.commit_sha,
            context=config.context,
            site_id=config.site_id,
        )
        created = await self._run_phase(
            Phase.CREATION,
            self.deploys.wait_for_creation(
                site_id=config.site_id,
                commit_sha=config.commit_sha,
                poll=PollConfig(
                    timeout_seconds=config.create_timeout_seconds,
                    interval_seconds=config.create_poll_seconds,
                ),
                context=config.context,
            ),
        )
        if not created.ok:
            return RunResult.failed(created)

        deploy: Deploy = created.value
        url = build_preview_url(deploy, config.domain)
        self.outputs.set_output("deploy_id", deploy.id)
        self.outputs.set_output("url", url)

        self.logger.info("deploy_watcher.waiting_for_ready", deploy_id=deploy.id, site_name=deploy.name)
        ready = await self._run_phase(
            Phase.READINESS,
            self.deploys.wait_for_ready(
                site_id=config.site_id,
                deploy_id=deploy.id,
                poll=PollConfig(
                    timeout_seconds=config.wait_timeout_seconds,
                    interval_seconds=config.wait_poll_seconds,
                ),
            ),
        )
        if not ready.ok:
            return RunResult.failed(ready, deploy_id=deploy.id, url=url)

        self.logger.info("deploy_watcher.waiting_for_url", url=url)
        available = await self._run_phase(
            Phase.AVAILABILITY,
            self.readiness.wait_for_url(url, config.ready_timeout_seconds, config.url_poll_seconds),
        )
        if not available.ok:
            return RunResult.failed(available, deploy_id=deploy.id, url=url)

        self.logger.info("deploy_watcher.completed", deploy_id=deploy.id, url=url)
        return RunResult(success=True, deploy_id=deploy.id, url=url)

    async def _run_phase(self, phase: Phase, waiter: Awaitable) -> PhaseResult:
        try:
            return PhaseResult(phase, value=await waiter)
        except Exception as exc:  # noqa: BLE001
            result = PhaseResult(phase, error=exc)
            self.logger.error("deploy_watcher.phase_failed", phase=phase.value, error=result.message)
            return result


async def watch_deploy(
    config: WatchConfig,
    outputs: ActionOutputs | None = None,
    clock: Clock | None = None,
    logger: structlog.stdlib.BoundLogger | None = None,
    api_transport: httpx.AsyncBaseTransport | None = None,
    url_transport: httpx.AsyncBaseTransport | None = None,
) -> RunResult:
    """Open the HTTP clients for one run and drive a ``DeployWatcher`` with them."""
    async with NetlifyClient(
        config.netlify_token or "",
        api_url=config.api_url,
        timeout_seconds=config.request_timeout_seconds,
        transport=api_transport,
    ) as netlify, httpx.AsyncClient(timeout=config.request_timeout_seconds, transport=url_transport) as http_client:
        watcher = DeployWatcher(config, netlify, http_client, outputs=outputs, clock=clock, logger=logger)
        return await watcher.run()
