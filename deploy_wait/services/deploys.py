"""Pollers for the Netlify deploy API.

Both waiters follow the same loop: fetch, check, then compare the elapsed time
against the budget and sleep. The budget is only consulted after a miss, so the
last iteration may run past it by one interval plus one request.
"""

import structlog

from deploy_wait.core.clock import Clock, SystemClock, elapsed_seconds
from deploy_wait.core.exceptions import CreationTimeoutError, FetchFailedError, ReadinessTimeoutError
from deploy_wait.core.logging import get_logger
from deploy_wait.schemas.deploy import Deploy
from deploy_wait.schemas.watch import PollConfig
from deploy_wait.services.netlify import NetlifyClient

UNKNOWN_STATE = "(unknown)"


class DeployWaiter:
    def __init__(
        self,
        client: NetlifyClient,
        clock: Clock | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        self.client = client
        self.clock = clock or SystemClock()
        self.logger = logger or get_logger(__name__)

    async def wait_for_creation(
        self,
        site_id: str,
        commit_sha: str,
        poll: PollConfig,
        context: str | None = None,
    ) -> Deploy:
        """Return the first deploy of ``site_id`` built from ``commit_sha``.

        When ``context`` is given the deploy context must match as well.

        Raises:
            FetchFailedError: The deploy list came back empty-handed.
            CreationTimeoutError: No matching deploy appeared within the budget.
        """
        started_at = self.clock.now()
        while True:
            deploys = await self.client.list_deploys(site_id)
            if deploys is None:
                raise FetchFailedError(site_id)

            deploy = next((item for item in deploys if item.matches(commit_sha, context)), None)
            if deploy is not None:
                self.logger.info(
                    "deploy_waiter.created",
                    deploy_id=deploy.id,
                    elapsed_seconds=elapsed_seconds(self.clock, started_at),
                )
                return deploy

            if elapsed_seconds(self.clock, started_at) > poll.timeout_seconds:
                raise CreationTimeoutError(poll.timeout_seconds, commit_sha)

            self.logger.info(
                "deploy_waiter.not_created",
                commit_sha=commit_sha,
                retry_in_seconds=poll.interval_seconds,
            )
            await self.clock.sleep(poll.interval_seconds)

    async def wait_for_ready(self, site_id: str, deploy_id: str, poll: PollConfig) -> Deploy:
        """Block until the deploy reaches a ready state and return it.

        Raises:
            ReadinessTimeoutError: The deploy was still not ready once the budget ran out.
        """
        started_at = self.clock.now()
        while True:
            deploy = await self.client.get_deploy(site_id, deploy_id)
            latest_state = deploy.state if deploy.state is not None else UNKNOWN_STATE
            if deploy.is_ready:
                self.logger.info(
                    "deploy_waiter.ready",
                    deploy_id=deploy_id,
                    state=latest_state,
                    elapsed_seconds=elapsed_seconds(self.clock, started_at),
                )
                return deploy

            if elapsed_seconds(self.clock, started_at) > poll.timeout_seconds:
                raise ReadinessTimeoutError(poll.timeout_seconds, latest_state)

            self.logger.info(
                "deploy_waiter.not_ready",
                deploy_id=deploy_id,
                state=latest_state,
                retry_in_seconds=poll.interval_seconds,
            )
            await self.clock.sleep(poll.interval_seconds)
