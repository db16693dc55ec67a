import httpx
import structlog

from deploy_wait.core.clock import Clock, SystemClock
from deploy_wait.core.exceptions import UrlUnavailableError
from deploy_wait.core.logging import get_logger


class ReadinessService:
    def __init__(
        self,
        http_client: httpx.AsyncClient,
        clock: Clock | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        self.http_client = http_client
        self.clock = clock or SystemClock()
        self.logger = logger or get_logger(__name__)

    async def wait_for_url(self, url: str, timeout_seconds: float, poll_seconds: float = 3) -> int:
        """HEAD ``url`` until it answers with a non-error status.

        The attempt budget is ``timeout_seconds / 3`` without flooring, so a
        budget of 10 seconds allows a fourth attempt. Returns the number of
        attempts used.
        """
        iterations = timeout_seconds / 3
        attempt = 0
        while attempt < iterations:
            attempt += 1
            try:
                response = await self.http_client.head(url, follow_redirects=True)
                response.raise_for_status()
                return attempt
            except httpx.HTTPStatusError as exc:
                error_code = exc.response.status_code
                error_message = str(exc)
            except httpx.HTTPError as exc:
                error_code = type(exc).__name__
                error_message = str(exc) or repr(exc)
            self.logger.info(
                "readiness.url_unavailable",
                url=url,
                attempt=attempt,
                error_code=error_code,
                error_message=error_message,
                retry_in_seconds=poll_seconds,
            )
            await self.clock.sleep(poll_seconds)
        raise UrlUnavailableError(url, attempt)
