import httpx

from deploy_wait.schemas.deploy import Deploy


class NetlifyClient:
    """Thin bearer-authenticated reader for the Netlify deploys API."""

    def __init__(
        self,
        token: str,
        api_url: str = "https://api.netlify.com/api/v1",
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_url = api_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.api_url,
            headers={"Authorization": f"Bearer {token}"},
            timeout=timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "NetlifyClient":
        return self

    async def __aexit__(self, *_exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def deploys_path(site_id: str) -> str:
        return f"/sites/{site_id}/deploys"

    @staticmethod
    def deploy_path(site_id: str, deploy_id: str) -> str:
        return f"/sites/{site_id}/deploys/{deploy_id}"

    async def list_deploys(self, site_id: str) -> list[Deploy] | None:
        payload = await self._get_json(self.deploys_path(site_id))
        if payload is None:
            return None
        if not isinstance(payload, list):
            raise ValueError(f"Unexpected deploy list payload for site {site_id}: {type(payload).__name__}")
        return [Deploy.model_validate(item) for item in payload]

    async def get_deploy(self, site_id: str, deploy_id: str) -> Deploy:
        payload = await self._get_json(self.deploy_path(site_id, deploy_id))
        return Deploy.model_validate(payload or {"id": deploy_id})

    async def _get_json(self, path: str):
        response = await self._client.get(path)
        response.raise_for_status()
        if not response.content:
            return None
        return response.json()


def build_preview_url(deploy: Deploy, domain: str = "netlify.app") -> str:
    return f"https://{deploy.id}--{deploy.name}.{domain}"
