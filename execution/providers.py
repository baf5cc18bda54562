"""
Judge0 endpoints the orchestrator can talk to.

Both providers speak the same Judge0 CE REST API and differ only in base URL
and headers: the RapidAPI instance needs an API key, the public instance at
ce.judge0.com takes anonymous requests.
"""

import httpx

from execution.config import JudgeConfig


class Judge0Provider:
    name = "judge0"

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")

    def headers(self) -> dict[str, str]:
        return {}

    async def submit(
        self,
        client: httpx.AsyncClient,
        language_id: int,
        source_code: str,
        stdin: str,
    ) -> httpx.Response:
        """Queue a submission without waiting. ``source_code``/``stdin`` are base64."""
        return await client.post(
            f"{self.base_url}/submissions",
            params={"base64_encoded": "true", "wait": "false"},
            json={
                "language_id": language_id,
                "source_code": source_code,
                "stdin": stdin,
            },
            headers=self.headers(),
        )

    async def fetch(self, client: httpx.AsyncClient, token: str) -> httpx.Response:
        return await client.get(
            f"{self.base_url}/submissions/{token}",
            params={"base64_encoded": "true"},
            headers=self.headers(),
        )

    async def cancel(self, client: httpx.AsyncClient, token: str) -> httpx.Response:
        # Only honoured by instances that allow deleting submissions.
        return await client.delete(
            f"{self.base_url}/submissions/{token}",
            headers=self.headers(),
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.base_url}>"


class PublicProvider(Judge0Provider):
    name = "public"


class RapidAPIProvider(Judge0Provider):
    name = "rapidapi"

    def __init__(self, base_url: str, host: str, api_key: str):
        super().__init__(base_url)
        self.host = host
        self._api_key = api_key

    def headers(self) -> dict[str, str]:
        return {"X-RapidAPI-Host": self.host, "X-RapidAPI-Key": self._api_key}


def select_provider(config: JudgeConfig) -> Judge0Provider:
    if config.has_api_key:
        return RapidAPIProvider(
            config.rapidapi_url, config.rapidapi_host, config.api_key.strip()
        )
    return PublicProvider(config.public_url)
