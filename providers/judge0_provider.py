"""
Judge0 provider for remote compilation and execution.

Submits source code asynchronously and polls the submission until the
judge has finished with it.
"""

import asyncio
from typing import Optional, Any

import httpx
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from core.config import settings, logger


class Judge0APIError(Exception):
    """Exception for Judge0 API errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class Judge0Provider:
    """
    Judge0 CE client using the submit-then-poll flow.

    Submissions are created with wait=false and polled until their
    status leaves In Queue (1) / Processing (2).
    """

    PENDING_STATUS_IDS = (1, 2)
    RATE_LIMIT_BACKOFF = 2.0

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        api_host: Optional[str] = None,
        poll_interval: Optional[float] = None,
        max_polls: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Judge0 provider.

        Any argument left as None is taken from settings.
        """
        self.base_url = (base_url or settings.JUDGE0_URL).rstrip("/")
        self.api_key = settings.JUDGE0_API_KEY if api_key is None else api_key
        self.api_host = api_host or settings.JUDGE0_API_HOST
        self.poll_interval = settings.JUDGE0_POLL_INTERVAL if poll_interval is None else poll_interval
        self.max_polls = settings.JUDGE0_MAX_POLLS if max_polls is None else max_polls
        self._transport = transport

        self._client: Optional[httpx.AsyncClient] = None

    def is_available(self) -> bool:
        """RapidAPI-hosted Judge0 needs a key; self-hosted instances do not."""
        return bool(self.api_key) or "rapidapi" not in self.base_url

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["X-RapidAPI-Key"] = self.api_key
            headers["X-RapidAPI-Host"] = self.api_host
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(settings.JUDGE0_TIMEOUT),
                headers=self._headers(),
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _request(
        self,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """
        Make API request to Judge0.

        Args:
            method: HTTP method
            path: Path relative to the base URL

        Returns:
            Decoded JSON body
        """
        client = await self._get_client()

        response = await client.request(method, path, **kwargs)

        if response.status_code == 429:
            # Rate limit - wait and retry
            await asyncio.sleep(self.RATE_LIMIT_BACKOFF)
            response = await client.request(method, path, **kwargs)

        if not response.is_success:
            error_detail = response.text
            try:
                error_json = response.json()
                error_detail = error_json.get("error") or error_json.get("message") or error_detail
            except ValueError:
                pass
            raise Judge0APIError(
                f"API error ({response.status_code}): {error_detail}",
                status_code=response.status_code
            )

        try:
            data = response.json()
        except ValueError:
            raise Judge0APIError(f"Failed to parse JSON response: {response.text[:200]}...")

        if not isinstance(data, dict):
            raise Judge0APIError(f"Expected a JSON object, got: {response.text[:200]}...")

        return data

    # Polls only. Submissions are sent once.
    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type((httpx.TimeoutException, httpx.NetworkError)),
        reraise=True,
    )
    async def _get(self, path: str, **kwargs: Any) -> dict[str, Any]:
        return await self._request("GET", path, **kwargs)

    async def submit(self, source_code: str, language_id: int, stdin: str = "") -> str:
        """
        Create a submission.

        Returns:
            Submission token
        """
        data = await self._request(
            "POST",
            "/submissions",
            params={"base64_encoded": "false", "wait": "false"},
            json={
                "source_code": source_code,
                "language_id": language_id,
                "stdin": stdin,
            },
        )

        token = data.get("token")
        if not token:
            raise Judge0APIError(f"Submission returned no token: {data}")

        logger.info(f"Submitted to Judge0 (language={language_id}, token={token})")
        return token

    async def get_submission(self, token: str) -> dict[str, Any]:
        """Fetch the current state of a submission."""
        return await self._get(
            f"/submissions/{token}",
            params={"base64_encoded": "false"},
        )

    async def wait_for_result(self, token: str) -> dict[str, Any]:
        """
        Poll a submission until it is no longer queued or processing.

        Raises:
            Judge0APIError: If the submission is still pending after max_polls
        """
        for attempt in range(1, self.max_polls + 1):
            result = await self.get_submission(token)
            status_id = (result.get("status") or {}).get("id")

            if status_id not in self.PENDING_STATUS_IDS:
                logger.debug(f"Submission {token} finished after {attempt} poll(s)")
                return result

            await asyncio.sleep(self.poll_interval)

        raise Judge0APIError(
            f"Submission {token} still pending after {self.max_polls} polls"
        )

    async def execute(self, source_code: str, language_id: int, stdin: str = "") -> dict[str, Any]:
        """Submit code and wait for the finished submission."""
        token = await self.submit(source_code, language_id, stdin)
        result = await self.wait_for_result(token)
        result.setdefault("token", token)
        return result
