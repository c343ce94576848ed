"""
Rerank HTTP client.

Posts a query and candidate texts to a text-rerank endpoint and returns
the relevance ordering.

Dependencies: httpx, pydantic, ragdesk.configs
System role: Second-pass relevance ordering for retrieval
"""

import logging
from typing import Any

import httpx
from pydantic import BaseModel, Field

from ragdesk.configs.providers import RerankSettings
from ragdesk.core.exceptions import ExternalServiceError, ProtocolError, ValidationError

logger = logging.getLogger(__name__)


class RerankResult(BaseModel):
    """One entry of the rerank ordering."""

    index: int = Field(ge=0, description="Position in the submitted documents array")
    relevance_score: float = Field(description="Relevance score, higher is better")


class RerankClient:
    """Client for the text-rerank HTTP contract."""

    def __init__(self, settings: RerankSettings, http_client: httpx.AsyncClient | None = None) -> None:
        """
        Initialize rerank client.

        Args:
            settings: Endpoint, model, key and timeout
            http_client: Shared client; a short-lived one is opened per call when None
        """
        self._settings = settings
        self._http_client = http_client

    @property
    def enabled(self) -> bool:
        return self._settings.enabled

    def check_configured(self) -> None:
        """
        Check that endpoint, model and key are set.

        Raises:
            ValidationError: Naming the first blank setting
        """
        for field in ("endpoint", "model", "api_key"):
            if not getattr(self._settings, field).strip():
                raise ValidationError(f"Rerank {field} is not configured", field=f"rerank.{field}")

    def _build_request(self, query: str, documents: list[str]) -> dict[str, Any]:
        return {
            "model": self._settings.model,
            "input": {"query": query, "documents": documents},
            "parameters": {"output_type": "rank"},
        }

    async def _post(self, payload: dict[str, Any]) -> httpx.Response:
        headers = {
            "Authorization": f"Bearer {self._settings.api_key}",
            "Content-Type": "application/json",
        }
        if self._http_client is not None:
            return await self._http_client.post(
                self._settings.endpoint,
                json=payload,
                headers=headers,
                timeout=self._settings.timeout_seconds,
            )
        async with httpx.AsyncClient(timeout=httpx.Timeout(self._settings.timeout_seconds)) as client:
            return await client.post(self._settings.endpoint, json=payload, headers=headers)

    @staticmethod
    def _parse_results(body: Any) -> list[RerankResult]:
        try:
            raw_results = body["output"]["results"]
        except (KeyError, TypeError) as e:
            raise ProtocolError("Rerank response has no output.results", service="rerank") from e
        if not isinstance(raw_results, list):
            raise ProtocolError("Rerank output.results is not a list", service="rerank")

        results: list[RerankResult] = []
        for item in raw_results:
            index = item.get("index") if isinstance(item, dict) else None
            score = item.get("relevance_score") if isinstance(item, dict) else None
            # bool is an int subclass and never a valid index
            if not isinstance(index, int) or isinstance(index, bool) or index < 0:
                raise ProtocolError(
                    "Rerank result has an invalid index",
                    service="rerank",
                    details={"index": index},
                )
            if not isinstance(score, (int, float)) or isinstance(score, bool):
                raise ProtocolError(
                    "Rerank result has an invalid relevance_score",
                    service="rerank",
                    details={"relevance_score": score},
                )
            results.append(RerankResult(index=index, relevance_score=float(score)))
        return results

    async def rerank(self, query: str, documents: list[str]) -> list[RerankResult]:
        """
        Order documents by relevance to the query.

        Args:
            query: User question
            documents: Candidate texts

        Returns:
            list[RerankResult]: Results sorted by descending relevance

        Raises:
            ValidationError: When endpoint, model or key is blank
            ExternalServiceError: On transport failure or non-2xx status
            ProtocolError: On a malformed response body
        """
        self.check_configured()
        logger.info(f"{__name__}:rerank - START: documents={len(documents)}")
        try:
            response = await self._post(self._build_request(query, documents))
        except httpx.HTTPError as e:
            logger.error(f"{__name__}:rerank - FAILED: {type(e).__name__}: {e}")
            raise ExternalServiceError(f"Rerank request failed: {e}", service="rerank") from e

        if not response.is_success:
            logger.error(f"{__name__}:rerank - FAILED: status={response.status_code}")
            raise ExternalServiceError(
                f"Rerank service returned HTTP {response.status_code}",
                service="rerank",
                details={"status_code": response.status_code, "body": response.text[:200]},
            )

        try:
            body = response.json()
        except ValueError as e:
            raise ProtocolError("Rerank response is not JSON", service="rerank") from e

        results = self._parse_results(body)
        logger.info(f"{__name__}:rerank - SUCCESS: results={len(results)}")
        return results
