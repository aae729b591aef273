"""
Leads Intake Client

Forwards the contact details captured by the funnel to the leads API.
One POST per submission: no retry, no backoff.
"""

import logging
from typing import Optional

import httpx

from seo_funnel.models import LeadData

logger = logging.getLogger(__name__)


USER_FACING_ERROR = "Kunde inte skicka dina uppgifter. Försök igen senare."


class LeadSubmissionError(Exception):
    """
    Raised when a lead could not be delivered.

    The message is always the short user-facing text; provider detail is
    kept in `detail` and `status_code`.
    """

    def __init__(self, detail: str = "", status_code: int = None):
        super().__init__(USER_FACING_ERROR)
        self.detail = detail
        self.status_code = status_code


class LeadsClient:
    """
    Async client for the leads intake endpoint.

    Usage:
        async with LeadsClient(endpoint, api_key="your_key") as client:
            await client.submit(LeadData(name="Anna", email="anna@exempel.se", phone="0701234567"))
    """

    ENDPOINT = "https://leads.effektivmedia.nu/api/leads"

    def __init__(
        self,
        endpoint: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: float = 15.0,
    ):
        """
        Initialize leads client.

        Args:
            endpoint: Leads intake URL
            api_key: Value for the x-api-key header
            timeout: Request timeout in seconds
        """
        self.endpoint = endpoint or self.ENDPOINT

        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["x-api-key"] = api_key

        self._client = httpx.AsyncClient(headers=headers, timeout=httpx.Timeout(timeout))
        self._closed = False

    async def submit(self, lead: LeadData) -> None:
        """
        Submit one lead.

        Raises:
            LeadSubmissionError: On transport failure or non-2xx response
        """
        if self._closed:
            raise LeadSubmissionError("Client is closed")

        payload = lead.to_payload()
        logger.info(f"Submitting lead from source '{payload['source']}'")

        try:
            response = await self._client.post(self.endpoint, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Error submitting lead: {e}")
            raise LeadSubmissionError(f"Request failed: {e}") from e

        if not response.is_success:
            detail = f"Failed to submit lead: {response.status_code} {response.reason_phrase}"
            logger.error(f"Error submitting lead: {detail}")
            raise LeadSubmissionError(detail, status_code=response.status_code)

        logger.info("Lead submitted successfully")

    async def close(self):
        """Close the HTTP client."""
        if not self._closed:
            await self._client.aclose()
            self._closed = True

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
