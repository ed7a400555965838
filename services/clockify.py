"""
Clockify earnings source.

Wraps the detailed-report endpoint of the Clockify Reports API. Credentials
come from CLOCKIFY_API_KEY and CLOCKIFY_WORKSPACE_ID in the environment.
"""

import logging
import os
from datetime import datetime, timezone

import httpx

from parsers.clockify import calculate_total_earnings

logger = logging.getLogger(__name__)

REPORTS_BASE_URL = "https://reports.api.clockify.me/v1"
PAGE_SIZE = 1000
REQUEST_TIMEOUT = 10.0


class SourceUnavailableError(RuntimeError):
    """The earnings report could not be fetched (network, auth, or bad response)."""

    def __init__(self, message: str, status: int | None = None):
        self.status = status
        super().__init__(f"Request failed: {message} (Status: {status if status is not None else 'N/A'})")


def _get_headers(api_key: str) -> dict:
    return {
        "X-Api-Key": api_key,
        "Content-Type": "application/json",
    }


def _iso_utc(moment: datetime) -> str:
    """Format as UTC ISO-8601 with milliseconds, e.g. 2025-06-01T07:00:00.000Z."""
    # Naive datetimes are local time
    utc = moment.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


class ClockifySource:
    """Earnings source backed by the Clockify detailed report."""

    def __init__(self, api_key: str | None = None, workspace_id: str | None = None,
                 transport: httpx.BaseTransport | None = None):
        self.api_key = api_key if api_key is not None else os.environ.get("CLOCKIFY_API_KEY", "")
        self.workspace_id = (
            workspace_id if workspace_id is not None else os.environ.get("CLOCKIFY_WORKSPACE_ID", "")
        )
        self._transport = transport

    @property
    def report_url(self) -> str:
        return f"{REPORTS_BASE_URL}/workspaces/{self.workspace_id}/reports/detailed"

    def fetch_time_entries(self, start: datetime, end: datetime) -> list[dict]:
        """
        Fetch every time entry between start and end, following pagination.

        Raises:
            SourceUnavailableError: on missing credentials, network errors,
                non-2xx responses, or an undecodable body
        """
        if not self.api_key or not self.workspace_id:
            raise SourceUnavailableError("Clockify API key or workspace ID not configured")

        entries = []
        page = 1
        with httpx.Client(transport=self._transport, timeout=REQUEST_TIMEOUT) as client:
            while True:
                batch = self._fetch_page(client, start, end, page)
                entries.extend(batch)
                if len(batch) < PAGE_SIZE:
                    break
                page += 1

        logger.debug("Fetched %d time entries over %d page(s)", len(entries), page)
        return entries

    def get_total(self, start: datetime, end: datetime) -> int:
        """Total billable earnings between start and end, in whole dollars."""
        entries = self.fetch_time_entries(start, end)
        return calculate_total_earnings({"timeentries": entries})

    def _fetch_page(self, client: httpx.Client, start: datetime, end: datetime, page: int) -> list[dict]:
        payload = {
            "dateRangeStart": _iso_utc(start),
            "dateRangeEnd": _iso_utc(end),
            "detailedFilter": {
                "page": page,
                "pageSize": PAGE_SIZE,
            },
        }

        try:
            response = client.post(self.report_url, headers=_get_headers(self.api_key), json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise SourceUnavailableError(str(e), status=e.response.status_code) from e
        except httpx.HTTPError as e:
            raise SourceUnavailableError(str(e)) from e
        except ValueError as e:
            raise SourceUnavailableError(f"Invalid JSON in report response: {e}") from e

        if not isinstance(data, dict):
            raise SourceUnavailableError("Unexpected report response shape")
        return data.get("timeentries") or []
