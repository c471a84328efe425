"""
Provider adapter base class.

An adapter fetches recent work from one provider's API and writes it to the
ActivityStore as WorkActivity rows. The store skips activities that already
exist for (user_id, activity_type, external_id), so re-syncing is safe.
"""
from datetime import datetime
from typing import Dict, Optional

import requests

from autobrief.config import Settings
from autobrief.errors import ProviderSyncError
from autobrief.logging_config import get_logger
from autobrief.models.work_activity import TITLE_MAX_LENGTH

logger = get_logger(__name__)


class ProviderAdapter:
    """Base class for provider sync adapters."""

    provider: str = ""
    base_url: str = ""

    def __init__(self, store, settings: Settings, session: Optional[requests.Session] = None):
        self.store = store
        self.settings = settings
        self.timeout = settings.http_timeout
        self.session = session or requests.Session()

    def headers(self, integration) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {integration.access_token}",
            "Accept": "application/json",
        }

    def request(
        self,
        integration,
        path: str,
        params: Optional[dict] = None,
        method: str = "GET",
        json: Optional[dict] = None,
    ):
        """Call a provider endpoint and return the decoded JSON body."""
        url = path if path.startswith("http") else f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method,
                url,
                headers=self.headers(integration),
                params=params,
                json=json,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise ProviderSyncError(self.provider, f"request failed: {e}") from e

        if not response.ok:
            raise ProviderSyncError(
                self.provider,
                f"API error: {response.status_code} {response.reason}",
                status_code=response.status_code,
            )
        return response.json()

    def sync_user_data(self, integration) -> int:
        """
        Pull recent activity for an integration into the store.

        Returns:
            Number of activities created.
        """
        raise NotImplementedError("Subclasses must implement sync_user_data")

    def mark_disconnected(self, integration, error: ProviderSyncError) -> None:
        self.store.update_integration(
            integration.id, is_connected=False, last_sync_at=datetime.utcnow()
        )
        error.disconnected = True

    def record_activity(self, integration, activity_type: str, external_id: str, **fields) -> bool:
        """Create an activity unless it already exists. Returns True when created."""
        if self.store.find_work_activity(integration.user_id, activity_type, external_id):
            return False
        title = fields.get("title")
        if title and len(title) > TITLE_MAX_LENGTH:
            fields["title"] = title[:TITLE_MAX_LENGTH - 3] + "..."
        self.store.create_work_activity(
            user_id=integration.user_id,
            integration_id=integration.id,
            provider=self.provider,
            activity_type=activity_type,
            external_id=external_id,
            **fields,
        )
        return True


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp from a provider API into a naive datetime."""
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    # Jira uses +0000 style offsets
    if len(value) > 5 and value[-5] in "+-" and value[-3] != ":":
        value = value[:-2] + ":" + value[-2:]
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed
