"""
Notion sync adapter.

Notion has no activity feed to import yet; a sync verifies the token and
keeps the workspace user on the integration metadata.
"""
from typing import Dict

from autobrief.errors import ProviderSyncError
from autobrief.integrations.base import ProviderAdapter
from autobrief.logging_config import get_logger

logger = get_logger(__name__)


class NotionAdapter(ProviderAdapter):
    provider = "notion"

    @property
    def base_url(self) -> str:
        return self.settings.notion_api_url

    def headers(self, integration) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {integration.access_token}",
            "Content-Type": "application/json",
            "Notion-Version": self.settings.notion_version,
        }

    def sync_user_data(self, integration) -> int:
        logger.info(f"Starting Notion sync for integration {integration.id}, user {integration.user_id}")
        if not integration.access_token:
            raise ProviderSyncError(self.provider, "No access token available for Notion integration")

        user = self.request(integration, "/users/me")
        self.store.update_integration(
            integration.id,
            provider_username=user.get("name"),
            extra={**(integration.extra or {}), "notionUser": user},
        )
        logger.info("Notion sync completed successfully")
        return 0
