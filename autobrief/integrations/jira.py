"""
Jira sync adapter.

Pulls issues assigned to or reported by the user and updated in the last 30
days. Requires integration metadata with the Atlassian cloud site id
("jiraSiteId").
"""
from datetime import datetime

from autobrief.errors import ProviderSyncError
from autobrief.integrations.base import ProviderAdapter, parse_timestamp
from autobrief.logging_config import get_logger

logger = get_logger(__name__)

RECENT_ISSUES_JQL = (
    "(assignee = currentUser() OR reporter = currentUser()) "
    "AND updated >= -30d ORDER BY updated DESC"
)


class JiraAdapter(ProviderAdapter):
    provider = "jira"

    def site_url(self, integration) -> str:
        site_id = (integration.extra or {}).get("jiraSiteId")
        if not site_id or not integration.access_token:
            raise ProviderSyncError(self.provider, "Jira configuration incomplete")
        return f"{self.settings.jira_api_url}/{site_id}/rest/api/3"

    def request(self, integration, path: str, params=None, method="GET", json=None):
        return super().request(
            integration, f"{self.site_url(integration)}{path}", params=params, method=method, json=json
        )

    def sync_user_data(self, integration) -> int:
        logger.info(f"Starting Jira sync for integration {integration.id}, user {integration.user_id}")
        user = self.request(integration, "/myself")
        self.store.update_integration(
            integration.id,
            provider_username=user.get("displayName"),
            extra={**(integration.extra or {}), "jiraUser": user},
        )

        result = self.request(
            integration, "/search", params={"jql": RECENT_ISSUES_JQL, "maxResults": 50}
        )
        created = 0
        browse_base = (integration.extra or {}).get("jiraUrl")
        for issue in result.get("issues", []):
            fields = issue.get("fields") or {}
            key = issue["key"]
            if self.record_activity(
                integration,
                "jira_issue",
                key,
                title=f"{key}: {fields.get('summary', '')}",
                description=fields.get("summary"),
                timestamp=parse_timestamp(fields.get("updated")) or datetime.utcnow(),
                metadata={
                    "key": key,
                    "status": (fields.get("status") or {}).get("name"),
                    "priority": (fields.get("priority") or {}).get("name"),
                    "issueType": (fields.get("issuetype") or {}).get("name"),
                    "assignee": (fields.get("assignee") or {}).get("displayName"),
                    "reporter": (fields.get("reporter") or {}).get("displayName"),
                    "url": f"{browse_base}/browse/{key}" if browse_base else None,
                },
            ):
                created += 1
        logger.info(f"Jira sync completed: {created} new issues")
        return created
