"""
GitHub sync adapter.

Pulls the user's commits (from their 10 most recently updated repositories),
pull requests and issues updated in the last 7 days.
"""
from datetime import datetime, timedelta
from typing import Dict

from autobrief.errors import ProviderSyncError
from autobrief.integrations.base import ProviderAdapter, parse_timestamp
from autobrief.logging_config import get_logger

logger = get_logger(__name__)

SYNC_WINDOW_DAYS = 7


class GitHubAdapter(ProviderAdapter):
    provider = "github"

    @property
    def base_url(self) -> str:
        return self.settings.github_api_url

    def headers(self, integration) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {integration.access_token}",
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "AutoBrief-App",
        }

    def sync_user_data(self, integration) -> int:
        if not integration.access_token:
            raise ProviderSyncError(self.provider, "No access token available for GitHub integration")

        try:
            user = self.request(integration, "/user")
        except ProviderSyncError as e:
            if e.status_code == 401:
                # Token revoked or expired
                self.mark_disconnected(integration, e)
            raise

        self.store.update_integration(
            integration.id,
            provider_username=user.get("login"),
            extra={**(integration.extra or {}), "githubUser": user},
        )

        since = datetime.utcnow() - timedelta(days=SYNC_WINDOW_DAYS)
        created = 0
        for sync in (self.sync_commits, self.sync_pull_requests, self.sync_issues):
            try:
                created += sync(integration, since)
            except ProviderSyncError as e:
                logger.error(f"Error syncing GitHub {sync.__name__} for integration {integration.id}: {e}")
        return created

    def sync_commits(self, integration, since: datetime) -> int:
        created = 0
        repos = self.request(integration, "/user/repos", params={"sort": "updated", "per_page": 10})
        for repo in repos:
            commits = self.request(
                integration,
                f"/repos/{repo['full_name']}/commits",
                params={
                    "author": integration.provider_username,
                    "since": since.isoformat() + "Z",
                    "per_page": 20,
                },
            )
            for commit in commits:
                message = commit["commit"]["message"]
                author = commit["commit"].get("author") or {}
                stats = commit.get("stats") or {}
                if self.record_activity(
                    integration,
                    "commit",
                    commit["sha"],
                    title=message.split("\n")[0],
                    description=message,
                    timestamp=parse_timestamp(author.get("date")) or datetime.utcnow(),
                    metadata={
                        "sha": commit["sha"],
                        "repository": repo["full_name"],
                        "url": commit.get("html_url"),
                        "additions": stats.get("additions", 0),
                        "deletions": stats.get("deletions", 0),
                        "author": author,
                    },
                ):
                    created += 1
        return created

    def _search(self, integration, kind: str, since: datetime):
        query = f"author:{integration.provider_username} type:{kind} updated:>{since.date().isoformat()}"
        result = self.request(
            integration, "/search/issues", params={"q": query, "sort": "updated", "per_page": 20}
        )
        return result.get("items", [])

    def _record_search_item(self, integration, activity_type: str, item) -> bool:
        return self.record_activity(
            integration,
            activity_type,
            str(item["number"]),
            title=item["title"],
            description=item.get("body") or "",
            timestamp=parse_timestamp(item.get("updated_at")) or datetime.utcnow(),
            metadata={
                "number": item["number"],
                "state": item.get("state"),
                "url": item.get("html_url"),
                "repository": "/".join(item.get("repository_url", "").split("/")[-2:]),
                "labels": [label.get("name") for label in item.get("labels", [])],
            },
        )

    def sync_pull_requests(self, integration, since: datetime) -> int:
        return sum(
            1 for pr in self._search(integration, "pr", since)
            if self._record_search_item(integration, "pr", pr)
        )

    def sync_issues(self, integration, since: datetime) -> int:
        return sum(
            1 for issue in self._search(integration, "issue", since)
            if self._record_search_item(integration, "issue", issue)
        )
