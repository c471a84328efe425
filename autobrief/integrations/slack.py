"""
Slack sync adapter.

Pulls the last 24 hours of messages from the team channel (integration
metadata "slackChannelId", else SLACK_CHANNEL_ID) and posts daily briefs
back to it. Bot messages and messages without text are skipped. Message
text is kept in the description only; the brief just counts interactions.
"""
from datetime import datetime, timedelta
from typing import Optional

from autobrief.errors import ProviderSyncError
from autobrief.integrations.base import ProviderAdapter
from autobrief.logging_config import get_logger

logger = get_logger(__name__)

HISTORY_WINDOW = timedelta(days=1)
HISTORY_LIMIT = 50
DESCRIPTION_LIMIT = 200


class SlackAdapter(ProviderAdapter):
    provider = "slack"

    @property
    def base_url(self) -> str:
        return self.settings.slack_api_url

    def channel_for(self, integration) -> Optional[str]:
        return (integration.extra or {}).get("slackChannelId") or self.settings.slack_channel_id

    def request(self, integration, path: str, params=None, method="GET", json=None):
        # Slack answers 200 with {"ok": false} on API errors
        data = super().request(integration, path, params=params, method=method, json=json)
        if not data.get("ok"):
            raise ProviderSyncError(self.provider, f"API error: {data.get('error', 'unknown_error')}")
        return data

    def sync_user_data(self, integration) -> int:
        try:
            if not integration.access_token:
                raise ProviderSyncError(self.provider, "No access token available for Slack integration")
            created = self.sync_recent_messages(integration)
            self.sync_user_profile(integration)
        except ProviderSyncError as e:
            logger.error(f"Error syncing Slack data for integration {integration.id}: {e}")
            self.mark_disconnected(integration, e)
            raise

        self.store.update_integration(integration.id, is_connected=True)
        return created

    def sync_recent_messages(self, integration) -> int:
        channel = self.channel_for(integration)
        if not channel:
            logger.warning("SLACK_CHANNEL_ID not configured, skipping message sync")
            return 0

        oldest = datetime.now() - HISTORY_WINDOW
        history = self.request(
            integration,
            "/conversations.history",
            params={"channel": channel, "oldest": str(oldest.timestamp()), "limit": HISTORY_LIMIT},
        )

        created = 0
        for message in history.get("messages", []):
            text = message.get("text")
            ts = message.get("ts")
            if message.get("bot_id") or not text or not ts:
                continue

            description = text[:DESCRIPTION_LIMIT]
            if len(text) > DESCRIPTION_LIMIT:
                description += "..."
            if self.record_activity(
                integration,
                "slack_message",
                ts,
                title="Slack Message",
                description=description,
                timestamp=datetime.fromtimestamp(float(ts)),
                metadata={
                    "channel": channel,
                    "messageId": ts,
                    "userId": message.get("user"),
                    "reactions": message.get("reactions", []),
                    "threadTs": message.get("thread_ts"),
                    "url": f"https://slack.com/archives/{channel}/p{ts.replace('.', '')}",
                },
            ):
                created += 1
        return created

    def sync_user_profile(self, integration) -> None:
        """Store the Slack user's identity on the integration; failures are only logged."""
        try:
            auth = self.request(integration, "/auth.test")
            profile = self.request(integration, "/users.info", params={"user": auth["user_id"]})
        except (ProviderSyncError, KeyError) as e:
            logger.error(f"Error syncing Slack user profile for integration {integration.id}: {e}")
            return

        user = profile.get("user") or {}
        self.store.update_integration(
            integration.id,
            provider_user_id=auth["user_id"],
            provider_username=user.get("name"),
            extra={
                **(integration.extra or {}),
                "slackUserId": auth["user_id"],
                "slackTeamId": auth.get("team_id"),
                "slackUserName": user.get("name"),
                "slackRealName": user.get("real_name"),
                "slackAvatar": (user.get("profile") or {}).get("image_72"),
            },
        )

    def post_message(self, integration, text: str, channel: Optional[str] = None) -> dict:
        """Post a message to the given channel, or the team channel by default."""
        if not integration.access_token:
            raise ProviderSyncError(self.provider, "No access token available")
        channel = channel or self.channel_for(integration)
        if not channel:
            raise ProviderSyncError(
                self.provider, "No channel specified and SLACK_CHANNEL_ID not configured"
            )
        return self.request(
            integration,
            "/chat.postMessage",
            method="POST",
            json={"channel": channel, "text": text},
        )
