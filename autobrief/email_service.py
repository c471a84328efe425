"""
Email delivery of daily briefs through the Resend API.

The Markdown brief is split into blocks (headings, bullets, text lines) and
rendered with a Jinja2 template. Delivery problems are logged and reported
as a None result; they never raise to the caller.
"""
import re
from datetime import date
from typing import Dict, List, Optional

import requests
from jinja2 import Environment, PackageLoader, select_autoescape
from markupsafe import Markup, escape

from autobrief.config import Settings
from autobrief.logging_config import get_logger
from autobrief.services.aggregation import parse_date

logger = get_logger(__name__)

_BOLD = re.compile(r"\*\*(.*?)\*\*")

_env = Environment(
    loader=PackageLoader("autobrief", "templates"),
    autoescape=select_autoescape(["html"]),
)


def email_date(day: date) -> str:
    """'Saturday, January 18, 2025' style date for subjects."""
    return f"{day:%A}, {day:%B} {day.day}, {day.year}"


def summary_blocks(summary: str) -> List[Dict]:
    """Split a Markdown brief into blocks for the email template."""
    blocks = []
    for line in summary.split("\n"):
        if line.startswith("# "):
            blocks.append({"kind": "h1", "text": line[2:]})
        elif line.startswith("## "):
            blocks.append({"kind": "h2", "text": line[3:]})
        elif line.startswith("   • "):
            blocks.append({"kind": "bullet", "text": line[5:]})
        elif not line.strip():
            blocks.append({"kind": "blank"})
        else:
            # Bold markers become <strong>; everything else is escaped
            html = _BOLD.sub(lambda m: f"<strong>{m.group(1)}</strong>", str(escape(line)))
            blocks.append({"kind": "text", "html": Markup(html)})
    return blocks


def render_summary_html(summary: str, formatted_date: str) -> str:
    template = _env.get_template("email/daily_summary.html")
    return template.render(blocks=summary_blocks(summary), formatted_date=formatted_date)


class EmailService:
    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.api_key = settings.resend_api_key
        self.api_url = settings.resend_api_url
        self.sender = settings.email_from
        self.timeout = settings.http_timeout
        self.session = session or requests.Session()

    def send_daily_summary(self, user_email: str, summary: str, summary_date: str) -> Optional[dict]:
        """
        Email a daily brief.

        Returns:
            The Resend API response body, or None when email is not configured
            or sending failed.
        """
        logger.info(f"Attempting to send email to {user_email} for date {summary_date}")

        if not self.api_key:
            logger.info("Resend API key not configured, skipping email")
            return None

        try:
            formatted_date = email_date(parse_date(summary_date))
            html = render_summary_html(summary, formatted_date)
            response = self.session.post(
                self.api_url,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json={
                    "from": self.sender,
                    "to": [user_email],
                    "subject": f"Daily Brief - {formatted_date}",
                    "html": html,
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            result = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error(f"Error sending email to {user_email}: {e}")
            return None

        logger.info(f"Daily summary email sent to {user_email}")
        return result
