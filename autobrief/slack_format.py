"""
Slack rendering of the daily brief.

Slack mrkdwn has no headings and uses single asterisks for bold, so headings
and **bold** runs both become *bold*, and bullets lose one space of indent.
"""
import re

_H1 = re.compile(r"^# (.*)$", re.MULTILINE)
_H2 = re.compile(r"^## (.*)$", re.MULTILINE)
_BOLD = re.compile(r"\*\*(.*?)\*\*", re.MULTILINE)
_BULLET = re.compile(r"^   • (.*)$", re.MULTILINE)


def to_slack_markdown(brief: str) -> str:
    text = _H1.sub(r"*\1*", brief)
    text = _H2.sub(r"*\1*", text)
    text = _BOLD.sub(r"*\1*", text)
    return _BULLET.sub(r"  • \1", text)
