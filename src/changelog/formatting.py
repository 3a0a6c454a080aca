"""Render commits and pull requests as text."""

from __future__ import annotations

import datetime as dt
from typing import Sequence

from src.retrieval.commits import Commit
from src.retrieval.pull_requests import PullRequest


MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def ordinal(day: int) -> str:
    if 10 <= day % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def format_merge_date(value: dt.datetime) -> str:
    """`March 5th 2021`, computed in UTC."""
    value = value.astimezone(dt.timezone.utc) if value.tzinfo else value
    return f"{MONTH_NAMES[value.month - 1]} {ordinal(value.day)} {value.year}"


def pull_request_to_markdown(pr: PullRequest) -> str:
    return (
        f"* [{pr.repo_name}#{pr.number} - {pr.title}]({pr.html_url}) "
        f"on {format_merge_date(pr.merged_at)}"
    )


def pull_requests_to_markdown(pull_requests: Sequence[PullRequest]) -> str:
    return "\n".join(pull_request_to_markdown(pr) for pr in pull_requests)


def commits_to_string(commits: Sequence[Commit]) -> str:
    """One `<sha> <author> <summary>` line per commit."""
    return "\n".join(f"{c.sha} {c.author or 'unknown'} {c.summary}" for c in commits)


__all__ = [
    "MONTH_NAMES",
    "commits_to_string",
    "format_merge_date",
    "ordinal",
    "pull_request_to_markdown",
    "pull_requests_to_markdown",
]
