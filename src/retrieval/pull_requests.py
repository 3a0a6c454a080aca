"""Merged pull requests inside a date window, with an early-stop page filter."""

from __future__ import annotations

import datetime as dt
import sys
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Union

from .config import MAX_PAGES_PRS
from .http_client import GitHubClient, PageFilter
from .timestamps import parse_github_timestamp


@dataclass(frozen=True)
class PullRequest:
    """A merged pull request; `merged_at` is the ordering key."""

    number: int
    title: str
    html_url: str
    merged_at: dt.datetime
    author: Optional[str]
    repo_name: str


def merged_at(record: Dict[str, Any]) -> Optional[dt.datetime]:
    return parse_github_timestamp(record.get("merged_at"))


def merged_after_page_filter(from_date: dt.datetime) -> PageFilter:
    """Keep merged PRs newer than `from_date`; return None to stop paging.

    Pages are ordered by update time, not merge time, so stopping on a page
    whose merged PRs are all older than `from_date` is an approximation. It
    avoids walking the whole closed-PR history.
    """

    def page_filter(page: List[Dict[str, Any]]) -> Optional[List[Dict[str, Any]]]:
        merged = [pr for pr in page if merged_at(pr) is not None]
        if not merged:
            return merged

        in_window = [pr for pr in merged if merged_at(pr) > from_date]
        if not in_window:
            return None
        return in_window

    return page_filter


def fetch_merged_pull_requests(client: GitHubClient,
                               owner: str,
                               repo: str,
                               from_date: dt.datetime,
                               to_date: dt.datetime,
                               *,
                               page_filter: Optional[PageFilter] = None,
                               max_pages: int = MAX_PAGES_PRS) -> List[Dict[str, Any]]:
    """Raw PR records with from_date < merged_at < to_date (unordered)."""
    url = client.url(f"repos/{owner}/{repo}/pulls?state=closed&sort=updated&direction=desc")
    page_filter = page_filter or merged_after_page_filter(from_date)
    candidates = client.paged_get(url, page_filter=page_filter, max_pages=max_pages)
    return [pr for pr in candidates if merged_at(pr) is not None and merged_at(pr) < to_date]


def pull_request_from_api(record: Dict[str, Any]) -> Optional[PullRequest]:
    merged = merged_at(record)
    if merged is None:
        return None
    return PullRequest(
        number=int(record["number"]),
        title=record.get("title") or "",
        html_url=record.get("html_url") or "",
        merged_at=merged,
        author=(record.get("user") or {}).get("login"),
        repo_name=((record.get("base") or {}).get("repo") or {}).get("full_name") or "",
    )


def normalize_pull_requests(records: Iterable[Union[PullRequest, Dict[str, Any]]]) -> List[PullRequest]:
    """Shape raw records into PullRequest and sort by merge time (stable on ties)."""
    pull_requests: List[PullRequest] = []
    for record in records:
        pr = record if isinstance(record, PullRequest) else pull_request_from_api(record)
        if pr is not None:
            pull_requests.append(pr)
    pull_requests.sort(key=lambda pr: pr.merged_at)
    return pull_requests


def get_pull_requests_between_dates(client: GitHubClient,
                                    owner: str,
                                    repo: str,
                                    from_date: dt.datetime,
                                    to_date: dt.datetime) -> List[PullRequest]:
    raw = fetch_merged_pull_requests(client, owner, repo, from_date, to_date)
    pull_requests = normalize_pull_requests(raw)
    print(f"[info] found {len(pull_requests)} merged PRs", file=sys.stderr)
    return pull_requests


__all__ = [
    "PullRequest",
    "fetch_merged_pull_requests",
    "get_pull_requests_between_dates",
    "merged_after_page_filter",
    "normalize_pull_requests",
    "pull_request_from_api",
]
