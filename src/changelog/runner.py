"""Entry points tying commit diff, PR window, correlation and rendering together."""

from __future__ import annotations

import sys
from typing import List, Optional, Sequence

from src.retrieval.commits import (
    Commit,
    CommitRecordError,
    CommitSource,
    GitCommandError,
    commit_sources,
    get_commit_diff,
)
from src.retrieval.http_client import GitHubAPIError, GitHubClient
from src.retrieval.pull_requests import get_pull_requests_between_dates
from src.retrieval.timestamps import to_github_timestamp

from .config import parse_args, resolve_settings
from .correlate import filter_pull_requests_by_commits
from .formatting import commits_to_string, pull_requests_to_markdown


class NoCommitsInRangeError(RuntimeError):
    """Raised when base...head contains no commits, leaving no date window."""

    def __init__(self, owner: str, repo: str, base: str, head: str) -> None:
        super().__init__(f"no commits in range {base}...{head} on {owner}/{repo}")
        self.owner = owner
        self.repo = repo
        self.base = base
        self.head = head


def changelog_from_commits(client: GitHubClient,
                           owner: str,
                           repo: str,
                           commits: Sequence[Commit]) -> str:
    """Render the changelog for an already normalized, non-empty commit diff."""
    from_date = commits[0].date
    to_date = commits[-1].date
    print(
        f"[info] fetching PRs between dates {to_github_timestamp(from_date)} {to_github_timestamp(to_date)}",
        file=sys.stderr,
    )
    pull_requests = get_pull_requests_between_dates(client, owner, repo, from_date, to_date)
    pull_requests = filter_pull_requests_by_commits(pull_requests, commits)
    return pull_requests_to_markdown(pull_requests)


def get_commits_between_tags(owner: str,
                             repo: str,
                             from_tag: str,
                             to_tag: str,
                             local_clone: Optional[str] = None,
                             client: Optional[GitHubClient] = None,
                             sources: Optional[Sequence[CommitSource]] = None) -> List[Commit]:
    """Normalized commit diff; raises NoCommitsInRangeError when it is empty."""
    client = client or GitHubClient()
    sources = sources if sources is not None else commit_sources(client, local_clone)
    commits = get_commit_diff(owner, repo, from_tag, to_tag, sources)
    if not commits:
        raise NoCommitsInRangeError(owner, repo, from_tag, to_tag)
    return commits


def get_formatted_pull_requests_between_tags(owner: str,
                                             repo: str,
                                             from_tag: str,
                                             to_tag: str,
                                             local_clone: Optional[str] = None,
                                             client: Optional[GitHubClient] = None) -> str:
    """Markdown list of the PRs merged between `from_tag` and `to_tag`."""
    print(f"[info] comparing refs {from_tag} {to_tag} on repo {owner}/{repo}", file=sys.stderr)
    if local_clone:
        print(f"[info] local clone of repo {local_clone}", file=sys.stderr)

    client = client or GitHubClient()
    commits = get_commits_between_tags(owner, repo, from_tag, to_tag, local_clone, client)
    return changelog_from_commits(client, owner, repo, commits)


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point; prints the changelog to stdout and returns an exit code."""

    settings = resolve_settings(parse_args(argv))
    client = GitHubClient()
    try:
        if settings.show_commits:
            commits = get_commits_between_tags(
                settings.owner, settings.repo, settings.from_tag, settings.to_tag,
                settings.local_clone, client,
            )
            changelog = changelog_from_commits(client, settings.owner, settings.repo, commits)
            output = f"{commits_to_string(commits)}\n\n{changelog}"
        else:
            output = get_formatted_pull_requests_between_tags(
                settings.owner, settings.repo, settings.from_tag, settings.to_tag,
                settings.local_clone, client,
            )
    except (NoCommitsInRangeError, GitCommandError, GitHubAPIError, CommitRecordError) as exc:
        print(f"[error] {exc}", file=sys.stderr)
        return 1
    print(output)
    return 0


__all__ = [
    "NoCommitsInRangeError",
    "changelog_from_commits",
    "get_commits_between_tags",
    "get_formatted_pull_requests_between_tags",
    "main",
]
