"""Match pull requests to the merge commits that brought them in."""

from __future__ import annotations

import re
import sys
from typing import Dict, List, Optional, Sequence

from src.retrieval.commits import Commit
from src.retrieval.pull_requests import PullRequest, normalize_pull_requests

MERGE_COMMIT_RE = re.compile(r"Merge pull request #(\d+)")


def match_merge_commit(summary: Optional[str]) -> Optional[int]:
    """Return N from a "Merge pull request #N ..." summary, else None."""
    if not summary:
        return None
    match = MERGE_COMMIT_RE.search(summary)
    return int(match.group(1)) if match else None


def filter_pull_requests_by_commits(pull_requests: Sequence[PullRequest],
                                    commits: Sequence[Commit]) -> List[PullRequest]:
    """Keep PRs referenced by a merge commit of the diff, ordered by merge time.

    Squash and rebase merges leave no merge commit and are therefore dropped.
    """
    by_number: Dict[int, PullRequest] = {pr.number: pr for pr in pull_requests}
    matched: List[PullRequest] = []
    for commit in commits:
        number = match_merge_commit(commit.summary)
        if number is None:
            continue
        pr = by_number.get(number)
        if pr is None:
            print(f"[warn] No PR found for {number}; Commit text: {commit.summary}", file=sys.stderr)
            continue
        matched.append(pr)
    return normalize_pull_requests(matched)


__all__ = ["MERGE_COMMIT_RE", "match_merge_commit", "filter_pull_requests_by_commits"]
