"""Commit diff between two refs, read from a local clone or the compare API."""

from __future__ import annotations

import datetime as dt
import os
import re
import subprocess
import sys
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from .config import COMPARE_COMMITS_CAP, GIT_BINARY
from .http_client import GitHubClient
from .timestamps import from_unix, parse_github_timestamp

LOG_FORMAT = "%H %ct %s"
LOG_LINE_RE = re.compile(r"^([0-9a-f]+) (\d+)(?: (.*))?$")


class GitCommandError(RuntimeError):
    """Raised when a git subprocess exits with a non-zero status."""

    def __init__(self, args: Sequence[str], returncode: int, stderr: str = "") -> None:
        super().__init__(f"git {' '.join(args)} exited with {returncode}: {stderr.strip()}")
        self.args_list = list(args)
        self.returncode = returncode
        self.stderr = stderr


class CommitRecordError(ValueError):
    """Raised when a compare-endpoint commit lacks the fields a Commit needs."""


def origin_matches(remote: str, owner: str, repo: str) -> bool:
    """True when `remote` is `...:owner/repo.git` or `.../owner/repo.git`, nothing looser."""
    pattern = rf"[:/]{re.escape(owner)}/{re.escape(repo)}\.git$"
    return re.search(pattern, remote.strip()) is not None


@dataclass(frozen=True)
class Commit:
    """One commit of a diff; `date` is the ordering key."""

    sha: str
    summary: str
    date: dt.datetime
    message: Optional[str] = None
    author: Optional[str] = None


def one_line(msg: Optional[str]) -> str:
    """Return the first line of a commit message."""
    if not msg:
        return ""
    return msg.split("\n", 1)[0].rstrip("\r")


def commit_from_api(record: Dict[str, Any]) -> Commit:
    """Build a Commit from a compare-endpoint entry."""
    detail = record.get("commit") or {}
    message = detail.get("message") or ""
    committed = parse_github_timestamp((detail.get("committer") or {}).get("date"))
    if committed is None:
        raise CommitRecordError(f"commit {record.get('sha')} has no committer date")
    return Commit(
        sha=record["sha"],
        summary=one_line(message),
        message=message,
        date=committed,
        author=(detail.get("author") or {}).get("name"),
    )


def normalize_commits(records: Iterable[Union[Commit, Dict[str, Any]]]) -> List[Commit]:
    """Drop repeated shas (first one wins) and sort by date, keeping ties in input order."""
    seen = set()
    commits: List[Commit] = []
    for record in records:
        commit = record if isinstance(record, Commit) else commit_from_api(record)
        if commit.sha in seen:
            continue
        seen.add(commit.sha)
        commits.append(commit)
    commits.sort(key=lambda c: c.date)
    return commits


def parse_log_output(output: str) -> List[Commit]:
    """Parse `git log --format='%H %ct %s'` output into unordered commits."""
    commits: List[Commit] = []
    for line in output.splitlines():
        line = line.strip()
        if not line:
            continue
        match = LOG_LINE_RE.match(line)
        if not match:
            print(f"[warn] skipping unparseable git log line: {line!r}", file=sys.stderr)
            continue
        sha, timestamp, summary = match.groups()
        commits.append(Commit(sha=sha, summary=summary or "", date=from_unix(timestamp)))
    return commits


class CommitSource:
    """A place commits can come from; `fetch` returns None when it does not apply."""

    name = "source"

    def fetch(self, owner: str, repo: str, base: str, head: str) -> Optional[List[Commit]]:
        raise NotImplementedError


class LocalCommitSource(CommitSource):
    """Reads the diff from an on-disk clone whose origin is `owner/repo`."""

    name = "local"

    def __init__(self, clone_path: str, git_binary: str = GIT_BINARY) -> None:
        self.clone_path = os.path.expanduser(clone_path)
        self.git_binary = git_binary

    def _git(self, *args: str) -> subprocess.CompletedProcess:
        git_dir_params = ["--git-dir", os.path.join(self.clone_path, ".git"), "--work-tree", self.clone_path]
        return subprocess.run(
            [self.git_binary, *git_dir_params, *args],
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )

    def remote_url(self) -> Optional[str]:
        """Return `remote.origin.url` of the clone, or None when it cannot be read."""
        if not os.path.isdir(self.clone_path):
            print(f"[warn] local clone {self.clone_path} does not exist", file=sys.stderr)
            return None
        try:
            result = self._git("config", "--get", "remote.origin.url")
        except FileNotFoundError:
            print(f"[warn] {self.git_binary} executable not found", file=sys.stderr)
            return None
        if result.returncode != 0:
            print(f"[warn] no origin remote configured in {self.clone_path}", file=sys.stderr)
            return None
        return result.stdout.strip()

    def fetch(self, owner: str, repo: str, base: str, head: str) -> Optional[List[Commit]]:
        remote = self.remote_url()
        if remote is None or not origin_matches(remote, owner, repo):
            return None

        args = ["log", f"--format={LOG_FORMAT}", f"{base}...{head}"]
        result = self._git(*args)
        if result.returncode != 0:
            raise GitCommandError(args, result.returncode, result.stderr)
        return normalize_commits(parse_log_output(result.stdout))


class RemoteCommitSource(CommitSource):
    """Reads the diff from the compare endpoint; GitHub caps it at ~250 commits."""

    name = "remote"

    def __init__(self, client: GitHubClient) -> None:
        self.client = client

    def fetch(self, owner: str, repo: str, base: str, head: str) -> Optional[List[Commit]]:
        url = self.client.url(f"repos/{owner}/{repo}/compare/{base}...{head}")
        payload = self.client.get_json(url) or {}
        records = payload.get("commits") or []
        total = payload.get("total_commits")
        if isinstance(total, int) and total > len(records):
            print(
                f"[warn] compare {base}...{head} returned {len(records)} of {total} commits "
                f"(API limit is about {COMPARE_COMMITS_CAP})",
                file=sys.stderr,
            )
        return normalize_commits(records)


def commit_sources(client: GitHubClient, local_clone: Optional[str] = None) -> List[CommitSource]:
    """Sources in priority order: the local clone when given, then the API."""
    sources: List[CommitSource] = []
    if local_clone:
        sources.append(LocalCommitSource(local_clone))
    sources.append(RemoteCommitSource(client))
    return sources


def get_commit_diff(owner: str, repo: str, base: str, head: str,
                    sources: Sequence[CommitSource]) -> List[Commit]:
    """Return the normalized diff from the first source that applies."""
    for source in sources:
        commits = source.fetch(owner, repo, base, head)
        if commits is None:
            print(f"[warn] cannot fetch {source.name} commit diff for {owner}/{repo}", file=sys.stderr)
            continue
        where = "local" if source.name == "local" else "from the GitHub API"
        print(f"[info] found {len(commits)} commits {where}", file=sys.stderr)
        return commits
    raise RuntimeError(f"no commit source available for {owner}/{repo}")


__all__ = [
    "Commit",
    "CommitSource",
    "CommitRecordError",
    "GitCommandError",
    "LocalCommitSource",
    "RemoteCommitSource",
    "commit_from_api",
    "commit_sources",
    "get_commit_diff",
    "normalize_commits",
    "one_line",
    "origin_matches",
    "parse_log_output",
]
