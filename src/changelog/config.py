"""Command-line parsing for the changelog entry point."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class ChangelogSettings:
    """Resolved runtime settings for one changelog run."""

    owner: str
    repo: str
    from_tag: str
    to_tag: str
    local_clone: Optional[str]
    show_commits: bool


def build_arg_parser() -> argparse.ArgumentParser:
    """Return the CLI parser used by the changelog entry point."""

    parser = argparse.ArgumentParser(
        description="List the merged pull requests between two tags as Markdown.",
    )
    parser.add_argument("repository", help="GitHub repository as owner/repo")
    parser.add_argument("from_tag", help="older ref (base)")
    parser.add_argument("to_tag", help="newer ref (head)")
    parser.add_argument("--local-clone", default=None,
                        help="path to a local clone used instead of the compare API")
    parser.add_argument("--show-commits", action="store_true",
                        help="also print the commit diff before the changelog")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments; accepts argv overrides for testing."""

    parser = build_arg_parser()
    args = parser.parse_args(argv)
    owner, _, repo = args.repository.partition("/")
    if not owner or not repo or "/" in repo:
        parser.error(f"repository must look like owner/repo, got {args.repository!r}")
    return args


def resolve_settings(args: argparse.Namespace) -> ChangelogSettings:
    owner, repo = args.repository.split("/", 1)
    return ChangelogSettings(
        owner=owner,
        repo=repo,
        from_tag=args.from_tag,
        to_tag=args.to_tag,
        local_clone=args.local_clone,
        show_commits=bool(args.show_commits),
    )


__all__ = ["ChangelogSettings", "build_arg_parser", "parse_args", "resolve_settings"]
