"""Markdown changelog of merged pull requests between two tags."""

from .runner import get_formatted_pull_requests_between_tags, main

__all__ = ["get_formatted_pull_requests_between_tags", "main"]
