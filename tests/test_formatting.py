"""Tests for src.changelog.formatting covering the Markdown and commit renderers.

Run with coverage:
    pytest tests/test_formatting.py --maxfail=1 -v --cov=src.changelog.formatting --cov-report=term-missing
"""

import datetime as dt

import pytest

from src.changelog import formatting
from src.retrieval.commits import Commit
from src.retrieval.pull_requests import PullRequest

UTC = dt.timezone.utc


def _pr(number=7, title="Fix bug", url="http://x/7", when=dt.datetime(2021, 3, 5, tzinfo=UTC)):
    return PullRequest(number=number, title=title, html_url=url, merged_at=when, author="a", repo_name="o/r")


def test_pull_request_line():
    assert formatting.pull_request_to_markdown(_pr()) == "* [o/r#7 - Fix bug](http://x/7) on March 5th 2021"


def test_lines_joined_by_newline():
    prs = [_pr(), _pr(number=8, title="Docs", url="http://x/8", when=dt.datetime(2021, 12, 22, 23, 30, tzinfo=UTC))]
    assert formatting.pull_requests_to_markdown(prs) == (
        "* [o/r#7 - Fix bug](http://x/7) on March 5th 2021\n"
        "* [o/r#8 - Docs](http://x/8) on December 22nd 2021"
    )


def test_empty_input_is_empty_string():
    assert formatting.pull_requests_to_markdown([]) == ""


@pytest.mark.parametrize("day,expected", [
    (1, "1st"), (2, "2nd"), (3, "3rd"), (4, "4th"),
    (11, "11th"), (12, "12th"), (13, "13th"), (21, "21st"), (23, "23rd"), (31, "31st"),
])
def test_ordinal(day, expected):
    assert formatting.ordinal(day) == expected


def test_merge_date_rendered_in_utc():
    tz = dt.timezone(dt.timedelta(hours=-5))
    assert formatting.format_merge_date(dt.datetime(2021, 1, 31, 22, 0, tzinfo=tz)) == "February 1st 2021"


def test_commits_to_string():
    commits = [
        Commit(sha="abc", summary="First", date=dt.datetime(2021, 1, 1, tzinfo=UTC), author="Dev"),
        Commit(sha="def", summary="Second", date=dt.datetime(2021, 1, 2, tzinfo=UTC)),
    ]
    assert formatting.commits_to_string(commits) == "abc Dev First\ndef unknown Second"


class _FrenchDatetime(dt.datetime):
    def strftime(self, fmt):
        return fmt.replace("%B", "mars")


def test_month_names_ignore_process_locale():
    assert formatting.format_merge_date(_FrenchDatetime(2021, 3, 5, tzinfo=UTC)) == "March 5th 2021"
    assert formatting.MONTH_NAMES[0] == "January"
    assert formatting.MONTH_NAMES[-1] == "December"
