"""Tests for src.changelog.correlate covering merge-commit matching.

Run with coverage:
    pytest tests/test_correlate.py --maxfail=1 -v --cov=src.changelog.correlate --cov-report=term-missing
"""

import datetime as dt

from src.changelog import correlate
from src.retrieval.commits import Commit
from src.retrieval.pull_requests import PullRequest

UTC = dt.timezone.utc


def _commit(sha, summary, day):
    return Commit(sha=sha, summary=summary, date=dt.datetime(2021, 3, day, tzinfo=UTC))


def _pr(number, day):
    return PullRequest(
        number=number,
        title=f"PR {number}",
        html_url=f"https://github.com/o/r/pull/{number}",
        merged_at=dt.datetime(2021, 3, day, tzinfo=UTC),
        author="dev",
        repo_name="o/r",
    )


def test_match_merge_commit():
    assert correlate.match_merge_commit("Merge pull request #42 from x/y") == 42
    assert correlate.match_merge_commit("Merge branch 'main' into feature") is None
    assert correlate.match_merge_commit("Fix #42") is None
    assert correlate.match_merge_commit("") is None
    assert correlate.match_merge_commit(None) is None


def test_known_pull_request_is_kept():
    commits = [_commit("a", "Merge pull request #42 from x/y", 5)]
    result = correlate.filter_pull_requests_by_commits([_pr(42, 5), _pr(43, 6)], commits)
    assert [pr.number for pr in result] == [42]


def test_unknown_pull_request_is_skipped_with_warning(capsys):
    commits = [_commit("a", "Merge pull request #99 from x/y", 5)]
    result = correlate.filter_pull_requests_by_commits([_pr(42, 5)], commits)
    assert result == []
    err = capsys.readouterr().err
    assert "No PR found for 99" in err
    assert "Merge pull request #99 from x/y" in err


def test_squash_merges_are_excluded():
    commits = [_commit("a", "Add feature (#12)", 5), _commit("b", "Merge pull request #13 from x/z", 6)]
    result = correlate.filter_pull_requests_by_commits([_pr(12, 5), _pr(13, 6)], commits)
    assert [pr.number for pr in result] == [13]


def test_result_is_ordered_by_merge_time_not_commit_order():
    commits = [
        _commit("a", "Merge pull request #2 from x/b", 3),
        _commit("b", "Merge pull request #1 from x/a", 4),
    ]
    result = correlate.filter_pull_requests_by_commits([_pr(1, 2), _pr(2, 9)], commits)
    assert [pr.number for pr in result] == [1, 2]
