"""Tests for src.changelog.config covering CLI parsing.

Run with coverage:
    pytest tests/test_changelog_config.py --maxfail=1 -v --cov=src.changelog.config --cov-report=term-missing
"""

import pytest

from src.changelog import config


def test_resolve_settings_from_cli():
    args = config.parse_args(["o/r", "v1.0.0", "v1.1.0", "--local-clone", "~/src/r", "--show-commits"])
    settings = config.resolve_settings(args)
    assert settings == config.ChangelogSettings(
        owner="o",
        repo="r",
        from_tag="v1.0.0",
        to_tag="v1.1.0",
        local_clone="~/src/r",
        show_commits=True,
    )


def test_defaults():
    settings = config.resolve_settings(config.parse_args(["o/r", "a", "b"]))
    assert settings.local_clone is None
    assert settings.show_commits is False


@pytest.mark.parametrize("repository", ["norepo", "o/", "/r", "o/r/extra"])
def test_rejects_malformed_repository(repository):
    with pytest.raises(SystemExit) as excinfo:
        config.parse_args([repository, "a", "b"])
    assert excinfo.value.code == 2
