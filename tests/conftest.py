"""Test fixtures for pytest."""

from unittest.mock import MagicMock

import pytest

from snobs.config import Config
from snobs.server import create_app
from snobs.utils.stash_client import PullRequestState, StashClient

GROUPS = {
    "backend": ["alice", "bob", "svc", "carol"],
    "frontend": ["dave", "erin"],
    "developers": ["carol", "alice", "dave"],
    "seniors": ["bob"],
}

PR_URL = "https://stash.example.com/projects/FOO/repos/bar/pull-requests/5"


def make_config(**overrides) -> Config:
    values = {
        "listen": ":8080",
        "stash": "stash.example.com",
        "user": "svc",
        "password": "secret",
    }
    values.update(overrides)
    return Config(**values)


@pytest.fixture
def config() -> Config:
    return make_config()


@pytest.fixture
def stash_client() -> MagicMock:
    """Stash client answering from GROUPS; PR 5 is authored by bob at version 3."""
    client = MagicMock(spec=StashClient)
    client.get_group_members.side_effect = lambda group: list(GROUPS.get(group, []))
    client.get_pull_request.return_value = PullRequestState(version=3, author="bob")
    client.update_reviewers.return_value = {}
    return client


@pytest.fixture
def app(config, stash_client):
    app = create_app(config, client=stash_client)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def http(app):
    return app.test_client()
