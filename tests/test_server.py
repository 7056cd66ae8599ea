"""Tests for request routing."""

import logging

import pytest

from snobs.errors import BadRequest, UpstreamUnavailable
from snobs.server import USAGE, create_app, split_request_path
from snobs.utils.stash_client import PullRequestState

from conftest import PR_URL, make_config


class TestSplitRequestPath:
    def test_single_segment_is_group(self):
        assert split_request_path("/teamX") == ("teamX", None)

    def test_trailing_slash_is_ignored(self):
        assert split_request_path("/teamX/") == ("teamX", None)

    def test_remainder_keeps_slashes(self):
        assert split_request_path(f"/teamX/{PR_URL}") == ("teamX", PR_URL)

    def test_empty_path_is_bad_request(self):
        with pytest.raises(BadRequest):
            split_request_path("/")


class TestListUsers:
    def test_lists_group_members(self, http):
        response = http.get("/backend")

        assert response.status_code == 200
        assert response.get_json() == ["alice", "bob", "svc", "carol"]

    def test_unknown_group_lists_nobody(self, http):
        response = http.get("/nobody")

        assert response.status_code == 200
        assert response.get_json() == []

    def test_second_request_is_served_from_cache(self, http, stash_client):
        http.get("/backend")
        response = http.get("/backend")

        assert response.get_json() == ["alice", "bob", "svc", "carol"]
        stash_client.get_group_members.assert_called_once_with("backend")

    def test_upstream_failure_in_strict_mode_is_server_error(self, stash_client):
        stash_client.get_group_members.side_effect = UpstreamUnavailable("503 Service Unavailable")
        app = create_app(make_config(strict_groups=True), client=stash_client)

        response = app.test_client().get("/backend")

        assert response.status_code == 500
        assert response.mimetype == "text/plain"
        assert response.get_data(as_text=True) == "503 Service Unavailable"

    def test_upstream_failure_is_empty_list_by_default(self, http, stash_client):
        stash_client.get_group_members.side_effect = UpstreamUnavailable("503 Service Unavailable")

        response = http.get("/backend")

        assert response.status_code == 200
        assert response.get_json() == []

    def test_request_is_logged(self, http, caplog):
        with caplog.at_level(logging.INFO, logger="snobs.server"):
            http.get("/backend")

        assert "127.0.0.1: /backend" in caplog.text


class TestAssignReviewers:
    def test_assigns_group_without_author_and_own_account(self, http, stash_client):
        response = http.get(f"/backend/{PR_URL}")

        assert response.status_code == 200
        assert response.get_json() == {"success": True}
        stash_client.get_pull_request.assert_called_once_with("FOO", "bar", "5")
        stash_client.update_reviewers.assert_called_once_with(
            "FOO", "bar", "5", version=3, reviewers=["alice", "carol"],
        )

    def test_intersects_with_configured_groups(self, stash_client):
        app = create_app(make_config(intersect=["developers", "frontend"]), client=stash_client)

        response = app.test_client().get(f"/backend/{PR_URL}")

        assert response.status_code == 200
        stash_client.update_reviewers.assert_called_once_with(
            "FOO", "bar", "5", version=3, reviewers=["alice", "carol"],
        )
        requested = [c.args[0] for c in stash_client.get_group_members.call_args_list]
        assert requested == ["backend", "developers", "frontend"]

    def test_intersection_can_leave_nobody(self, stash_client):
        app = create_app(make_config(intersect=["frontend"]), client=stash_client)

        response = app.test_client().get(f"/backend/{PR_URL}")

        assert response.status_code == 200
        assert stash_client.update_reviewers.call_args.kwargs["reviewers"] == []

    def test_invalid_pull_request_url_is_bad_request(self, http, stash_client):
        response = http.get("/backend/https://stash.example.com/projects/FOO/repos/bar")

        assert response.status_code == 400
        assert response.mimetype == "text/plain"
        stash_client.update_reviewers.assert_not_called()

    def test_three_segments_is_bad_request(self, http, stash_client):
        response = http.get("/a/b/c")

        assert response.status_code == 400
        stash_client.get_pull_request.assert_not_called()

    def test_group_failure_in_strict_mode_is_bad_request(self, stash_client):
        stash_client.get_group_members.side_effect = UpstreamUnavailable("503 Service Unavailable")
        app = create_app(make_config(strict_groups=True), client=stash_client)

        response = app.test_client().get(f"/backend/{PR_URL}")

        assert response.status_code == 400
        stash_client.get_pull_request.assert_not_called()

    def test_pull_request_read_failure_is_server_error(self, http, stash_client):
        stash_client.get_pull_request.side_effect = UpstreamUnavailable("404 Not Found")

        response = http.get(f"/backend/{PR_URL}")

        assert response.status_code == 500
        assert response.get_data(as_text=True) == "404 Not Found"

    def test_stale_version_is_server_error(self, http, stash_client):
        stash_client.get_pull_request.return_value = PullRequestState(version=1, author="dave")
        stash_client.update_reviewers.side_effect = UpstreamUnavailable("409 Conflict")

        response = http.get(f"/backend/{PR_URL}")

        assert response.status_code == 500
        stash_client.update_reviewers.assert_called_once()

    def test_post_is_accepted(self, http, stash_client):
        response = http.post(f"/backend/{PR_URL}")

        assert response.status_code == 200
        stash_client.update_reviewers.assert_called_once()


class TestBadRequests:
    def test_root_is_bad_request_with_usage(self, http, stash_client):
        response = http.get("/")

        assert response.status_code == 400
        assert response.get_data(as_text=True) == USAGE
        stash_client.get_group_members.assert_not_called()
