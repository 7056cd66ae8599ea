"""
HTTP front end of the relay.

Two request shapes are served:

    /<group>                      list the members of a Stash group
    /<group>/<pull request url>   add the group members as reviewers

Everything after the first path segment is the pull request URL, slashes
included, e.g. ``/developers/https://stash/projects/FOO/repos/bar/pull-requests/5``.
"""

import logging
from typing import List, Optional, Tuple

from flask import Flask, Response, jsonify, request

from snobs.config import Config
from snobs.errors import BadRequest, InvalidURL, UpstreamUnavailable
from snobs.utils.group_resolver import GroupResolver, MembershipCache
from snobs.utils.pull_request_url import parse_pull_request_url
from snobs.utils.reviewer_assigner import ReviewerAssigner
from snobs.utils.stash_client import StashClient

logger = logging.getLogger(__name__)

USAGE = "%group%(/%pull-request%)?"


def split_request_path(path: str) -> Tuple[str, Optional[str]]:
    """
    Split a request path into the group name and the optional pull request URL.

    Raises:
        BadRequest: if the path names no group
    """
    parts = path.strip("/").split("/", 1)
    if not parts[0]:
        raise BadRequest(USAGE)

    if len(parts) == 2:
        return parts[0], parts[1]
    return parts[0], None


def _error(message: str, status: int) -> Response:
    return Response(message, status=status, mimetype="text/plain")


def create_app(config: Config, client: Optional[StashClient] = None) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        config: Relay configuration
        client: Stash client to use instead of one built from ``config``
    """
    # no static route: every path names a group
    app = Flask(__name__, static_folder=None)
    # pull request URLs carry "//" after the scheme
    app.url_map.merge_slashes = False

    if client is None:
        client = StashClient(config.stash, config.user, config.password, timeout=config.timeout)

    cache = MembershipCache()
    resolver = GroupResolver(client, cache, strict=config.strict_groups)
    assigner = ReviewerAssigner(client, own_user=config.user)
    intersect_groups: List[str] = list(config.intersect)

    app.extensions["snobs"] = {
        "cache": cache,
        "resolver": resolver,
        "assigner": assigner,
    }

    def handle_get_users(group: str) -> Response:
        try:
            users = resolver.resolve(group)
        except UpstreamUnavailable as e:
            return _error(str(e), 500)

        return jsonify(users)

    def handle_add_reviewers(group: str, pull_request_url: str) -> Response:
        try:
            if intersect_groups:
                users = resolver.resolve_intersection(group, intersect_groups)
            else:
                users = resolver.resolve(group)
                logger.info(f"[{group}]: {', '.join(users)}")
        except UpstreamUnavailable as e:
            return _error(str(e), 400)

        try:
            pull_request = parse_pull_request_url(pull_request_url)
        except InvalidURL as e:
            return _error(str(e), 400)

        try:
            assigner.assign(
                pull_request.project,
                pull_request.repository,
                pull_request.pull_request_id,
                users,
            )
        except UpstreamUnavailable as e:
            logger.error(f"Failed to assign reviewers to {pull_request_url}: {e}")
            return _error(str(e), 500)

        return jsonify({"success": True})

    @app.route("/", defaults={"path": ""}, methods=["GET", "POST"])
    @app.route("/<path:path>", methods=["GET", "POST"])
    def dispatch(path):
        """Route a request to list-users or assign-reviewers by its path shape"""
        logger.info(f"{request.remote_addr}: {request.path}")

        try:
            group, pull_request_url = split_request_path(path)
        except BadRequest as e:
            return _error(str(e), 400)

        if pull_request_url is None:
            return handle_get_users(group)

        return handle_add_reviewers(group, pull_request_url)

    return app
