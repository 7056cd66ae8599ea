#!/usr/bin/env python3
"""
Stash (Bitbucket Server) REST API client for reviewer assignment
"""

import logging
from dataclasses import dataclass
from typing import List, Dict, Any, Optional, Tuple

import requests

from snobs.errors import UpstreamUnavailable

# Stash answers the whole membership in one page up to this limit
GROUP_MEMBERS_LIMIT = 99999


@dataclass(frozen=True)
class GroupMembers:
    """Decoded ``admin/groups/more-members`` response."""

    names: List[str]

    @classmethod
    def from_json(cls, data: Any) -> "GroupMembers":
        try:
            values = data["values"]
            names = [value["name"] for value in values]
        except (KeyError, TypeError) as e:
            raise UpstreamUnavailable(f"unexpected group members response: {e!r}") from e

        if not all(isinstance(name, str) for name in names):
            raise UpstreamUnavailable("unexpected group members response: non-string user name")

        return cls(names=names)


@dataclass(frozen=True)
class PullRequestState:
    """Decoded pull request resource: the author and the current version."""

    version: int
    author: str

    @classmethod
    def from_json(cls, data: Any) -> "PullRequestState":
        try:
            version = data["version"]
            author = data["author"]["user"]["name"]
        except (KeyError, TypeError) as e:
            raise UpstreamUnavailable(f"unexpected pull request response: {e!r}") from e

        # bool is an int subclass but never a valid version
        if isinstance(version, bool) or not isinstance(version, (int, float)):
            raise UpstreamUnavailable(f"unexpected pull request version: {version!r}")
        if not isinstance(author, str):
            raise UpstreamUnavailable(f"unexpected pull request author: {author!r}")

        return cls(version=int(version), author=author)


class StashClient:
    """Stash REST API client used by the relay"""

    def __init__(self, host: str, user: str, password: str, timeout: Optional[float] = None):
        """
        Initialize the Stash client.

        Args:
            host: Stash host (``host[:port]``) or a full ``http(s)://`` base URL
            user: Basic auth user name
            password: Basic auth password
            timeout: Seconds to wait for Stash; ``None`` waits indefinitely
        """
        if not host:
            raise ValueError("Stash host is required")

        if host.startswith(("http://", "https://")):
            root = host.rstrip("/")
        else:
            root = f"http://{host}"

        self.base_url = f"{root}/rest/api/1.0"
        self.auth: Tuple[str, str] = (user, password)
        self.headers = {
            "Accept": "application/json",
        }
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)

    def _make_request(self, endpoint: str, method: str = "GET", params: Dict = None, data: Dict = None) -> Any:
        """
        Make a request to the Stash API.

        Args:
            endpoint: API endpoint (relative to base URL)
            method: HTTP method
            params: Query parameters
            data: Request body

        Returns:
            Decoded JSON response, ``{}`` when Stash sends no content

        Raises:
            UpstreamUnavailable: on transport errors, error statuses and non-JSON bodies
        """
        url = f"{self.base_url}/{endpoint}"

        try:
            response = requests.request(
                method=method,
                url=url,
                headers=self.headers,
                params=params,
                json=data,
                auth=self.auth,
                timeout=self.timeout,
            )

            response.raise_for_status()

            if response.status_code == 204 or not response.content:
                return {}

            return response.json()
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Stash API error: {str(e)}")
            if getattr(e, "response", None) is not None:
                self.logger.error(f"Response: {e.response.text}")
            raise UpstreamUnavailable(str(e)) from e
        except ValueError as e:
            # requests raises a ValueError subclass for undecodable JSON
            self.logger.error(f"Stash API returned invalid JSON for {method} {url}: {e}")
            raise UpstreamUnavailable(f"invalid JSON from {url}") from e

    @staticmethod
    def _pull_request_endpoint(project: str, repository: str, pull_request_id: str) -> str:
        return f"projects/{project}/repos/{repository}/pull-requests/{pull_request_id}"

    def get_group_members(self, group: str) -> List[str]:
        """
        Get the names of all members of a user group.

        Args:
            group: Stash group name

        Returns:
            Member names in the order Stash lists them
        """
        params = {
            "context": group,
            "limit": GROUP_MEMBERS_LIMIT,
        }
        data = self._make_request("admin/groups/more-members", params=params)
        return GroupMembers.from_json(data).names

    def get_pull_request(self, project: str, repository: str, pull_request_id: str) -> PullRequestState:
        """
        Get the author and version of a pull request.

        Args:
            project: Project key (or ``~user`` for personal repositories)
            repository: Repository slug
            pull_request_id: Pull request number

        Returns:
            Pull request state
        """
        endpoint = self._pull_request_endpoint(project, repository, pull_request_id)
        return PullRequestState.from_json(self._make_request(endpoint))

    def update_reviewers(self, project: str, repository: str, pull_request_id: str,
                         version: int, reviewers: List[str]) -> Dict[str, Any]:
        """
        Replace the reviewers of a pull request.

        Stash rejects the update when ``version`` is not the current version
        of the pull request.

        Args:
            project: Project key
            repository: Repository slug
            pull_request_id: Pull request number
            version: Version read from the pull request just before
            reviewers: Reviewer user names

        Returns:
            Updated pull request data
        """
        endpoint = self._pull_request_endpoint(project, repository, pull_request_id)
        data = {
            "id": pull_request_id,
            "version": version,
            "reviewers": [{"user": {"name": name}} for name in reviewers],
        }
        return self._make_request(endpoint, method="PUT", data=data)
