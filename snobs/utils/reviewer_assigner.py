#!/usr/bin/env python3
"""
Reviewer Assigner for adding group members as pull request reviewers.
"""

import logging
from typing import Iterable, List, Sequence

from snobs.utils.stash_client import StashClient

logger = logging.getLogger(__name__)


def filter_reviewers(users: Sequence[str], ignore_users: Iterable[str]) -> List[str]:
    """Drop ``ignore_users`` from ``users``, keeping the order of the rest."""
    ignored = set(ignore_users)
    return [user for user in users if user not in ignored]


class ReviewerAssigner:
    """Sets pull request reviewers, leaving out the author and the relay's own account."""

    def __init__(self, client: StashClient, own_user: str):
        """
        Initialize the reviewer assigner.

        Args:
            client: Stash API client
            own_user: Account the relay authenticates as; never added as reviewer
        """
        self.client = client
        self.own_user = own_user

    def assign(self, project: str, repository: str, pull_request_id: str, users: Sequence[str]) -> List[str]:
        """
        Make ``users`` the reviewers of a pull request.

        The pull request version is read first and sent back with the update,
        so Stash rejects the update if the pull request changed in between.
        Nothing is retried.

        Args:
            project: Project key
            repository: Repository slug
            pull_request_id: Pull request number
            users: Candidate reviewers

        Returns:
            Reviewer names sent to Stash

        Raises:
            UpstreamUnavailable: if reading or updating the pull request fails
        """
        pull_request = self.client.get_pull_request(project, repository, pull_request_id)

        reviewers = filter_reviewers(users, [pull_request.author, self.own_user])

        self.client.update_reviewers(
            project, repository, pull_request_id,
            version=pull_request.version,
            reviewers=reviewers,
        )

        logger.info(
            f"Assigned {len(reviewers)} reviewers to {project}/{repository}#{pull_request_id}: {reviewers}"
        )
        return reviewers
