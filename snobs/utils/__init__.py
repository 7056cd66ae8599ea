"""
Stash access and reviewer selection helpers.
"""

from .stash_client import StashClient, GroupMembers, PullRequestState
from .group_resolver import GroupResolver, MembershipCache
from .intersection import intersect
from .pull_request_url import PullRequestRef, parse_pull_request_url
from .reviewer_assigner import ReviewerAssigner, filter_reviewers

__all__ = [
    'StashClient', 'GroupMembers', 'PullRequestState',
    'GroupResolver', 'MembershipCache',
    'intersect',
    'PullRequestRef', 'parse_pull_request_url',
    'ReviewerAssigner', 'filter_reviewers',
]
