#!/usr/bin/env python3
"""
Group resolver: looks up Stash group members and remembers them.
"""

import logging
import threading
from typing import Dict, List, Optional, Sequence

from snobs.errors import UpstreamUnavailable
from snobs.utils.intersection import intersect
from snobs.utils.stash_client import StashClient

logger = logging.getLogger(__name__)


class MembershipCache:
    """
    Thread-safe group name -> member names store.

    Entries live for the lifetime of the process: once a group is stored its
    members are never replaced or removed, the first stored value wins.
    """

    def __init__(self):
        self._members: Dict[str, List[str]] = {}
        self._lock = threading.Lock()

    def get(self, group: str) -> Optional[List[str]]:
        """Return a copy of the cached members of ``group``, or None."""
        with self._lock:
            members = self._members.get(group)
            return list(members) if members is not None else None

    def set_if_absent(self, group: str, members: Sequence[str]) -> List[str]:
        """Store ``members`` unless ``group`` is already cached; return the cached value."""
        with self._lock:
            if group not in self._members:
                self._members[group] = list(members)
            return list(self._members[group])

    def __contains__(self, group: str) -> bool:
        with self._lock:
            return group in self._members

    def __len__(self) -> int:
        with self._lock:
            return len(self._members)


class GroupResolver:
    """Resolves Stash groups to member names, caching non-empty results."""

    def __init__(self, client: StashClient, cache: MembershipCache, strict: bool = False):
        """
        Args:
            client: Stash API client
            cache: Shared membership cache
            strict: Raise UpstreamUnavailable on lookup failures instead of
                treating the group as empty
        """
        self.client = client
        self.cache = cache
        self.strict = strict

    def resolve(self, group: str) -> List[str]:
        """
        Get the members of ``group``.

        A failed lookup resolves to no members unless the resolver is strict.
        """
        cached = self.cache.get(group)
        if cached is not None:
            return cached

        try:
            members = self.client.get_group_members(group)
        except UpstreamUnavailable as e:
            if self.strict:
                raise
            logger.warning(f"Failed to get members of group {group}, treating it as empty: {e}")
            return []

        if not members:
            return []

        return self.cache.set_if_absent(group, members)

    def resolve_intersection(self, group: str, intersect_groups: Sequence[str]) -> List[str]:
        """
        Get the members of ``group`` who belong to at least one of ``intersect_groups``.

        Args:
            group: Target group
            intersect_groups: Groups to intersect the target group with

        Returns:
            Target members in target order, without duplicates
        """
        target_users = self.resolve(group)
        logger.info(f"[{group}]: {', '.join(target_users)}")

        intersect_users: List[str] = []
        for intersect_group in intersect_groups:
            group_users = self.resolve(intersect_group)
            logger.info(f"[{intersect_group}]: {', '.join(group_users)}")
            intersect_users.extend(group_users)

        users = intersect(target_users, intersect_users)
        logger.info(f"[intersection]: {', '.join(users)}")

        return users
