"""
Group intersection used to narrow a group down to members of other groups.
"""

from typing import List, Sequence


def intersect(target: Sequence[str], others: Sequence[str]) -> List[str]:
    """
    Return the users of ``target`` that also appear in ``others``.

    The result keeps the order in which users first appear in ``target`` and
    lists every user at most once. Intersecting with no users yields no users.
    """
    other_users = set(others)
    seen = set()
    intersection = []

    for user in target:
        if user in other_users and user not in seen:
            seen.add(user)
            intersection.append(user)

    return intersection
