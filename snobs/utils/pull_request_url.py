"""
Pull request URL parsing.
"""

import re
from dataclasses import dataclass

from snobs.errors import InvalidURL

# scheme://host/any/prefix/(users|projects)/<name>/repos/<repo>/pull-requests/<id>
#
# The users/projects segment must be present but does not change the result.
PULL_REQUEST_URL_RE = re.compile(
    r"(https?://.*/)"
    r"(users|projects)/([^/]+)"
    r"/repos/([^/]+)"
    r"/pull-requests/(\d+)"
)


@dataclass(frozen=True)
class PullRequestRef:
    project: str
    repository: str
    pull_request_id: str


def parse_pull_request_url(url: str) -> PullRequestRef:
    """
    Extract project, repository and pull request id from a Stash pull request URL.

    The pattern may match anywhere in ``url``, so trailing segments such as
    ``/overview`` or ``/diff`` are accepted.

    Raises:
        InvalidURL: if ``url`` does not contain a pull request URL
    """
    match = PULL_REQUEST_URL_RE.search(url)
    if match is None:
        raise InvalidURL(url)

    return PullRequestRef(
        project=match.group(3),
        repository=match.group(4),
        pull_request_id=match.group(5),
    )
