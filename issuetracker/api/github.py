"""GitHub issues client."""

import sys
from typing import Any, Dict, List

from ..config import defaults
from ..models.issue import Issue, issues_from_json
from ..utils import log
from .request_handler import GitHubRequestHandler


class GitHubClient:
    """Fetches the issues assigned to the authenticated user."""

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self.verbose = config.get("verbose", False)
        self.api_url = config.get("api_url") or defaults.API_URL

        self.headers = {
            "Authorization": f"Bearer {config.get('github_access_token', '')}",
            "Accept": defaults.ACCEPT,
            "X-GitHub-Api-Version": defaults.API_VERSION,
            "User-Agent": config.get("user_name") or defaults.APP_NAME,
        }
        self.request_handler = GitHubRequestHandler(
            headers=self.headers,
            verbose=self.verbose,
            insecure=config.get("insecure", False),
        )

    def fetch_issues(self) -> List[Issue]:
        """Return the issues in API response order, pull requests excluded."""
        payload = self.request_handler.request(
            "GET", self.api_url, label=defaults.FETCH_LABEL
        )
        issues = issues_from_json(payload, self.api_url)
        if self.verbose:
            log(f"Fetched {len(issues)} issues from {self.api_url}", file=sys.stderr)
        return issues
