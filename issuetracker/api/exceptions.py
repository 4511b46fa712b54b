"""Custom exception classes for GitHub API errors."""

from ..exceptions import IssueTrackerError


class GitHubAPIError(IssueTrackerError):
    """Base exception for GitHub API errors."""

    def __init__(
        self,
        message: str,
        endpoint: str,
        status_code: int | None = None,
        response_body: str = "",
    ):
        self.endpoint = endpoint
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(message)

    def __str__(self):
        lines = [self.message]
        if self.endpoint:
            lines.append(f"Endpoint: {self.endpoint}")
        if self.status_code is not None:
            lines.append(f"Status: {self.status_code}")
        if self.response_body:
            lines.append(f"Response: {self.response_body}")
        return "\n".join(lines)

    def format_message(self) -> str:
        return str(self)


class GitHubRateLimitError(GitHubAPIError):
    """Exception raised when the GitHub rate limit is exceeded."""

    def __init__(self, endpoint: str, response_body: str, status_code: int = 429):
        super().__init__(
            "Rate limit exceeded. Please wait before making more requests.",
            endpoint,
            status_code,
            response_body,
        )


class GitHubNotFoundError(GitHubAPIError):
    """Exception raised when the GitHub resource is not found (404)."""

    def __init__(self, endpoint: str, response_body: str):
        super().__init__(
            "Resource not found. Check the api_url in your configuration.",
            endpoint,
            404,
            response_body,
        )


class GitHubAuthenticationError(GitHubAPIError):
    """Exception raised when authentication fails (401)."""

    def __init__(self, endpoint: str, response_body: str):
        super().__init__(
            "Authentication failed. Check your token in ~/.config/issue-tracker/config.yaml",
            endpoint,
            401,
            response_body,
        )


class GitHubAuthorizationError(GitHubAPIError):
    """Exception raised when authorization fails (403)."""

    def __init__(self, endpoint: str, response_body: str):
        super().__init__(
            "Access forbidden. Your token does not have permission to list issues.",
            endpoint,
            403,
            response_body,
        )


class IssueParseError(GitHubAPIError):
    """Exception raised when the issue payload cannot be understood."""

    def __init__(self, detail: str, endpoint: str = ""):
        super().__init__(f"Unexpected issue payload: {detail}", endpoint)
