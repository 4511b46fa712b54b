"""HTTP request handler for the GitHub API."""

import json
import ssl
import sys
import urllib.error
import urllib.request
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import click

from ..config import defaults
from ..utils import log
from . import exceptions


class GitHubRequestHandler:
    """Handles HTTP requests to the GitHub API."""

    def __init__(
        self,
        headers: Dict[str, str],
        verbose: bool = False,
        insecure: bool = False,
        timeout: float = 30,
    ):
        self.headers = headers
        self.verbose = verbose
        self.insecure = insecure
        self.timeout = timeout
        self.ssl_context: Optional[ssl.SSLContext] = None

        if self.insecure:
            self._setup_insecure_ssl()

    def _setup_insecure_ssl(self):
        """Setup SSL context that doesn't verify certificates."""
        context = ssl.create_default_context()
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
        self.ssl_context = context

        if self.verbose:
            log("WARNING: SSL certificate verification disabled", file=sys.stderr)

    def _get_curl_command(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        params: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Generate an equivalent curl command for debugging purposes."""
        curl_parts = [f"curl -X {method}"]

        if self.insecure:
            curl_parts.append("-k")

        for key, value in headers.items():
            if key == "Authorization":
                value = "Bearer ${GITHUB_TOKEN}"
            curl_parts.append(f'-H "{key}: {value}"')

        final_url = url
        if params:
            final_url = f"{url}?{urlencode(params)}"

        curl_parts.append(f"'{final_url}'")
        return " ".join(curl_parts)

    def request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        label: Optional[str] = None,
    ) -> Any:
        """Make an HTTP request and return the decoded JSON body."""
        if self.verbose:
            log(f"API call Requested: {method} {url}", file=sys.stderr)
            if params:
                log(f"Parameters: {params}", file=sys.stderr)
            log(
                f"curl command :\n{self._get_curl_command(method, url, self.headers, params)}",
                file=sys.stderr,
            )

        full_url = f"{url}?{urlencode(params)}" if params else url
        request = urllib.request.Request(full_url, method=method)
        for key, value in self.headers.items():
            request.add_header(key, value)

        try:
            return self._send_request(request, label)
        except urllib.error.HTTPError as e:
            body = e.read().decode("utf-8", errors="replace")
            if self.verbose:
                log(f"HTTP error occurred: {e}", level="ERROR", file=sys.stderr)
                log(f"Response: {body}", level="ERROR", file=sys.stderr)
            raise self._error_for_status(url, e.code, e.headers, body) from e
        except urllib.error.URLError as e:
            raise exceptions.GitHubAPIError(f"URL error: {e.reason}", url) from e
        except json.JSONDecodeError as e:
            raise exceptions.IssueParseError(f"invalid JSON ({e})", url) from e

    @staticmethod
    def _error_for_status(
        endpoint: str, status: int, headers, body: str
    ) -> exceptions.GitHubAPIError:
        if status == 401:
            return exceptions.GitHubAuthenticationError(endpoint, body)
        if status == 403:
            if headers is not None and headers.get("X-RateLimit-Remaining") == "0":
                return exceptions.GitHubRateLimitError(endpoint, body, status)
            return exceptions.GitHubAuthorizationError(endpoint, body)
        if status == 404:
            return exceptions.GitHubNotFoundError(endpoint, body)
        if status == 429:
            return exceptions.GitHubRateLimitError(endpoint, body)
        return exceptions.GitHubAPIError(f"HTTP error {status}", endpoint, status, body)

    def _send_request(
        self, request: urllib.request.Request, label: Optional[str]
    ) -> Any:
        """Send the actual HTTP request."""
        if not self.verbose and label:
            with click.progressbar(
                length=1,
                file=sys.stderr,
                label=label,
                show_eta=False,
                show_percent=False,
                fill_char=defaults.SPINNER_CHARS[0],
                empty_char=" ",
            ) as bar:
                response_data = self._execute_request(request)
                bar.update(1)
        else:
            response_data = self._execute_request(request)

        return response_data

    def _execute_request(self, request: urllib.request.Request) -> Any:
        """Execute the HTTP request and parse response."""
        with urllib.request.urlopen(
            request, timeout=self.timeout, context=self.ssl_context
        ) as response:
            status_code = response.status
            response_text = response.read().decode("utf-8")
            response_data = json.loads(response_text) if response_text else None

        if self.verbose:
            log(f"Response status: {status_code}", file=sys.stderr)

        return response_data
