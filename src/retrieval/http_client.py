"""GitHub REST client with retry/backoff, token rotation and filtered pagination."""

from __future__ import annotations

import os
import sys
import time
from typing import Any, Callable, Dict, List, Optional

import requests

from .config import (
    BACKOFF_BASE_SEC,
    BASE_URL,
    GITHUB_TOKENS,
    MAX_RETRIES,
    MAX_WAIT_ON_403,
    PER_PAGE,
    REQUEST_TIMEOUT,
    USER_AGENT,
)

TERMINAL_ERRORS = {400, 404, 410, 422}

# Returns the entries to keep, or None to stop paging.
PageFilter = Callable[[List[Dict[str, Any]]], Optional[List[Dict[str, Any]]]]


class GitHubAPIError(RuntimeError):
    """Raised when GitHub answers with a non-success status."""

    def __init__(self, status_code: int, url: str, message: str = "") -> None:
        text = f"HTTP {status_code} for {url}"
        super().__init__(f"{text}: {message}" if message else text)
        self.status_code = status_code
        self.url = url
        self.message = message


def sleep_with_jitter(base: float) -> None:
    """Pause execution with +/- 25% jitter to avoid synchronized retries."""
    jitter = base * 0.25 * (0.5 - (os.urandom(1)[0] / 255.0))
    time.sleep(max(0.0, base + jitter))


def error_message(resp: requests.Response) -> str:
    """Pull GitHub's error message out of a response, falling back to raw text."""
    try:
        body = resp.json()
    except ValueError:
        body = {"text": (resp.text or "")[:300]}
    if not isinstance(body, dict):
        return str(body)[:300]
    return str(body.get("message") or body.get("error") or body.get("text") or "")


def log_http_error(resp: requests.Response, url: str) -> None:
    """Print a short, human-readable message when GitHub returns an error."""
    print(f"[error] HTTP {resp.status_code} for {url}\n  -> {error_message(resp)}", file=sys.stderr)


class GitHubClient:
    """Authenticated session shared by every API call of a changelog run."""

    def __init__(self,
                 tokens: Optional[List[str]] = None,
                 session: Optional[requests.Session] = None,
                 base_url: str = BASE_URL,
                 per_page: int = PER_PAGE,
                 max_retries: int = MAX_RETRIES,
                 timeout: float = REQUEST_TIMEOUT) -> None:
        self.tokens: List[str] = list(GITHUB_TOKENS if tokens is None else tokens)
        self.token_index = 0
        self.base_url = base_url.rstrip("/")
        self.per_page = per_page
        self.max_retries = max(1, max_retries)
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        self.session.headers.update(
            {
                "Accept": "application/vnd.github.v3+json",
                "User-Agent": USER_AGENT,
            }
        )
        self.set_auth_header_for_current_token()

    @property
    def current_token(self) -> Optional[str]:
        if not self.tokens:
            return None
        return self.tokens[self.token_index % len(self.tokens)] or None

    def set_auth_header_for_current_token(self) -> None:
        """Set or clear the Authorization header for the current token index."""
        token = self.current_token
        if token:
            self.session.headers["Authorization"] = f"token {token}"
        else:
            self.session.headers.pop("Authorization", None)

    def switch_to_next_token(self) -> bool:
        """Advance to the next token if there is one; return True if switched."""
        if len(self.tokens) <= 1:
            return False
        self.token_index = (self.token_index + 1) % len(self.tokens)
        self.set_auth_header_for_current_token()
        print(f"[rate-limit] switched to token {self.token_index + 1}/{len(self.tokens)}", file=sys.stderr)
        return True

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def request_with_backoff(self, method: str, url: str, **kwargs) -> requests.Response:
        """Perform a REST call with retry, exponential backoff, and token cycling."""
        timeout = kwargs.pop("timeout", self.timeout)
        last_exc: Optional[Exception] = None
        last_resp: Optional[requests.Response] = None
        rotations = 0

        for attempt in range(1, self.max_retries + 1):
            delay = BACKOFF_BASE_SEC * (2 ** (attempt - 1))
            try:
                resp = self.session.request(method, url, timeout=timeout, **kwargs)
            except requests.RequestException as exc:
                last_exc = exc
                if attempt == self.max_retries:
                    break
                print(f"[retry {attempt}/{self.max_retries}] {exc} -> sleep {delay:.1f}s", file=sys.stderr)
                sleep_with_jitter(delay)
                continue

            last_resp = resp
            if 200 <= resp.status_code < 300:
                return resp

            if resp.status_code == 401:
                if rotations < len(self.tokens) - 1 and self.switch_to_next_token():
                    rotations += 1
                    continue
                log_http_error(resp, url)
                return resp

            if resp.status_code in (403, 429):
                headers = resp.headers or {}
                remaining = headers.get("X-RateLimit-Remaining")
                reset = headers.get("X-RateLimit-Reset")
                retry_after = headers.get("Retry-After")
                has_retry_after = bool(retry_after and str(retry_after).isdigit())
                is_rate_limited = remaining == "0" or resp.status_code == 429
                if not (is_rate_limited or has_retry_after):
                    log_http_error(resp, url)
                    return resp

                if is_rate_limited and rotations < len(self.tokens) - 1 and self.switch_to_next_token():
                    rotations += 1
                    continue
                if attempt == self.max_retries:
                    break

                if has_retry_after:
                    wait_sec = int(retry_after)
                elif reset and str(reset).isdigit():
                    wait_sec = max(0, int(reset) - int(time.time())) + 1
                else:
                    wait_sec = delay
                wait_sec = min(wait_sec, MAX_WAIT_ON_403)
                print(f"[backoff {resp.status_code}] waiting {wait_sec}s for {url}", file=sys.stderr)
                sleep_with_jitter(wait_sec)
                continue

            if resp.status_code in TERMINAL_ERRORS:
                log_http_error(resp, url)
                return resp

            if attempt < self.max_retries:
                print(f"[retry {attempt}/{self.max_retries}] HTTP {resp.status_code} -> sleep {delay:.1f}s",
                      file=sys.stderr)
                sleep_with_jitter(delay)
                continue

        if last_resp is not None:
            log_http_error(last_resp, url)
            return last_resp
        if last_exc:
            raise last_exc
        raise RuntimeError("Request failed after retries.")

    def get_json(self, url: str, **kwargs) -> Any:
        """GET `url` and decode the body; raise GitHubAPIError on any non-2xx answer."""
        resp = self.request_with_backoff("GET", url, **kwargs)
        if not 200 <= resp.status_code < 300:
            raise GitHubAPIError(resp.status_code, url, error_message(resp))
        return resp.json()

    def paged_get(self, url: str, *,
                  page_filter: Optional[PageFilter] = None,
                  max_pages: int = 0) -> List[Dict[str, Any]]:
        """Fetch pages in order until a short/empty page, max_pages, or page_filter returns None.

        Each page is handed to `page_filter` before it is accumulated; the filter
        decides both what survives and whether another page is requested.
        """
        results: List[Dict[str, Any]] = []
        page = 1
        while True:
            if max_pages and page > max_pages:
                print(f"[info] page cap {max_pages} reached for {url}", file=sys.stderr)
                break
            sep = "&" if "?" in url else "?"
            page_url = f"{url}{sep}per_page={self.per_page}&page={page}"
            batch = self.get_json(page_url)
            if not isinstance(batch, list) or not batch:
                break

            kept = batch if page_filter is None else page_filter(batch)
            if kept is None:
                print(f"[info] stopping pagination at page {page} for {url}", file=sys.stderr)
                break
            results.extend(kept)

            if len(batch) < self.per_page:
                break
            page += 1
        return results


__all__ = [
    "GitHubAPIError",
    "GitHubClient",
    "PageFilter",
    "TERMINAL_ERRORS",
    "error_message",
    "log_http_error",
    "sleep_with_jitter",
]
