"""Fetch changelogs straight from a hosted repository.

Supports GitHub and GitLab. The repository's web URL is turned into a raw
content URL for the requested file, which is then downloaded with
``requests``. URL problems are reported before any network call.
"""

from __future__ import annotations

import logging
from urllib.parse import urlsplit

import requests

from relnotes.parse import Parser, parse

log = logging.getLogger(__name__)

DEFAULT_REF = "HEAD"
DEFAULT_TIMEOUT = 30.0

# Host -> raw content URL template
RAW_URL_TEMPLATES: dict[str, str] = {
    "github.com": "https://raw.githubusercontent.com/{owner}/{repo}/{ref}/{filename}",
    "gitlab.com": "https://gitlab.com/{owner}/{repo}/-/raw/{ref}/{filename}",
}


class RepositoryURLError(ValueError):
    """Raised when a repository URL cannot be turned into a raw content URL."""


class UnsupportedHostError(RepositoryURLError):
    """Raised for hosts other than github.com and gitlab.com."""

    def __init__(self, host: str) -> None:
        supported = " and ".join(sorted(RAW_URL_TEMPLATES))
        super().__init__(f"Unsupported host '{host}' (only {supported} are supported)")
        self.host = host


class MalformedRepositoryURLError(RepositoryURLError):
    """Raised when owner/repo cannot be read from the URL path."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Cannot parse owner/repo from {url}")
        self.url = url


class FetchError(Exception):
    """Raised when a changelog download fails."""

    def __init__(self, message: str, url: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


def raw_content_url(repo_url: str, filename: str, ref: str = DEFAULT_REF) -> str:
    """Build the raw content URL for *filename* in the repository at *repo_url*.

    Trailing slashes and a ``.git`` suffix are ignored, so
    ``https://github.com/owner/repo.git`` works as well.
    """
    cleaned = repo_url.rstrip("/").removesuffix(".git").rstrip("/")
    try:
        parts = urlsplit(cleaned)
        hostname = parts.hostname
    except ValueError as exc:
        raise MalformedRepositoryURLError(repo_url) from exc

    segments = parts.path.removeprefix("/").split("/", 2)
    if len(segments) < 2 or not segments[0] or not segments[1]:
        raise MalformedRepositoryURLError(repo_url)
    owner, repo = segments[0], segments[1]

    host = (hostname or "").lower()
    template = RAW_URL_TEMPLATES.get(host)
    if template is None:
        raise UnsupportedHostError(host or parts.netloc)

    return template.format(owner=owner, repo=repo, ref=ref, filename=filename)


def fetch_changelog(
    repo_url: str,
    filename: str,
    ref: str = DEFAULT_REF,
    timeout: float = DEFAULT_TIMEOUT,
) -> str:
    """Download a changelog file from a GitHub or GitLab repository.

    Raises
    ------
    RepositoryURLError
        If *repo_url* is malformed or on an unsupported host.
    FetchError
        On connection failures or any status other than 200.
    """
    url = raw_content_url(repo_url, filename, ref=ref)
    log.info("Fetching %s", url)

    try:
        resp = requests.get(url, timeout=timeout)
    except requests.RequestException as exc:
        log.warning("Fetch failed for %s: %s", url, exc)
        raise FetchError(f"Failed to fetch {url}: {exc}", url) from exc

    if resp.status_code != 200:
        log.warning("HTTP %d fetching %s", resp.status_code, url)
        raise FetchError(
            f"HTTP {resp.status_code} fetching {url}", url, status_code=resp.status_code
        )

    return resp.content.decode("utf-8", errors="replace")


def fetch_and_parse(
    repo_url: str,
    filename: str,
    ref: str = DEFAULT_REF,
    timeout: float = DEFAULT_TIMEOUT,
) -> Parser:
    """Fetch a changelog from a repository and parse it with format detection."""
    return parse(fetch_changelog(repo_url, filename, ref=ref, timeout=timeout))
