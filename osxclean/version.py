"""Compare the running tool's version with the latest published release."""

from __future__ import annotations

import json
import os
import urllib.error
import urllib.request

from osxclean import logger

TOOL_VERSION = "0.1.0"
API_ROOT = "https://api.github.com"
REPOSITORY_ENV = "OSXCLEAN_RELEASE_REPO"
USER_AGENT = "osx-cleaner-version-checker"
_TIMEOUT_SECONDS = 30


class VersionCheckError(Exception):
    """Raised when the latest release cannot be determined."""


def get_local_version() -> str:
    """Return the version of the installed tool."""
    return TOOL_VERSION


def _release_url() -> str:
    repository = os.environ.get(REPOSITORY_ENV, "").strip().strip("/")
    owner, _, name = repository.partition("/")
    if not owner or not name or "/" in name:
        raise VersionCheckError(
            f"release repository not configured; set {REPOSITORY_ENV} to 'owner/name'"
        )
    return f"{API_ROOT}/repos/{owner}/{name}/releases/latest"


def get_latest_github_release() -> str:
    """Fetch the tag name of the latest release from the GitHub API.

    Raises ``VersionCheckError`` on network failure, a non-JSON reply or a
    reply without a tag name.
    """
    url = _release_url()
    logger.debug(f"GitHub API URL: {url}")
    request = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})

    logger.debug("Making HTTP request to GitHub API...")
    try:
        with urllib.request.urlopen(request, timeout=_TIMEOUT_SECONDS) as response:
            logger.debug(
                f"Received response from GitHub API. Status: {getattr(response, 'status', '?')}"
            )
            content_type = response.headers.get("Content-Type")
            if content_type is None or "application/json" not in content_type:
                logger.error(f"GitHub returned unexpected content type: {content_type!r}")
                raise VersionCheckError("GitHub returned unexpected content type, not JSON.")
            payload = json.load(response)
    except (urllib.error.URLError, OSError) as exc:
        raise VersionCheckError(str(exc)) from exc
    except json.JSONDecodeError as exc:
        raise VersionCheckError(f"invalid JSON in release response: {exc}") from exc

    tag = payload.get("tag_name") if isinstance(payload, dict) else None
    if not isinstance(tag, str):
        raise VersionCheckError("release response has no tag_name")
    logger.debug(f"Successfully parsed GitHub release JSON. Tag: {tag}")
    return tag


def normalize_version(version: str) -> str:
    """Trim, drop leading 'v'/'V', keep ASCII only and lower-case a version string."""
    logger.debug(f"Normalizing version: '{version}'")
    stripped = version.strip().lstrip("vV")
    normalized = "".join(ch for ch in stripped if ch.isascii()).lower()
    logger.debug(f"Normalized result: '{normalized}'")
    return normalized


def run() -> bool | None:
    """Report whether a newer release exists.

    Returns True when up to date, False when the versions differ, and None
    when the check could not be made.
    """
    logger.info("Comparing the local and latest versions...")
    local_version = get_local_version()
    try:
        latest_version = get_latest_github_release()
    except VersionCheckError as exc:
        logger.error(f"Failed to fetch the latest release from GitHub: {exc}")
        return None

    logger.info(f"Local Version: {local_version} and Latest GitHub Release: {latest_version}")
    norm_local = normalize_version(local_version)
    norm_latest = normalize_version(latest_version)
    logger.debug(f"Final normalized local: '{norm_local}'")
    logger.debug(f"Final normalized latest: '{norm_latest}'")

    if norm_local != norm_latest:
        logger.warn(
            f"A newer version is available (Local: {local_version}, "
            f"Latest: {latest_version}). Consider upgrading."
        )
        return False
    logger.info("You are running the latest version.")
    return True