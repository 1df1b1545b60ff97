"""GitHub REST helpers — closing the join-request issue after it is processed.

Closing the issue is advisory. The game state is already committed when
this runs, so every failure is logged and reported as ``False``; nothing
here raises.
"""

from __future__ import annotations

import logging

import httpx

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
_TIMEOUT = httpx.Timeout(10.0, connect=5.0)


async def close_issue(
    repository: str,
    issue_number: int | None,
    token: str,
    *,
    api_url: str = GITHUB_API_URL,
    client: httpx.AsyncClient | None = None,
) -> bool:
    """Close issue *issue_number* in *repository* (``"owner/repo"``).

    Args:
        repository: Repository slug, as in ``GITHUB_REPOSITORY``.
        issue_number: Issue to close. ``None`` skips the call.
        token: Token with ``issues: write`` permission.
        api_url: API root, overridable for GitHub Enterprise.
        client: Optional shared client (tests inject a mock transport).

    Returns:
        True if GitHub reported the issue closed, False otherwise.
    """
    if not token or not repository or not issue_number:
        logger.info(
            "close_issue_skipped has_token=%s repository=%s issue=%s",
            bool(token),
            repository or "-",
            issue_number,
        )
        return False

    owner, _, repo = repository.partition("/")
    if not owner or not repo:
        logger.error("close_issue_bad_repository repository=%s", repository)
        return False

    url = f"{api_url.rstrip('/')}/repos/{owner}/{repo}/issues/{issue_number}"
    headers = {
        "Authorization": f"token {token}",
        "Accept": "application/vnd.github.v3+json",
    }

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=_TIMEOUT) as own_client:
                resp = await own_client.patch(url, json={"state": "closed"}, headers=headers)
        else:
            resp = await client.patch(url, json={"state": "closed"}, headers=headers)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.error("close_issue_failed issue=%s error=%s", issue_number, exc)
        return False

    if resp.is_success:
        logger.info("close_issue_ok issue=%s", issue_number)
        return True
    logger.error(
        "close_issue_failed issue=%s status=%d reason=%s",
        issue_number,
        resp.status_code,
        resp.reason_phrase,
    )
    return False
