#!/usr/bin/env python3
"""
GitHub API client for the release control bot.

This module provides the repository calls the bot needs: branch and pull
request listings, release lookups, workflow dispatch and branch cleanup.
Every call is a single request with no retries.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar

import aiohttp

from .errors import GitHubAPIError, NotFoundError
from .models import Branch, PullRequest, Release

GITHUB_API_URL = "https://api.github.com"

# Workflow dispatch can be slow to acknowledge, so it runs without a limit
DEFAULT_TIMEOUT = aiohttp.ClientTimeout(total=30)
UNBOUNDED_TIMEOUT = aiohttp.ClientTimeout(total=None)

T = TypeVar("T")


def _parse(path: str, build: Callable[[], T]) -> T:
    """Run a model conversion, reporting a malformed body as an API error"""
    try:
        return build()
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise GitHubAPIError(f"Unexpected GitHub response for {path}: {e!r}") from e


class GitHubClient:
    """GitHub API client for a single repository"""

    def __init__(self, token: str, owner: str, repo: str, session: aiohttp.ClientSession):
        self.token = token
        self.owner = owner
        self.repo = repo
        self.session = session
        self.headers = {
            "Authorization": f"token {token}",
            "Accept": "application/vnd.github.v3+json"
        }
        self.base_url = f"{GITHUB_API_URL}/repos/{owner}/{repo}"

    async def _request(
        self,
        method: str,
        path: str,
        expected: Iterable[int] = (200,),
        timeout: aiohttp.ClientTimeout = DEFAULT_TIMEOUT,
        **kwargs
    ) -> Any:
        """Issue one request and return the decoded body, or None for 204"""
        url = f"{self.base_url}{path}"
        try:
            async with self.session.request(
                method, url, headers=self.headers, timeout=timeout, **kwargs
            ) as resp:
                if resp.status not in expected:
                    body = await resp.text()
                    raise GitHubAPIError(
                        f"GitHub API error on {method} {path}",
                        status=resp.status,
                        body=body
                    )
                if resp.status == 204:
                    return None
                try:
                    return await resp.json()
                except ValueError as e:
                    raise GitHubAPIError(
                        f"Unexpected GitHub response for {method} {path}: {e!r}",
                        status=resp.status
                    ) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise GitHubAPIError(f"GitHub request {method} {path} failed: {e!r}") from e

    async def list_branches(self) -> List[Branch]:
        """List branches (first page only)"""
        data = await self._request("GET", "/branches")
        return _parse("/branches", lambda: [Branch.from_api(item) for item in data])

    async def list_pull_requests(self) -> List[PullRequest]:
        """List open pull requests"""
        data = await self._request("GET", "/pulls", params={"state": "open"})
        return _parse("/pulls", lambda: [PullRequest.from_api(item) for item in data])

    async def latest_release(self) -> Release:
        """Get the latest published release"""
        try:
            data = await self._request("GET", "/releases/latest")
        except GitHubAPIError as e:
            if e.status == 404:
                raise NotFoundError("No published release found") from e
            raise
        return _parse("/releases/latest", lambda: Release.from_api(data))

    async def latest_pre_release(self) -> Release:
        """Get the first pre-release in the order GitHub lists releases"""
        data = await self._request("GET", "/releases")
        release = _parse("/releases", lambda: next(
            (Release.from_api(item) for item in data if item.get("prerelease")), None
        ))
        if release is not None:
            return release
        raise NotFoundError("No pre-release found")

    async def trigger_workflow(
        self,
        workflow_file: str,
        ref: str = "develop",
        inputs: Optional[Dict[str, str]] = None
    ):
        """Dispatch a workflow run against the given ref"""
        if inputs is None:
            inputs = {"trigger": "manual"}
        logging.info(f"Dispatching workflow {workflow_file} on {ref} in {self.owner}/{self.repo}")
        await self._request(
            "POST",
            f"/actions/workflows/{workflow_file}/dispatches",
            expected=(204,),
            timeout=UNBOUNDED_TIMEOUT,
            json={"ref": ref, "inputs": inputs}
        )

    async def delete_branch(self, name: str):
        """Delete a branch ref"""
        logging.info(f"Deleting branch {name} in {self.owner}/{self.repo}")
        await self._request("DELETE", f"/git/refs/heads/{name}", expected=(204,))

    async def find_open_pull_request(self, head_branch: str) -> Optional[PullRequest]:
        """Find the open pull request whose head is the given branch"""
        data = await self._request(
            "GET",
            "/pulls",
            params={"head": f"{self.owner}:{head_branch}", "state": "open"}
        )
        if not data:
            return None
        return _parse("/pulls", lambda: PullRequest.from_api(data[0]))

    async def close_pull_request(self, number: int):
        """Close a pull request without merging"""
        logging.info(f"Closing pull request #{number} in {self.owner}/{self.repo}")
        await self._request("PATCH", f"/pulls/{number}", json={"state": "closed"})
