"""Import a YouTube playlist as course modules."""

import math
import re
from typing import Any

import httpx

from ..config import Settings
from ..errors import ImportFailed

PLAYLIST_TYPE = "youtube_playlist"
ITEMS_PER_WEEK = 5
PAGE_SIZE = 50

_LIST_PARAM = re.compile(r"(?<=list=)[\w-]+")


def playlist_id_from_url(url: str) -> str:
    """The ``list=`` value of a playlist URL, or the input itself."""
    match = _LIST_PARAM.search(url)
    return match.group(0) if match else url


def week_for_position(position: int) -> int:
    """Week number for the 1-based ``position``th module."""
    return math.ceil(position / ITEMS_PER_WEEK)


async def fetch_playlist_modules(
    settings: Settings,
    url: str,
    course_id: Any,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[dict[str, Any]]:
    """Page through ``playlistItems`` and build one module per video."""
    if not settings.youtube_api_key:
        raise ImportFailed("YouTube API Key missing in server environment.")

    playlist_id = playlist_id_from_url(url)
    modules: list[dict[str, Any]] = []
    page_token: str | None = None

    async with httpx.AsyncClient(
        timeout=settings.scrape_timeout_seconds, transport=transport
    ) as client:
        while True:
            params = {
                "part": "snippet",
                "maxResults": PAGE_SIZE,
                "playlistId": playlist_id,
                "key": settings.youtube_api_key,
            }
            if page_token:
                params["pageToken"] = page_token

            response = await client.get(settings.youtube_api_url, params=params)
            body = response.json()
            if not isinstance(body, dict):
                raise ImportFailed(f"Unexpected YouTube API response (HTTP {response.status_code})")
            error = body.get("error")
            if error:
                message = error.get("message") if isinstance(error, dict) else error
                raise ImportFailed(str(message or "YouTube API error"))

            for item in body.get("items", []):
                snippet = item.get("snippet", {})
                modules.append({
                    "course_id": course_id,
                    "title": snippet.get("title"),
                    "youtube_id": snippet.get("resourceId", {}).get("videoId"),
                    "week_number": week_for_position(len(modules) + 1),
                })

            page_token = body.get("nextPageToken")
            if not page_token:
                break

    return modules
