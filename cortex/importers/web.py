"""Import a web page's headings as course modules."""

from typing import Any

import httpx
from bs4 import BeautifulSoup

from ..config import Settings
from .youtube import week_for_position

MIN_TITLE_LENGTH = 5
HEADING_TAGS = ["h1", "h2", "h3"]


def modules_from_html(html: str, course_id: Any) -> list[dict[str, Any]]:
    """One module per h1-h3 heading whose text is longer than five characters.

    The week number follows the heading's position among all headings,
    including the ones skipped for being too short.
    """
    soup = BeautifulSoup(html, "html.parser")
    modules = []
    for index, heading in enumerate(soup.find_all(HEADING_TAGS)):
        text = heading.get_text().strip()
        if len(text) > MIN_TITLE_LENGTH:
            modules.append({
                "course_id": course_id,
                "title": text,
                "content_markdown": None,
                "week_number": week_for_position(index + 1),
            })
    return modules


async def fetch_page_modules(
    settings: Settings,
    url: str,
    course_id: Any,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[dict[str, Any]]:
    async with httpx.AsyncClient(
        timeout=settings.scrape_timeout_seconds,
        follow_redirects=True,
        transport=transport,
    ) as client:
        response = await client.get(url)
    return modules_from_html(response.text, course_id)
