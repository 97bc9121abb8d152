"""robots.txt compliance check."""

from typing import Optional
from urllib.parse import urlsplit
from urllib.robotparser import RobotFileParser
import httpx
import logging

logger = logging.getLogger(__name__)


def robots_url_for(url: str) -> str:
    """``{scheme}://{host}/robots.txt`` for the given page URL."""
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}/robots.txt"


class RobotsChecker:
    """
    Evaluates robots.txt for a user-agent.

    Fails open: if robots.txt cannot be fetched or parsed for any reason
    (network error, non-200 status, bad content) the URL is treated as
    allowed.
    """

    def __init__(self, user_agent: str, timeout: float = 5.0):
        self.user_agent = user_agent
        self.timeout = timeout

    async def is_allowed(self, url: str, client: httpx.AsyncClient) -> bool:
        robots_url = robots_url_for(url)
        try:
            response = await client.get(
                robots_url,
                headers={'User-Agent': self.user_agent},
                timeout=self.timeout,
            )
            if response.status_code != 200:
                logger.debug(f"No robots.txt at {robots_url} (status {response.status_code}), allowing")
                return True
            parser = self.parse(robots_url, response.text)
            return parser.can_fetch(self.user_agent, url)
        except Exception as e:
            logger.debug(f"Could not evaluate {robots_url} ({e}), allowing")
            return True

    @staticmethod
    def parse(robots_url: str, robots_text: Optional[str]) -> RobotFileParser:
        parser = RobotFileParser()
        parser.set_url(robots_url)
        parser.parse((robots_text or '').splitlines())
        return parser
