"""
Session state

Cookie jar kept across requests of one client: cookies set by responses are
sent back with every following request.
"""

import logging
from typing import Dict, Iterable, Mapping

logger = logging.getLogger(__name__)


class SessionState:
    """Cookie name to value mapping (last write wins)"""

    def __init__(self):
        self.cookies: Dict[str, str] = {}

    def get_cookies(self) -> Dict[str, str]:
        return dict(self.cookies)

    def set_cookies(self, cookies: Mapping[str, str], replace: bool = False) -> None:
        """Install cookies

        Args:
            cookies: Cookies to set
            replace: Discard the current jar first instead of merging
        """
        if replace:
            self.cookies = dict(cookies)
        else:
            self.cookies.update(cookies)

    def update_from_headers(self, set_cookie_values: Iterable[str]) -> None:
        """Store the ``name=value`` part of each ``Set-Cookie`` header value"""
        for header in set_cookie_values:
            definition = header.split(";", 1)[0]
            name, sep, value = definition.partition("=")
            name = name.strip()
            if not sep or not name:
                continue
            self.cookies[name] = value.strip()
            logger.debug(f"Stored cookie {name}")

    def cookie_header(self) -> Dict[str, str]:
        """``Cookie`` header for the next request, empty when the jar is"""
        if not self.cookies:
            return {}
        return {"Cookie": "; ".join(f"{name}={value}" for name, value in self.cookies.items())}
