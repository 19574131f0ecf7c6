"""Page boundary detection.

Partitions a recording into per-page segments from navigation URLs and
navigation-like link clicks. Used to split generated code into one page
object per page.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
from urllib.parse import urlparse

from flowforge.domains.shared.kernel import Action, ActionType, safe_search

from .services import capitalize_words
from .value_objects import PageBoundary

logger = logging.getLogger(__name__)

DEFAULT_PAGE_NAME = "Page"
END_OF_RECORDING = "End of recording"

# (pattern, page name), first match wins
PAGE_PATTERNS: Tuple[Tuple[str, str], ...] = (
    (r"login|signin|sign-in|authenticate", "Login"),
    (r"home|dashboard|main", "Dashboard"),
    (r"admin|administration", "Admin"),
    (r"user|profile|account", "User"),
    (r"setting|preference|config", "Settings"),
    (r"search|find|query", "Search"),
    (r"report|analytics", "Reports"),
    (r"list|table|grid", "List"),
    (r"detail|view|show", "Details"),
    (r"create|new|add", "Create"),
    (r"edit|update|modify", "Edit"),
)

NAVIGATION_KEYWORDS: Tuple[str, ...] = (
    "admin", "administration", "dashboard", "home", "settings",
    "user", "profile", "reports", "maintenance", "menu",
)


@dataclass
class PageBoundaryDetector:
    """Finds the page segments of a recording.

    Attributes:
        page_patterns: Ordered (regex, page name) table; a pattern that
            fails to compile is compared literally
        navigation_keywords: Click names that suggest a page change
    """
    page_patterns: Tuple[Tuple[str, str], ...] = PAGE_PATTERNS
    navigation_keywords: Tuple[str, ...] = NAVIGATION_KEYWORDS

    def detect(self, actions: Sequence[Action]) -> List[PageBoundary]:
        """Contiguous page segments covering every action, in order.

        A segment closed by a page change carries the reason of that
        change; the last segment carries "End of recording".
        """
        boundaries: List[PageBoundary] = []
        current_page = DEFAULT_PAGE_NAME
        current_url: Optional[str] = None
        start = 0

        for i, action in enumerate(actions):
            new_page: Optional[str] = None
            new_url: Optional[str] = None
            reason = ""

            if action.type == ActionType.NAVIGATION and action.method == "goto":
                new_url = action.first_arg
                new_page = self.page_from_url(new_url)
                reason = f"Navigation to: {new_url}"

            if action.is_role_click("link"):
                link_name = action.target.name or ""
                new_page = self.page_from_link_name(link_name)
                if new_page:
                    reason = f"Clicked link: {link_name}"

            if action.type == ActionType.CLICK:
                click_name = (action.target.name if action.target else None) or ""
                if self._is_navigation_element(click_name):
                    new_page = self.page_from_link_name(click_name)
                    if new_page:
                        reason = f"Clicked navigation: {click_name}"

            if new_page and new_page != current_page:
                if i > start:
                    boundaries.append(PageBoundary(
                        page_name=current_page,
                        start_index=start,
                        end_index=i - 1,
                        reason=reason,
                        url=current_url,
                    ))
                logger.debug(f"Page change at {i}: {current_page} -> {new_page}")
                current_page = new_page
                current_url = new_url
                start = i

        if actions:
            boundaries.append(PageBoundary(
                page_name=current_page,
                start_index=start,
                end_index=len(actions) - 1,
                reason=END_OF_RECORDING,
                url=current_url,
            ))
        return boundaries

    def page_from_url(self, url: str) -> str:
        name = self._match_page(url)
        if name:
            return name
        parts = [p for p in urlparse(url).path.split("/") if p]
        if parts:
            return capitalize_words(parts[-1]) or DEFAULT_PAGE_NAME
        return DEFAULT_PAGE_NAME

    def page_from_link_name(self, link_name: str) -> Optional[str]:
        name = self._match_page(link_name)
        if name:
            return name
        if 2 < len(link_name) < 30:
            return capitalize_words(link_name) or None
        return None

    def _match_page(self, text: str) -> Optional[str]:
        for pattern, page_name in self.page_patterns:
            if safe_search(pattern, text):
                return page_name
        return None

    def _is_navigation_element(self, name: str) -> bool:
        lowered = name.lower()
        return any(keyword in lowered for keyword in self.navigation_keywords)
