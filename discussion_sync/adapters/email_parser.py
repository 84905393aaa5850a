"""Extract Figma comment data from notification email HTML.

Figma's comment notification emails change layout often, so the comment
text is located by a chain of strategies tried in order. The first one that
returns text wins. File key, comment id and author are extracted
independently of the strategy that found the text.
"""

import html as html_lib
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional
from urllib.parse import unquote

from discussion_sync.logging_config import get_logger

logger = get_logger(__name__)

MIN_COMMENT_LENGTH = 5
MAX_COMMENT_LENGTH = 500
CONTEXT_CHARS = 100
HTML_PREVIEW_LENGTH = 200

BOILERPLATE_PATTERNS = (
    "unsubscribe",
    "privacy policy",
    "figma, inc",
    "mobile app",
    "stay on top",
    "view in figma",
)
CSS_KEYWORDS = ("font-family", "font-size", "padding", "margin", "background", "border")
CSS_AT_RULES = frozenset({
    "@font",
    "@media",
    "@import",
    "@keyframes",
    "@charset",
    "@supports",
    "@mentions",
})

MENTION_PATTERN = re.compile(r"@[A-Za-z0-9_]+")
FIGBOT_PATTERN = re.compile(r"@figbot(?:\s+[^<>@]*)?", re.IGNORECASE)
TABLE_CELL_MENTION_PATTERN = re.compile(r"<td[^>]*>([^<]*@[A-Za-z0-9_]+[^<]*)</td>", re.IGNORECASE)
TEXT_BLOCK_PATTERN = re.compile(r"<(p|td)\b[^>]*>(.*?)</\1>", re.IGNORECASE | re.DOTALL)
TAG_PATTERN = re.compile(r"<[^>]*>")
WHITESPACE_PATTERN = re.compile(r"\s+")

FILE_KEY_FROM_SENDER = re.compile(r"comments-([a-zA-Z0-9]+)@", re.IGNORECASE)
CLICK_REDIRECT_LINK = re.compile(r'href="(https?://click\.figma\.com[^"]+)"')
FIGMA_FILE_URL = re.compile(r"https://(?:www\.)?figma\.com/(?:file|board)/([a-zA-Z0-9]+)", re.IGNORECASE)
REDIRECT_FILE_PATH = re.compile(r"/file/([a-zA-Z0-9]+)")
COMMENT_LINK = re.compile(r'href="([^"]*#comment-[^"]+)"', re.IGNORECASE)
COMMENT_ID = re.compile(r"#comment-([a-zA-Z0-9_-]+)")
FILE_NAME_PATTERNS = (
    re.compile(r"commented on\s+(.+?)(?:<|$|\n)", re.IGNORECASE),
    re.compile(r"\bfile:\s*(.+?)(?:<|$|\n)", re.IGNORECASE),
    re.compile(r"<title>.*?on\s+(.+?)</title>", re.IGNORECASE),
)
ADDRESS_PATTERN = re.compile(r"([^<\s]+@[^>\s]+)")
DISPLAY_NAME_PATTERN = re.compile(r"^([^<]+)<")


def clean_text(text: str) -> str:
    """Drop tags, decode entities and collapse whitespace."""
    text = TAG_PATTERN.sub(" ", text)
    text = html_lib.unescape(text)
    return WHITESPACE_PATTERN.sub(" ", text).strip()


def is_boilerplate(text: str) -> bool:
    lower = text.lower()
    return any(pattern in lower for pattern in BOILERPLATE_PATTERNS)


def is_css_or_navigation(text: str) -> bool:
    lower = text.lower()
    return any(keyword in lower for keyword in CSS_KEYWORDS)


def _is_comment_like(text: str) -> bool:
    return (
        MIN_COMMENT_LENGTH <= len(text) <= MAX_COMMENT_LENGTH
        and not is_boilerplate(text)
        and not is_css_or_navigation(text)
    )


@dataclass
class StrategyMatch:
    """Comment text found by one strategy."""

    comment_text: str
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class FigmaEmailData:
    """Everything extracted from one Figma comment email."""

    comment_text: str
    file_key: str
    comment_id: str
    file_name: str
    author_email: str
    author_name: str
    figma_url: str
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class EmailParseResult:
    """Outcome of parsing an email. ``data`` is set only on success."""

    success: bool
    data: Optional[FigmaEmailData] = None
    error: Optional[str] = None
    strategy: Optional[str] = None


class CommentStrategy(ABC):
    """One way of locating the comment text in an email."""

    name: str

    @abstractmethod
    def find(self, html: str) -> Optional[StrategyMatch]:
        pass


class FigbotMentionStrategy(CommentStrategy):
    """The longest ``@Figbot ...`` run of text, which is the bot request itself."""

    name = "FigbotMention"

    def find(self, html: str) -> Optional[StrategyMatch]:
        mentions = [clean_text(match.group(0)) for match in FIGBOT_PATTERN.finditer(html)]
        # A bare "@Figbot" carries no request
        mentions = [mention for mention in mentions if len(mention) > len("@Figbot")]
        if not mentions:
            return None
        return StrategyMatch(max(mentions, key=len), {"mentioned_user": "Figbot"})


class StructuredContentStrategy(CommentStrategy):
    """A plain-text table cell holding an @mention."""

    name = "StructuredContent"

    def find(self, html: str) -> Optional[StrategyMatch]:
        for match in TABLE_CELL_MENTION_PATTERN.finditer(html):
            cell = clean_text(match.group(1))
            mention = MENTION_PATTERN.search(cell)
            if mention and _is_comment_like(cell):
                return StrategyMatch(cell, {"extracted_mention": mention.group(0)})
        return None


class MentionContextStrategy(CommentStrategy):
    """The text on either side of the first usable @mention."""

    name = "MentionContext"

    def find(self, html: str) -> Optional[StrategyMatch]:
        seen = set()
        for match in MENTION_PATTERN.finditer(html):
            mention = match.group(0)
            lower = mention.lower()
            if lower in seen or lower in CSS_AT_RULES or "@email" in lower or "@mail" in lower:
                continue
            seen.add(lower)

            context = re.search(
                rf"(.{{0,{CONTEXT_CHARS}}})({re.escape(mention)})(.{{0,{CONTEXT_CHARS}}})",
                html,
                re.IGNORECASE,
            )
            if context is None:
                continue
            text = clean_text("".join(context.groups()))
            if _is_comment_like(text):
                return StrategyMatch(text, {"extracted_mention": mention})
        return None


class FallbackTextStrategy(CommentStrategy):
    """The longest paragraph or table cell that is not boilerplate."""

    name = "FallbackText"

    def find(self, html: str) -> Optional[StrategyMatch]:
        candidates = []
        for match in TEXT_BLOCK_PATTERN.finditer(html):
            text = clean_text(match.group(2))
            if (
                len(text) >= MIN_COMMENT_LENGTH
                and not is_boilerplate(text)
                and not is_css_or_navigation(text)
            ):
                candidates.append(text)
        if not candidates:
            return None
        return StrategyMatch(max(candidates, key=len), {"fallback": True})


DEFAULT_STRATEGIES: tuple[CommentStrategy, ...] = (
    FigbotMentionStrategy(),
    StructuredContentStrategy(),
    MentionContextStrategy(),
    FallbackTextStrategy(),
)


def extract_author(from_email: str) -> tuple[str, str]:
    """Return ``(name, email)`` from a ``From`` header.

    ``Jane <jane@x.com>`` yields the display name; a bare address yields its
    local part as the name.
    """
    address = ADDRESS_PATTERN.search(from_email)
    email = address.group(1) if address else from_email.strip()

    display_name = DISPLAY_NAME_PATTERN.match(from_email)
    if display_name and display_name.group(1).strip():
        return display_name.group(1).strip(), email
    return email.split("@")[0] or "unknown", email


class EmailParser:
    """Parse Figma comment notification emails."""

    def __init__(self, strategies: Optional[tuple[CommentStrategy, ...]] = None):
        self.strategies = strategies or DEFAULT_STRATEGIES

    def parse(self, html: str, from_email: str) -> EmailParseResult:
        """Extract the comment and its file from an email.

        Never raises. Failures come back as ``success=False`` with an
        ``error`` message.
        """
        found: Optional[StrategyMatch] = None
        strategy_name: Optional[str] = None
        for strategy in self.strategies:
            found = strategy.find(html)
            if found is not None and found.comment_text:
                strategy_name = strategy.name
                break

        if found is None or not found.comment_text:
            return self._failure(html, "All strategies failed to extract comment text")

        file_key, comment_id, figma_url = self._extract_file_location(html, from_email)
        if not file_key:
            return self._failure(html, "Failed to extract file key")

        author_name, author_email = extract_author(from_email)
        if not author_email:
            return self._failure(html, "Failed to extract author email")

        data = FigmaEmailData(
            comment_text=found.comment_text,
            file_key=file_key,
            comment_id=comment_id or "",
            file_name=self._extract_file_name(html) or "Untitled",
            author_email=author_email,
            author_name=author_name,
            figma_url=figma_url or f"https://www.figma.com/file/{file_key}",
            metadata={
                **found.metadata,
                "parse_strategy": strategy_name,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )
        logger.debug("Parsed Figma email", strategy=strategy_name, file_key=file_key)
        return EmailParseResult(success=True, data=data, strategy=strategy_name)

    @staticmethod
    def _failure(html: str, error: str) -> EmailParseResult:
        logger.warning("Figma email parse failed", error=error, html_preview=html[:HTML_PREVIEW_LENGTH])
        return EmailParseResult(success=False, error=error)

    @staticmethod
    def _extract_file_location(html: str, from_email: str) -> tuple[Optional[str], Optional[str], Optional[str]]:
        """Find ``(file_key, comment_id, figma_url)``.

        The file key is looked up in the sender address first
        (``comments-<key>@email.figma.com``), then in click-tracking
        redirects, then in direct figma.com links.
        """
        file_key: Optional[str] = None
        figma_url: Optional[str] = None

        sender_key = FILE_KEY_FROM_SENDER.search(from_email)
        if sender_key:
            file_key = sender_key.group(1)
            figma_url = f"https://www.figma.com/file/{file_key}"

        if not file_key:
            redirect = CLICK_REDIRECT_LINK.search(html)
            if redirect:
                decoded = unquote(redirect.group(1))
                match = FIGMA_FILE_URL.search(decoded) or REDIRECT_FILE_PATH.search(decoded)
                if match:
                    file_key = match.group(1)
                    figma_url = f"https://www.figma.com/file/{file_key}"

        if not file_key:
            direct = FIGMA_FILE_URL.search(html)
            if direct:
                file_key = direct.group(1)
                figma_url = direct.group(0)

        comment_id: Optional[str] = None
        if figma_url:
            anchor = COMMENT_ID.search(figma_url)
            if anchor:
                comment_id = anchor.group(1)

        if not comment_id:
            for link in COMMENT_LINK.finditer(html):
                anchor = COMMENT_ID.search(link.group(1))
                if anchor:
                    comment_id = anchor.group(1)
                    if figma_url and "#comment" not in figma_url:
                        figma_url = link.group(1)
                    break

        return file_key, comment_id, figma_url

    @staticmethod
    def _extract_file_name(html: str) -> Optional[str]:
        for pattern in FILE_NAME_PATTERNS:
            match = pattern.search(html)
            if match:
                name = TAG_PATTERN.sub("", match.group(1)).strip()
                if name:
                    return name
        return None
