"""Extensible URL parser for embed providers. Recognizes media URLs and bare IDs and extracts IDs."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Sequence, Union

# Characters allowed in a bare ID
ID_CHARS = r"[0-9A-Za-z_-]"
# archive.org, NicoNico and Dailymotion IDs may also contain slashes and dots
PATH_ID_CHARS = r"[0-9A-Za-z_/.-]"


@dataclass(frozen=True)
class Found:
    """An ID successfully extracted for a provider. The ID may be empty."""

    provider: str
    video_id: str


class NotFound:
    """Extraction failure. Use the NOT_FOUND singleton."""

    _instance: Optional[NotFound] = None

    def __new__(cls) -> NotFound:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND = NotFound()

ExtractedId = Union[Found, NotFound]


class IdExtractor:
    """
    Provider-specific ID extractor.

    Tries each URL pattern in order (group 1 is the ID). If none matches, the
    whole input is treated as a bare ID and the longest run matching
    ``bare_pattern`` wins.
    """

    def __init__(
        self,
        provider: str,
        url_patterns: Sequence[str],
        bare_pattern: str,
    ) -> None:
        self.provider = provider
        self.url_patterns: tuple[re.Pattern[str], ...] = tuple(
            re.compile(p, re.IGNORECASE) for p in url_patterns
        )
        self.bare_pattern: re.Pattern[str] = re.compile(bare_pattern)

    def match_url(self, text: str) -> Optional[str]:
        """Return the ID captured by the first matching URL pattern, or None."""
        for pattern in self.url_patterns:
            m = pattern.search(text)
            if m:
                return m.group(1)
        return None

    def match_bare(self, text: str) -> Optional[str]:
        """Return the longest valid-ID run in text, or None."""
        runs = self.bare_pattern.findall(text)
        if not runs:
            return None
        return max(runs, key=len)

    def extract(self, text: Optional[str]) -> ExtractedId:
        if text is None:
            return NOT_FOUND

        video_id = self.match_url(text)
        if video_id is None:
            video_id = self.match_bare(text)
        if video_id is None:
            return NOT_FOUND
        return Found(provider=self.provider, video_id=video_id)


YOUTUBE = IdExtractor(
    "youtube",
    url_patterns=(
        # Covers youtu.be, /embed/, /v/, /watch?v=, /shorts/, /user/... and
        # the privacy-enhanced youtube-nocookie.com host
        r"(?:http|https|)(?::\/\/|)(?:www.|)"
        r"(?:youtu\.be\/|youtube(?:-nocookie)?\.com(?:\/embed\/|\/v\/|\/watch\?v=|"
        r"\/ytscreeningroom\?v=|\/feeds\/api\/videos\/|\/user\S*[^\w\-\s]|\S*[^\w\-\s]))"
        r"([A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])",
    ),
    # YouTube IDs are always exactly 11 characters
    bare_pattern=r"(?<![0-9A-Za-z_-])[0-9A-Za-z_-]{11}(?![0-9A-Za-z_-])",
)

ARCHIVE_ORG = IdExtractor(
    "archive.org",
    url_patterns=(rf"archive\.org/(?:details|embed)/({PATH_ID_CHARS}+)",),
    bare_pattern=rf"{PATH_ID_CHARS}+",
)

VIMEO = IdExtractor(
    "vimeo",
    url_patterns=(
        rf"player\.vimeo\.com/video/({ID_CHARS}+)",
        r"vimeo\.com/(?:video/|channels/[\w-]+/|groups/[\w-]+/videos/)?(\d+)",
    ),
    bare_pattern=rf"{ID_CHARS}+",
)

DAILYMOTION = IdExtractor(
    "dailymotion",
    url_patterns=(
        rf"geo\.dailymotion\.com/player(?:/[\w-]+)?\.html\?(?:\S*?&)?video=({PATH_ID_CHARS}+)",
        r"dailymotion\.com/(?:embed/)?video/([0-9A-Za-z]+)",
        r"dai\.ly/([0-9A-Za-z]+)",
    ),
    bare_pattern=rf"{PATH_ID_CHARS}+",
)

NICONICO = IdExtractor(
    "niconico",
    url_patterns=(
        # The embed script URL appends /script to the ID
        rf"nicovideo\.jp/watch/({PATH_ID_CHARS}+?)(?:/script)?(?:[?#&\s]|$)",
        r"nico\.ms/([0-9A-Za-z_.-]+)",
    ),
    bare_pattern=rf"{PATH_ID_CHARS}+",
)


# Registry of provider extractors
_EXTRACTORS: dict[str, IdExtractor] = {
    e.provider: e for e in (YOUTUBE, ARCHIVE_ORG, VIMEO, DAILYMOTION, NICONICO)
}


def register_extractor(extractor: IdExtractor) -> None:
    """Register an extractor for a new provider, or replace an existing one."""
    _EXTRACTORS[extractor.provider] = extractor


def get_extractor(provider: str) -> IdExtractor:
    return _EXTRACTORS[provider]


def extract_id(provider: str, text: Optional[str]) -> ExtractedId:
    """Extract a provider's ID from a URL or bare ID. Returns NOT_FOUND on failure."""
    return get_extractor(provider).extract(text)


def parse_video_url(url: str) -> ExtractedId:
    """
    Identify the provider of a full media URL and extract its ID.

    Only URL patterns are tried, since a bare ID cannot tell providers apart.
    Returns NOT_FOUND for unsupported or invalid URLs.
    """
    if not url or not isinstance(url, str):
        return NOT_FOUND

    url = url.strip()
    for extractor in _EXTRACTORS.values():
        video_id = extractor.match_url(url)
        if video_id is not None:
            return Found(provider=extractor.provider, video_id=video_id)

    return NOT_FOUND
