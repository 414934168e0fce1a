"""Embed markup builders. One renderer per provider, each returning an HTML fragment."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional
from urllib.parse import quote, urlencode

from markupsafe import escape

from .config import EmbedConfig
from .dimensions import is_empty, parse_int
from .url_parser import NOT_FOUND, ExtractedId, Found

YOUTUBE_EMBED_BASE = "//www.youtube-nocookie.com/embed/"
YOUTUBE_POSTER_BASE = "//img.youtube.com/vi/"
ARCHIVE_ORG_EMBED_BASE = "https://archive.org/embed/"
VIMEO_EMBED_BASE = "https://player.vimeo.com/video/"
DAILYMOTION_EMBED_BASE = "https://geo.dailymotion.com/player.html"
NICONICO_EMBED_BASE = "https://embed.nicovideo.jp/watch/"

# Client-side module the host must load when YouTube lazy loading is on
YOUTUBE_LAZYLOAD_MODULE = "ext.youtube.lazyload"

VIMEO_ALLOW = "autoplay; fullscreen; picture-in-picture; clipboard-write"
VIMEO_REFERRER_POLICY = "strict-origin-when-cross-origin"
DAILYMOTION_ALLOW = "autoplay; fullscreen; picture-in-picture; web-share"


@dataclass(frozen=True)
class RenderOptions:
    """Per-call options. Only the YouTube renderer reads start/autoplay."""

    start: Optional[str] = None
    autoplay: Optional[str] = None
    config: EmbedConfig = EmbedConfig.defaults()

    @classmethod
    def from_attrs(cls, attrs: Mapping[str, str], config: EmbedConfig) -> RenderOptions:
        return cls(start=attrs.get("start"), autoplay=attrs.get("autoplay"), config=config)


def _quote_id(video_id: str) -> str:
    return quote(video_id, safe="/._-")


def _attr(value: object) -> str:
    return str(escape(str(value)))


def _usable_id(extracted: ExtractedId) -> Optional[str]:
    """Return the ID to embed, or None when there is nothing worth rendering."""
    if extracted is NOT_FOUND or not isinstance(extracted, Found):
        return None
    return extracted.video_id or None


def youtube_embed_url(video_id: str, options: RenderOptions = RenderOptions()) -> str:
    url_args: dict[str, str] = {}

    # Timestamp to start on; only positive integers make it into the URL
    start = None if is_empty(options.start) else parse_int(options.start)
    if start is not None and start > 0:
        url_args["start"] = str(start)

    if not is_empty(options.autoplay) or options.config.lazy_load:
        url_args["autoplay"] = "1"

    return YOUTUBE_EMBED_BASE + _quote_id(video_id) + "?" + urlencode(url_args)


def archive_org_embed_url(video_id: str) -> str:
    return ARCHIVE_ORG_EMBED_BASE + _quote_id(video_id)


def vimeo_embed_url(video_id: str) -> str:
    return VIMEO_EMBED_BASE + _quote_id(video_id)


def dailymotion_embed_url(video_id: str) -> str:
    return DAILYMOTION_EMBED_BASE + "?video=" + _quote_id(video_id)


def niconico_embed_url(video_id: str, width: int, height: int) -> str:
    return (
        NICONICO_EMBED_BASE
        + _quote_id(video_id)
        + "/script?"
        + urlencode({"w": int(width), "h": int(height)})
    )


def render_youtube(
    extracted: ExtractedId,
    width: int,
    height: int,
    options: RenderOptions = RenderOptions(),
) -> str:
    """
    Render a privacy-enhanced YouTube iframe.

    In lazy-load mode the iframe is commented out behind a poster image
    inside a sized container; the lazy-load client module swaps it in on
    click.
    """
    video_id = _usable_id(extracted)
    if video_id is None:
        return ""

    w, h = _attr(int(width)), _attr(int(height))
    url = youtube_embed_url(video_id, options)
    iframe = (
        f'<iframe data-extension="youtube" width="{w}" height="{h}" '
        f'src="{_attr(url)}" frameborder="0" allowfullscreen></iframe>'
    )
    if not options.config.lazy_load:
        return iframe

    poster = YOUTUBE_POSTER_BASE + _quote_id(video_id) + "/default.jpg"
    img = f'<img width="{w}" height="{h}" src="{_attr(poster)}" />'
    return (
        f'<div style="width: {w}px; height:{h}px;" '
        f'class="ext-YouTube-video ext-YouTube-video--lazy" data-ytid="{_attr(video_id)}">'
        f"{img}<!-- {iframe} --></div>"
    )


def render_archive_org(
    extracted: ExtractedId,
    width: int,
    height: int,
    options: RenderOptions = RenderOptions(),
) -> str:
    video_id = _usable_id(extracted)
    if video_id is None:
        return ""
    return (
        f'<iframe src="{_attr(archive_org_embed_url(video_id))}" '
        f'width="{_attr(int(width))}" height="{_attr(int(height))}" frameborder="0" '
        f'webkitallowfullscreen="true" mozallowfullscreen="true" allowfullscreen></iframe>'
    )


def render_vimeo(
    extracted: ExtractedId,
    width: int,
    height: int,
    options: RenderOptions = RenderOptions(),
) -> str:
    video_id = _usable_id(extracted)
    if video_id is None:
        return ""
    return (
        f'<iframe src="{_attr(vimeo_embed_url(video_id))}" '
        f'width="{_attr(int(width))}" height="{_attr(int(height))}" frameborder="0" '
        f'allow="{VIMEO_ALLOW}" referrerpolicy="{VIMEO_REFERRER_POLICY}" '
        f"allowfullscreen></iframe>"
    )


def render_dailymotion(
    extracted: ExtractedId,
    width: int,
    height: int,
    options: RenderOptions = RenderOptions(),
) -> str:
    video_id = _usable_id(extracted)
    if video_id is None:
        return ""
    return (
        f'<iframe src="{_attr(dailymotion_embed_url(video_id))}" '
        f'width="{_attr(int(width))}" height="{_attr(int(height))}" frameborder="0" '
        f'allow="{DAILYMOTION_ALLOW}" allowfullscreen></iframe>'
    )


def render_niconico(
    extracted: ExtractedId,
    width: int,
    height: int,
    options: RenderOptions = RenderOptions(),
) -> str:
    """NicoNico embeds through a script tag rather than an iframe."""
    video_id = _usable_id(extracted)
    if video_id is None:
        return ""
    src = niconico_embed_url(video_id, width, height)
    return f'<script type="application/javascript" src="{_attr(src)}"></script>'
