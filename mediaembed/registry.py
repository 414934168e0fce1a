"""Tag registry. Maps embed tag names to provider descriptors and renders tags."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

from . import renderers
from .config import EmbedConfig
from .dimensions import is_empty, parse_dimension
from .url_parser import (
    ARCHIVE_ORG,
    DAILYMOTION,
    NICONICO,
    NOT_FOUND,
    VIMEO,
    YOUTUBE,
    ExtractedId,
    IdExtractor,
)

logger = logging.getLogger(__name__)

Renderer = Callable[[ExtractedId, int, int, renderers.RenderOptions], str]

MAX_WIDTH = 960
MAX_HEIGHT = 720


class UnknownTag(Exception):
    """
    An exception that indicates the passed in tag is not registered.
    """

    pass


@dataclass(frozen=True)
class ProviderDescriptor:
    """Everything needed to turn one tag into markup."""

    tag: str
    extractor: IdExtractor
    renderer: Renderer
    id_attr: str
    default_width: int
    default_height: int
    max_width: int = MAX_WIDTH
    max_height: int = MAX_HEIGHT
    # Height that ignores the height attribute (audio players)
    fixed_height: Optional[int] = None
    client_modules: Callable[[EmbedConfig], tuple[str, ...]] = lambda config: ()

    def dimensions(self, attrs: Mapping[str, str]) -> tuple[int, int]:
        width = parse_dimension(attrs.get("width"), self.default_width, self.max_width)
        if self.fixed_height is not None:
            return width, self.fixed_height
        height = parse_dimension(attrs.get("height"), self.default_height, self.max_height)
        return width, height

    def extract(self, body: Optional[str], attrs: Mapping[str, str]) -> ExtractedId:
        """The ID attribute wins over the tag body. Neither given means no ID."""
        source = attrs.get(self.id_attr)
        if is_empty(source):
            source = body
        if is_empty(source):
            return NOT_FOUND
        return self.extractor.extract(source)


def _youtube_modules(config: EmbedConfig) -> tuple[str, ...]:
    if config.lazy_load:
        return (renderers.YOUTUBE_LAZYLOAD_MODULE,)
    return ()


# Registry of embed tags
_TAGS: dict[str, ProviderDescriptor] = {}


def register_tag(descriptor: ProviderDescriptor) -> None:
    """Register a tag, replacing any existing descriptor with the same name."""
    _TAGS[descriptor.tag] = descriptor


def get_descriptor(tag: str) -> ProviderDescriptor:
    try:
        return _TAGS[tag.lower()]
    except KeyError:
        raise UnknownTag(tag) from None


def tag_names() -> list[str]:
    return sorted(_TAGS)


def client_modules(tag: str, config: EmbedConfig) -> tuple[str, ...]:
    """Return the client-side modules the host must load for this tag."""
    return get_descriptor(tag).client_modules(config)


def render_tag(
    tag: str,
    body: Optional[str],
    attrs: Optional[Mapping[str, str]] = None,
    config: Optional[EmbedConfig] = None,
) -> str:
    """
    Render an embed tag to an HTML fragment.

    Returns the empty string when no ID can be extracted. Raises UnknownTag
    if the tag is not registered.
    """
    descriptor = get_descriptor(tag)
    attrs = attrs or {}
    cfg = config or EmbedConfig.defaults()

    extracted = descriptor.extract(body, attrs)
    logger.debug("Tag <%s> resolved to %r", descriptor.tag, extracted)
    if extracted is NOT_FOUND:
        return ""

    width, height = descriptor.dimensions(attrs)
    options = renderers.RenderOptions.from_attrs(attrs, cfg)
    return descriptor.renderer(extracted, width, height, options)


for _descriptor in (
    ProviderDescriptor(
        tag="youtube",
        extractor=YOUTUBE,
        renderer=renderers.render_youtube,
        id_attr="ytid",
        default_width=560,
        default_height=315,
        max_height=MAX_WIDTH,
        client_modules=_youtube_modules,
    ),
    ProviderDescriptor(
        tag="aovideo",
        extractor=ARCHIVE_ORG,
        renderer=renderers.render_archive_org,
        id_attr="aoid",
        default_width=560,
        default_height=315,
    ),
    ProviderDescriptor(
        tag="aoaudio",
        extractor=ARCHIVE_ORG,
        renderer=renderers.render_archive_org,
        id_attr="aoid",
        default_width=560,
        default_height=30,
        fixed_height=30,
    ),
    ProviderDescriptor(
        tag="vimeo",
        extractor=VIMEO,
        renderer=renderers.render_vimeo,
        id_attr="vimeoid",
        default_width=640,
        default_height=360,
    ),
    ProviderDescriptor(
        tag="dailymotion",
        extractor=DAILYMOTION,
        renderer=renderers.render_dailymotion,
        id_attr="dmid",
        default_width=640,
        default_height=360,
    ),
    ProviderDescriptor(
        tag="nicovideo",
        extractor=NICONICO,
        renderer=renderers.render_niconico,
        id_attr="nvid",
        default_width=320,
        default_height=180,
        max_height=MAX_WIDTH,
    ),
):
    register_tag(_descriptor)
