"""Wire formats for cached values."""

from .envelope_codec import PagedEnvelope, PagedResultCodec

__all__ = ["PagedEnvelope", "PagedResultCodec"]
