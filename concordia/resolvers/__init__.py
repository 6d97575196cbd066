"""Reference resolution."""

from .reference_resolver import Fetcher, ReferenceResolver, UrlFetcher

__all__ = ["Fetcher", "ReferenceResolver", "UrlFetcher"]
