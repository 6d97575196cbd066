# Copyright 2025 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Fetching and resolving ``$ref`` schema references."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import closing
from typing import TYPE_CHECKING, Any, Callable, Optional, Union
from urllib.error import URLError
from urllib.request import Request, urlopen

from ..config import concordia_config
from ..exceptions import (
    DocumentLoadError,
    DocumentRootError,
    ReferenceEmptyBodyError,
    ReferenceFetchError,
    ReferenceNotJsonError,
    ReferenceUnreachableError,
    SchemaValidationError,
)
from ..parsers.document_loader import FORMAT_JSON, document_loader

if TYPE_CHECKING:
    from ..document import SchemaDocument
    from ..validator.controller import ValidationController

logger = logging.getLogger(__name__)


class Fetcher(ABC):
    """Turns a URL into the document it points to, as bytes or a readable stream."""

    @abstractmethod
    def fetch(self, url: str) -> bytes:
        """Raise ReferenceFetchError when the document cannot be retrieved."""
        pass


class UrlFetcher(Fetcher):
    """Fetches documents with ``urllib``; supports http(s) and file URLs."""

    def __init__(self, timeout: Optional[float] = None, user_agent: Optional[str] = None):
        self.timeout = timeout if timeout is not None else concordia_config.fetch_timeout
        self.user_agent = user_agent or concordia_config.user_agent

    def fetch(self, url: str) -> bytes:
        logger.debug(f"Fetching '{url}' (timeout={self.timeout}s)")
        request = Request(url, headers={"User-Agent": self.user_agent})
        try:
            with urlopen(request, timeout=self.timeout) as resp:  # nosec - reference URLs come from the schema author
                # file:// responses carry no status.
                status = getattr(resp, "status", None)
                if status is not None and not 200 <= status < 300:
                    raise ReferenceFetchError(
                        f"Fetching '{url}' returned status {status}", url=url
                    )
                return resp.read()
        except (URLError, OSError, ValueError) as exc:
            raise ReferenceFetchError(f"Could not fetch '{url}': {exc}", url=url) from exc


class _FunctionFetcher(Fetcher):
    def __init__(self, fn: Callable[[str], bytes]):
        self.fn = fn

    def fetch(self, url: str) -> bytes:
        return self.fn(url)


FetcherLike = Union[Fetcher, Callable[[str], bytes]]


class ReferenceResolver:
    """Resolves reference URLs into validated schema documents.

    Every call fetches again; nothing is cached and reference cycles are not
    detected.
    """

    def __init__(
        self,
        fetcher: Optional[FetcherLike] = None,
        controller: Optional["ValidationController"] = None,
    ):
        if fetcher is None:
            fetcher = UrlFetcher()
        elif not isinstance(fetcher, Fetcher):
            fetcher = _FunctionFetcher(fetcher)
        self.fetcher: Fetcher = fetcher
        self.controller = controller

    def load(self, url: str) -> Any:
        """Fetch ``url`` and decode it as a JSON document value.

        Raises:
            ReferenceFetchError: If the document cannot be retrieved
            ReferenceEmptyBodyError: If the document is empty
            ReferenceNotJsonError: If the document is not JSON
        """
        try:
            body = self.fetcher.fetch(url)
            if hasattr(body, "read"):
                with closing(body):
                    body = body.read()
        except (ReferenceUnreachableError, RecursionError):
            raise
        except Exception as exc:
            raise ReferenceFetchError(f"Could not fetch '{url}': {exc}", url=url) from exc

        if body is not None and not isinstance(body, (bytes, bytearray, str)):
            raise ReferenceFetchError(
                f"Fetching '{url}' returned {type(body).__name__}, not bytes", url=url
            )
        if isinstance(body, str):
            body = body.encode("utf-8")
        if body is None or not body.strip():
            raise ReferenceEmptyBodyError(f"The referenced schema at '{url}' is empty", url=url)

        try:
            return document_loader.load_from_bytes(body, FORMAT_JSON)
        except DocumentLoadError as exc:
            raise ReferenceNotJsonError(
                f"The referenced schema at '{url}' is not JSON: {exc}", url=url
            ) from exc

    def resolve(self, url: str) -> "SchemaDocument":
        """Fetch ``url`` and build a validated schema document from it.

        Raises:
            ReferenceUnreachableError: If the document cannot be fetched or
                decoded, or is not a valid schema document
        """
        from ..document import SchemaDocument

        value = self.load(url)
        logger.debug(f"Building referenced schema document from '{url}'")
        try:
            return SchemaDocument.from_value(value, controller=self.controller, resolver=self)
        except ReferenceUnreachableError:
            # Already describes the nested reference that failed.
            raise
        except (SchemaValidationError, DocumentRootError) as exc:
            raise ReferenceUnreachableError(
                f"The referenced schema at '{url}' is invalid: {exc}", url=url
            ) from exc
