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

"""Loading JSON and YAML documents into plain Python values."""

import json
import logging
from pathlib import Path
from typing import Any, Union

import yaml

from ..exceptions import DocumentLoadError

logger = logging.getLogger(__name__)

FORMAT_JSON = "json"
FORMAT_YAML = "yaml"

_YAML_SUFFIXES = {".yaml", ".yml"}


def format_for_path(path: Union[str, Path]) -> str:
    """Pick the document format from a file suffix (JSON unless .yaml/.yml)."""
    return FORMAT_YAML if Path(path).suffix.lower() in _YAML_SUFFIXES else FORMAT_JSON


class DocumentLoader:
    """Decodes schema and data documents.

    Values come back as plain Python data: dict, list, str, int/float, bool
    and None.
    """

    def load_from_string(self, content: str, fmt: str = FORMAT_JSON) -> Any:
        """Load a document from string content.

        Args:
            content: JSON or YAML text
            fmt: ``"json"`` or ``"yaml"``

        Returns:
            The decoded document value

        Raises:
            DocumentLoadError: If content cannot be parsed
        """
        if fmt == FORMAT_JSON:
            try:
                return json.loads(content)
            except ValueError as exc:
                raise DocumentLoadError(f"Failed to parse JSON content: {exc}") from exc

        if fmt == FORMAT_YAML:
            try:
                return yaml.safe_load(content)
            except yaml.YAMLError as exc:
                raise DocumentLoadError(f"Failed to parse YAML content: {exc}") from exc

        raise ValueError(f"Unsupported document format: {fmt!r}")

    def load_from_bytes(self, data: bytes, fmt: str = FORMAT_JSON) -> Any:
        """Load a document from raw bytes (UTF-8)."""
        try:
            content = data.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise DocumentLoadError(f"Document is not valid UTF-8: {exc}") from exc
        return self.load_from_string(content, fmt)

    def load_file(self, file_path: Union[str, Path]) -> Any:
        """Load a document file, choosing JSON or YAML by suffix.

        Raises:
            DocumentLoadError: If the file cannot be read or parsed
        """
        path = Path(file_path)

        if not path.exists():
            raise DocumentLoadError(f"Document file not found: {path}")

        if not path.is_file():
            raise DocumentLoadError(f"Path is not a file: {path}")

        logger.debug(f"Loading document file: {path}")
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise DocumentLoadError(f"Failed to read document file {path}: {exc}") from exc

        try:
            return self.load_from_string(content, format_for_path(path))
        except DocumentLoadError as exc:
            raise DocumentLoadError(f"{path}: {exc}") from exc


# Global loader instance
document_loader = DocumentLoader()


def load_document_from_string(content: str, fmt: str = FORMAT_JSON) -> Any:
    return document_loader.load_from_string(content, fmt)


def load_document_from_bytes(data: bytes, fmt: str = FORMAT_JSON) -> Any:
    return document_loader.load_from_bytes(data, fmt)


def load_document_file(file_path: Union[str, Path]) -> Any:
    return document_loader.load_file(file_path)
