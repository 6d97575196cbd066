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

"""Validator interfaces.

A schema validator checks that a schema node is well-formed; a data validator
checks that a value conforms to a schema node. Both signal failure by raising
and may call back into the controller to recurse into children.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable

from ..models.schema import Schema

if TYPE_CHECKING:
    from .controller import ValidationController


class SchemaValidator(ABC):
    """Abstract schema validator."""

    @abstractmethod
    def validate_schema(self, schema: Schema, controller: "ValidationController") -> None:
        """Raise SchemaValidationError if ``schema`` is not well-formed."""
        pass


class DataValidator(ABC):
    """Abstract data validator."""

    @abstractmethod
    def validate_data(self, schema: Schema, data: Any, controller: "ValidationController") -> None:
        """Raise DataValidationError if ``data`` does not conform to ``schema``."""
        pass


class FunctionSchemaValidator(SchemaValidator):
    """Adapts a plain ``fn(schema, controller)`` callable."""

    def __init__(self, fn: Callable[[Schema, "ValidationController"], None]):
        self.fn = fn

    def validate_schema(self, schema: Schema, controller: "ValidationController") -> None:
        self.fn(schema, controller)

    def __repr__(self) -> str:
        return f"FunctionSchemaValidator({getattr(self.fn, '__name__', self.fn)!r})"


class FunctionDataValidator(DataValidator):
    """Adapts a plain ``fn(schema, data, controller)`` callable."""

    def __init__(self, fn: Callable[[Schema, Any, "ValidationController"], None]):
        self.fn = fn

    def validate_data(self, schema: Schema, data: Any, controller: "ValidationController") -> None:
        self.fn(schema, data, controller)

    def __repr__(self) -> str:
        return f"FunctionDataValidator({getattr(self.fn, '__name__', self.fn)!r})"
