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

"""Validation controller: per-kind dispatch of schema and data validators."""

from __future__ import annotations

import logging
import threading
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from ..models.schema import Schema, SchemaKind
from .base import DataValidator, FunctionDataValidator, FunctionSchemaValidator, SchemaValidator
from .required import REQUIRED_VALIDATORS

logger = logging.getLogger(__name__)

SchemaValidatorLike = Union[SchemaValidator, Callable[[Schema, "ValidationController"], None]]
DataValidatorLike = Union[DataValidator, Callable[[Schema, Any, "ValidationController"], None]]


def _coerce_kind(kind: Union[SchemaKind, str]) -> SchemaKind:
    try:
        return SchemaKind(kind)
    except ValueError:
        raise ValueError(
            f"Unknown schema kind: {kind!r}. Valid kinds: {[k.value for k in SchemaKind]}"
        ) from None


class ValidationControllerBuilder:
    """Accumulates custom validators per kind before building a controller."""

    def __init__(self):
        self._schema_validators: Dict[SchemaKind, List[SchemaValidator]] = {
            kind: [] for kind in SchemaKind
        }
        self._data_validators: Dict[SchemaKind, List[DataValidator]] = {
            kind: [] for kind in SchemaKind
        }

    def add_schema_validator(
        self, kind: Union[SchemaKind, str], validator: Optional[SchemaValidatorLike]
    ) -> "ValidationControllerBuilder":
        kind = _coerce_kind(kind)
        if validator is None:
            return self
        if not isinstance(validator, SchemaValidator):
            if not callable(validator):
                raise TypeError(f"Not a schema validator: {validator!r}")
            validator = FunctionSchemaValidator(validator)
        self._schema_validators[kind].append(validator)
        return self

    def add_data_validator(
        self, kind: Union[SchemaKind, str], validator: Optional[DataValidatorLike]
    ) -> "ValidationControllerBuilder":
        kind = _coerce_kind(kind)
        if validator is None:
            return self
        if not isinstance(validator, DataValidator):
            if not callable(validator):
                raise TypeError(f"Not a data validator: {validator!r}")
            validator = FunctionDataValidator(validator)
        self._data_validators[kind].append(validator)
        return self

    def add_validator(
        self, kind: Union[SchemaKind, str], validator: Union[SchemaValidator, DataValidator, None]
    ) -> "ValidationControllerBuilder":
        """Register ``validator`` in whichever of the two roles it implements."""
        kind = _coerce_kind(kind)
        if validator is None:
            return self
        if not isinstance(validator, (SchemaValidator, DataValidator)):
            raise TypeError(
                f"Validator must be a SchemaValidator and/or DataValidator: {validator!r}"
            )
        if isinstance(validator, SchemaValidator):
            self.add_schema_validator(kind, validator)
        if isinstance(validator, DataValidator):
            self.add_data_validator(kind, validator)
        return self

    def build(self) -> "ValidationController":
        return ValidationController(self._schema_validators, self._data_validators)


class ValidationController:
    """Dispatches schema and data validation to the validators of each kind.

    The required validator of a kind always runs first, followed by custom
    validators in the order they were added. The first failure aborts the
    whole call.
    """

    def __init__(
        self,
        schema_validators: Optional[Mapping[SchemaKind, List[SchemaValidator]]] = None,
        data_validators: Optional[Mapping[SchemaKind, List[DataValidator]]] = None,
    ):
        schema_validators = schema_validators or {}
        data_validators = data_validators or {}

        self._schema_validators: Mapping[SchemaKind, Tuple[SchemaValidator, ...]] = MappingProxyType({
            kind: (REQUIRED_VALIDATORS[kind], *schema_validators.get(kind, ()))
            for kind in SchemaKind
        })
        self._data_validators: Mapping[SchemaKind, Tuple[DataValidator, ...]] = MappingProxyType({
            kind: (REQUIRED_VALIDATORS[kind], *data_validators.get(kind, ()))
            for kind in SchemaKind
        })

    @classmethod
    def builder(cls) -> ValidationControllerBuilder:
        return ValidationControllerBuilder()

    def get_schema_validators(self, kind: Union[SchemaKind, str]) -> Tuple[SchemaValidator, ...]:
        return self._schema_validators[_coerce_kind(kind)]

    def get_data_validators(self, kind: Union[SchemaKind, str]) -> Tuple[DataValidator, ...]:
        return self._data_validators[_coerce_kind(kind)]

    @property
    def has_custom_validators(self) -> bool:
        return any(len(v) > 1 for v in self._schema_validators.values()) or any(
            len(v) > 1 for v in self._data_validators.values()
        )

    def validate_schema(self, schema: Schema) -> None:
        """Check that ``schema`` is well-formed.

        Raises:
            SchemaValidationError: From the first validator that rejects it.
        """
        for validator in self._schema_validators[schema.kind]:
            validator.validate_schema(schema, self)

    def validate_data(self, schema: Schema, data: Any) -> None:
        """Check that ``data`` conforms to ``schema``.

        Raises:
            DataValidationError: From the first validator that rejects it.
        """
        for validator in self._data_validators[schema.kind]:
            validator.validate_data(schema, data, self)

    def __repr__(self) -> str:
        custom = {
            kind.value: len(validators) - 1
            for kind, validators in self._schema_validators.items()
            if len(validators) > 1
        }
        return f"ValidationController(custom_schema_validators={custom})"


# ---- default controller (singleton) ----------------------------------------

_DEFAULT_CONTROLLER: Optional[ValidationController] = None
_DEFAULT_CONTROLLER_LOCK = threading.Lock()


def get_default_controller() -> ValidationController:
    """Return the process-wide controller holding only the required validators."""
    global _DEFAULT_CONTROLLER
    if _DEFAULT_CONTROLLER is None:
        with _DEFAULT_CONTROLLER_LOCK:
            if _DEFAULT_CONTROLLER is None:
                logger.debug("Creating default validation controller")
                _DEFAULT_CONTROLLER = ValidationController()
    return _DEFAULT_CONTROLLER
