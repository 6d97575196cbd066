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

"""Validator package: validator interfaces, required validators and the controller."""

from .base import DataValidator, SchemaValidator
from .controller import ValidationController, ValidationControllerBuilder, get_default_controller
from .extension import validate_extension
from .required import REQUIRED_VALIDATORS

__all__ = [
    "DataValidator",
    "SchemaValidator",
    "ValidationController",
    "ValidationControllerBuilder",
    "get_default_controller",
    "validate_extension",
    "REQUIRED_VALIDATORS",
]
