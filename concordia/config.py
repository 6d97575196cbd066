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

"""Runtime configuration for the concordia library."""

import os
import logging
from dataclasses import dataclass

from . import __version__
from .utils.logging_utils import configure_split_stream_logging


@dataclass
class ConcordiaConfig:
    """Configuration class for schema loading and reference fetching."""
    fetch_timeout: float = 10.0
    log_level: str = "INFO"
    print_level: str = "ERROR"
    user_agent: str = f"concordia/{__version__}"

    @classmethod
    def from_env(cls) -> 'ConcordiaConfig':
        """Create configuration from environment variables."""
        return cls(
            fetch_timeout=float(os.getenv('CONCORDIA_FETCH_TIMEOUT', '10.0')),
            log_level=os.getenv('CONCORDIA_LOG_LEVEL', 'INFO'),
            print_level=os.getenv('CONCORDIA_PRINT_LEVEL', 'ERROR'),
            user_agent=os.getenv('CONCORDIA_USER_AGENT', f"concordia/{__version__}"),
        )

    def set_logging(self) -> logging.Logger:
        """Setup logging based on configuration."""
        level = getattr(logging, self.log_level.upper(), logging.INFO)
        stderr_level = getattr(logging, self.print_level.upper(), logging.ERROR)

        formatter = logging.Formatter('%(name)s - %(levelname)s - %(message)s')
        return configure_split_stream_logging(level=level, stderr_level=stderr_level, formatter=formatter)


# Global configuration instance
concordia_config = ConcordiaConfig.from_env()
