# Copyright 2025 Roger Cibrian
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

"""Configuration loading for sysconftrack.

This module loads the YAML configuration that tells the tracker where its
state lives, layering built-in defaults, the system file
(/etc/sysconftrack/config.yaml), an explicit file and CLI overrides.

Public API:

- load_effective_config: Load and merge the configuration layers
- resolve_state_file: Compute the state file path from a configuration

Example:
    Basic usage:

        from sysconftrack.config import load_effective_config, resolve_state_file

        config = load_effective_config()
        state_file = resolve_state_file(config)

"""

from .loader import load_effective_config, resolve_state_file

__all__ = ["load_effective_config", "resolve_state_file"]
