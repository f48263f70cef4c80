# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
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

"""
Validation of generation parameters before a topology is built.
"""
from typing import Callable, List, Optional
from ..MODELS.compose_options import ComposeOptions

MIN_NODES = 1
MAX_NODES = 99
MIN_LRU_MB = 1024

class OptionResolver:
    """
    Checks a set of options against the cluster rules and fills in implied settings.
    """
    def __init__(self, on_warning: Optional[Callable[[str], None]] = None):
        """
        Initializes the resolver.

        :param on_warning: Called with each warning as soon as it is raised.
        """
        self.on_warning = on_warning
        self.warnings: List[str] = []

    def resolve(self, options: ComposeOptions) -> ComposeOptions:
        """
        Validates the options and returns the resolved copy.

        :param options: The options as supplied by the user.
        :return: Options with implied settings applied.
        :raises ValueError: If any rule is violated.
        """
        if not MIN_NODES <= options.num_zeros <= MAX_NODES:
            raise ValueError(f"number of zeros must be {MIN_NODES}-{MAX_NODES}")
        if not MIN_NODES <= options.num_alphas <= MAX_NODES:
            raise ValueError(f"number of alphas must be {MIN_NODES}-{MAX_NODES}")
        if options.num_groups < 1:
            raise ValueError("number of groups must be >= 1")
        if options.lru_mb < MIN_LRU_MB:
            raise ValueError(f"LRU cache size must be >= {MIN_LRU_MB} MB")

        if options.acl_secret and not options.enterprise_mode:
            self._warn("adding --enterprise because it is required by ACL feature")
            options = options.model_copy(update={'enterprise_mode': True})

        if options.data_vol and options.data_dir:
            raise ValueError("only one of --data_vol and --data_dir may be used at a time")
        if options.user_ownership and not options.data_dir:
            raise ValueError("--user option requires --data_dir=<path>")

        return options

    def _warn(self, message: str):
        self.warnings.append(message)
        if self.on_warning:
            self.on_warning(message)
