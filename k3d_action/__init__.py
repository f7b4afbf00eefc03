# /*
# Copyright 2026 The k3d-action Authors.
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
# */

"""k3d_action - k3d cluster bootstrap for CI jobs."""

from __future__ import annotations

import logging

from rich.console import Console

# rich disables colour on its own when NO_COLOR is set to a non-empty value.
console = Console(stderr=True)
logger = logging.getLogger("k3d_action")
