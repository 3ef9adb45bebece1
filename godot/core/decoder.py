# Copyright 2026 Pramod Kumar Voola
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

# -----------------------------------------------------------------------------
# THE DECODER - YAML TO CONFIGURATION RECORD
# -----------------------------------------------------------------------------
# Responsibility: Turn the raw block text into a GodotConfig.
# Missing keys take their zero value. Unknown keys are ignored.
# Scalars keep their source text, so `image-tag: 2024` is the string "2024".
# Wrong shapes (a string where a list belongs) are rejected with the
# parser's own diagnostic.
# -----------------------------------------------------------------------------

import yaml
from pydantic import ValidationError
from rich.console import Console

from godot.domain.models import README_KEYS, GodotConfig
from godot.errors import MalformedConfig

console = Console()


class _TextLoader(yaml.SafeLoader):
    """SafeLoader that keeps numbers, booleans and dates as their source text."""


for _tag in ("int", "float", "bool", "timestamp"):
    _TextLoader.add_constructor(f"tag:yaml.org,2002:{_tag}", _TextLoader.construct_yaml_str)


def decode_config(raw: str) -> GodotConfig:
    """
    Decode a configuration block into a GodotConfig.

    Args:
        raw: YAML text extracted from the README.

    Returns:
        A new GodotConfig. Path fields are left empty for the caller.

    Raises:
        MalformedConfig: The text is not YAML, not a mapping, or a value
            has the wrong type.
    """
    try:
        data = yaml.load(raw, Loader=_TextLoader)
    except yaml.YAMLError as e:
        raise MalformedConfig("Error reading repository configuration", str(e)) from e

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise MalformedConfig(
            "Error reading repository configuration",
            f"expected a mapping of keys to values, got {type(data).__name__}",
        )

    recognized = {key: value for key, value in data.items() if key in README_KEYS}
    try:
        config = GodotConfig.model_validate(recognized)
    except ValidationError as e:
        raise MalformedConfig("Error reading repository configuration", str(e)) from e

    console.print(
        f"[cyan][DECODER] user={config.username or '-'} "
        f"packages={len(config.packages)} "
        f"setup={len(config.system_setup)}+{len(config.user_setup)}[/cyan]"
    )
    return config
