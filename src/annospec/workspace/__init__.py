# Copyright 2026 Annospec Contributors
# SPDX-License-Identifier: Apache-2.0

"""Generation configuration for annospec."""

from annospec.workspace.config import (
    CONFIG_FILE_NAME,
    GenerationConfig,
    MissingConfigurationError,
    ModelSource,
    SqlAlchemyModelSource,
    YamlModelSource,
    load_generation_config,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "GenerationConfig",
    "MissingConfigurationError",
    "ModelSource",
    "SqlAlchemyModelSource",
    "YamlModelSource",
    "load_generation_config",
]
