# Copyright 2026 Annospec Contributors
# SPDX-License-Identifier: Apache-2.0

"""Merging of path-item fragments and tag catalogs."""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from typing import Any

# ###############
# Public Interface
# ###############


def deep_merge(target: dict[str, Any], fragment: Mapping[str, Any]) -> dict[str, Any]:
    """Merge *fragment* into *target* in place and return *target*.

    Mappings are merged key by key; any other value in *fragment* replaces
    the one in *target*. Merging the same fragment twice therefore leaves
    *target* as merging it once did. *fragment* is copied, never aliased.
    """
    for key, value in fragment.items():
        existing = target.get(key)
        if isinstance(existing, dict) and isinstance(value, Mapping):
            deep_merge(existing, value)
        else:
            target[key] = copy.deepcopy(value)
    return target


def merge_tags(catalog: list[dict[str, str]], tags: Iterable[Mapping[str, str]]) -> list[dict[str, str]]:
    """Append *tags* to *catalog* in place, skipping names already present."""
    known = {tag["name"] for tag in catalog}
    for tag in tags:
        if tag["name"] not in known:
            catalog.append({"name": tag["name"], "description": tag.get("description", "")})
            known.add(tag["name"])
    return catalog
