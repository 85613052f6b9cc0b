"""Options controlling how a YAML bibliography is ingested.

LoadOptions

`inherit_parent_key` (`bool`)
: Give nested `parent` entries the key of the entry that contains them
  (default). When `False`, a single parent is keyed `<key>/parent` and
  parents listed in a sequence are keyed `<key>/parent/<index>`.

`strict_entry_types` (`bool`)
: Reject `type` values that do not name a known entry type instead of
  falling back to `misc`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict


class LoadOptions(BaseModel):
    """Switches for the YAML loader."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    inherit_parent_key: bool = True
    strict_entry_types: bool = False

    def parent_key(self, key: str, index: int | None = None) -> str:
        """Return the key assigned to a nested parent of entry ``key``."""
        if self.inherit_parent_key:
            return key
        if index is None:
            return f"{key}/parent"
        return f"{key}/parent/{index}"


def resolve_options(options: LoadOptions | Mapping[str, Any] | None) -> LoadOptions:
    """Coerce user supplied options into a validated `LoadOptions`."""
    if options is None:
        return LoadOptions()
    if isinstance(options, LoadOptions):
        return options
    return LoadOptions.model_validate(dict(options))


__all__ = ["LoadOptions", "resolve_options"]
