"""Mapping from client tool names to responses tool descriptors."""

import logging
from typing import Any, Mapping, Optional, Sequence

from ..types.responses import ToolDescriptor

logger = logging.getLogger("chatbridge")

TOOL_DESCRIPTORS: dict[str, ToolDescriptor] = {
    "web_search": {"type": "web_search_preview"},
}


def map_tools(
    names: Sequence[Any],
    table: Optional[Mapping[str, ToolDescriptor]] = None,
) -> list[ToolDescriptor]:
    """Convert tool names into backend tool descriptors.

    A list holding exactly one dict is taken as already being in the
    backend's format and returned unchanged. Otherwise each name is looked up
    in ``table``; unknown names are dropped and the input order is kept.
    """
    if not isinstance(names, (list, tuple)):
        logger.debug("Tools: expected a list of tool names, got %r", names)
        return []
    if len(names) == 1 and isinstance(names[0], dict):
        return list(names)

    lookup = TOOL_DESCRIPTORS if table is None else table
    descriptors: list[ToolDescriptor] = []
    for name in names:
        if not isinstance(name, str):
            logger.debug("Tools: skipping non-string tool entry %r", name)
            continue
        descriptor = lookup.get(name)
        if descriptor is None:
            logger.debug("Tools: unknown tool name '%s' dropped", name)
            continue
        descriptors.append(dict(descriptor))
    return descriptors
