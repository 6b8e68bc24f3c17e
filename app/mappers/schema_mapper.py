"""
app/mappers/schema_mapper.py

Column role resolution for order exports.

Resolution runs two explicit passes per role: an exact match on the
normalized header (candidates in priority order), then a substring match
(the first header, in header order, containing any candidate). The
passes are never interleaved, so an exact match on any candidate always
outranks a substring match on a higher-priority candidate.
"""

from __future__ import annotations

import logging
from typing import Mapping, Sequence

from app.domain.order_analysis import (
    ROLE_CREATED,
    ROLE_LINEITEM,
    ROLE_ORDER,
    ROLE_QUANTITY,
    ROLE_TOTAL,
    ROLES,
    ColumnRoleMap,
)

logger = logging.getLogger(__name__)

DEFAULT_COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    ROLE_ORDER: ("name", "order name", "order id", "order number"),
    ROLE_LINEITEM: ("lineitem name", "product name", "item name"),
    ROLE_QUANTITY: ("lineitem quantity", "quantity", "qty"),
    ROLE_TOTAL: ("total", "total price", "order total", "financial status total"),
    ROLE_CREATED: ("created at", "created", "order date", "date"),
}

STRATEGY_EXACT = "exact"
STRATEGY_SUBSTRING = "substring"


def normalize_header(header: object) -> str:
    """
    Normalize a header or candidate name: trimmed and lower-cased.
    """

    if header is None:
        return ""
    return str(header).strip().lower()


def merge_aliases(
    overrides: Mapping[str, Sequence[str]] | None,
) -> dict[str, tuple[str, ...]]:
    """
    Overlay caller alias lists on the defaults. Unknown roles are ignored.
    """

    merged = dict(DEFAULT_COLUMN_ALIASES)
    for role, candidates in (overrides or {}).items():
        if role not in ROLES:
            continue
        merged[role] = tuple(candidates)
    return merged


class SchemaMapper:
    """
    Resolves raw export headers into a ColumnRoleMap.
    """

    def __init__(self, *, aliases: Mapping[str, Sequence[str]] | None = None) -> None:
        self._aliases = merge_aliases(aliases)

    @property
    def aliases(self) -> dict[str, tuple[str, ...]]:
        return dict(self._aliases)

    def resolve(self, headers: Sequence[str]) -> ColumnRoleMap:
        """
        Resolve every role independently. Roles that match nothing stay ``None``.

        A resolved role holds the header exactly as given, never its
        normalized form, so it can be used to look up row values.
        """

        source_headers = [header for header in headers if normalize_header(header)]
        resolved: dict[str, str | None] = {}
        strategies: dict[str, str] = {}

        for role in ROLES:
            candidates = [
                normalize_header(candidate)
                for candidate in self._aliases.get(role, ())
                if normalize_header(candidate)
            ]

            exact = self._find_exact_match(source_headers, candidates)
            if exact is not None:
                resolved[role] = exact
                strategies[role] = STRATEGY_EXACT
                continue

            partial = self._find_substring_match(source_headers, candidates)
            if partial is not None:
                resolved[role] = partial
                strategies[role] = STRATEGY_SUBSTRING
                continue

            resolved[role] = None

        column_map = ColumnRoleMap(match_strategies=strategies, **resolved)
        logger.debug(
            "Resolved column roles %s from %d headers (unresolved=%s)",
            column_map.as_dict(),
            len(source_headers),
            list(column_map.unresolved_roles),
        )
        return column_map

    @staticmethod
    def _find_exact_match(headers: Sequence[str], candidates: Sequence[str]) -> str | None:
        for candidate in candidates:
            for header in headers:
                if normalize_header(header) == candidate:
                    return header
        return None

    @staticmethod
    def _find_substring_match(headers: Sequence[str], candidates: Sequence[str]) -> str | None:
        for header in headers:
            normalized = normalize_header(header)
            if any(candidate in normalized for candidate in candidates):
                return header
        return None


def resolve(
    headers: Sequence[str],
    aliases: Mapping[str, Sequence[str]] | None = None,
) -> ColumnRoleMap:
    """
    Module-level shortcut for ``SchemaMapper(aliases=aliases).resolve(headers)``.
    """

    return SchemaMapper(aliases=aliases).resolve(headers)
