"""
app/validators/mapping_validator.py

Validation for column role resolution.

Unresolved roles are reported, never raised: each one only disables the
computations that depend on it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from app.domain.order_analysis import (
    ROLE_CREATED,
    ROLE_LINEITEM,
    ROLE_ORDER,
    ROLE_QUANTITY,
    ROLE_TOTAL,
    ROLES,
    ColumnRoleMap,
)

# What the caller loses when a role stays unresolved.
ROLE_IMPACT: dict[str, str] = {
    ROLE_ORDER: "No order can be identified; every report is empty.",
    ROLE_LINEITEM: "Rows cannot be matched against the keyword; every report is empty.",
    ROLE_QUANTITY: "Matched quantities cannot be summed; every report is empty.",
    ROLE_TOTAL: "Order totals are unavailable; AOV is null.",
    ROLE_CREATED: "Order dates are unavailable; every order falls into the Unknown month.",
}


@dataclass(frozen=True)
class MappingErrorDetail:
    """
    Structured mapping problem detail.
    """

    code: str
    message: str
    role: str | None = None
    source_column: str | None = None
    context: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "role": self.role,
            "source_column": self.source_column,
            "context": self.context,
        }


class MappingValidator:
    """
    Inspects a resolved ColumnRoleMap and describes what it leaves unresolved.
    """

    def __init__(self, *, roles: Sequence[str] = ROLES) -> None:
        unknown = [role for role in roles if role not in ROLES]
        if unknown:
            raise ValueError(f"Unknown column roles: {', '.join(unknown)}")
        self._roles = tuple(roles)

    def unresolved(
        self,
        *,
        column_map: ColumnRoleMap,
        source_headers: Sequence[str],
    ) -> list[MappingErrorDetail]:
        """
        Return one ``role_unresolved`` detail per role without a source column.
        """

        details: list[MappingErrorDetail] = []
        for role in self._roles:
            if column_map.column_for(role) is not None:
                continue
            details.append(
                MappingErrorDetail(
                    code="role_unresolved",
                    message=ROLE_IMPACT[role],
                    role=role,
                    context={"source_headers": list(source_headers)},
                )
            )
        return details

    @staticmethod
    def unknown_alias_roles(aliases: Mapping[str, Sequence[str]]) -> list[MappingErrorDetail]:
        """
        Describe alias override keys that do not name a known role.
        """

        return [
            MappingErrorDetail(
                code="invalid_alias_role",
                message="Alias override contains an unknown column role.",
                role=role,
            )
            for role in aliases
            if role not in ROLES
        ]
