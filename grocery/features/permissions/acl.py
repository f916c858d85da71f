"""
Permission tokens, role codes and the role -> ACL lookup table.
"""
import enum
from collections.abc import Iterable, Mapping
from typing import Any

from grocery.core.errors import NotFoundError
from grocery.features.permissions.models import Role


class PermissionToken(str, enum.Enum):
    """Catalog of actions a role may be granted."""
    CREATE_EMPLOYEE = "create-employee"
    READ_EMPLOYEE = "read-employee"
    UPDATE_EMPLOYEE = "update-employee"
    DELETE_EMPLOYEE = "delete-employee"
    CREATE_MANAGER = "create-manager"
    READ_MANAGER = "read-manager"
    UPDATE_MANAGER = "update-manager"
    DELETE_MANAGER = "delete-manager"
    EMPLOYEES_LIST = "employees-list"
    MANAGERS_LIST = "managers-list"


class RoleCode(str, enum.Enum):
    MANAGER = "MANAGER"
    EMPLOYEE = "EMPLOYEE"


DEFAULT_ROLES: dict[RoleCode, dict[str, Any]] = {
    RoleCode.MANAGER: {
        "name": "Manager",
        "acl": list(PermissionToken),
    },
    RoleCode.EMPLOYEE: {
        "name": "Employee",
        "acl": [
            PermissionToken.READ_EMPLOYEE,
            PermissionToken.EMPLOYEES_LIST,
        ],
    },
}


def _token_value(action: PermissionToken | str) -> str:
    return action.value if isinstance(action, PermissionToken) else str(action)


def has_permission(role: Role | None, action: PermissionToken | str) -> bool:
    """Plain membership test of action in role.acl."""
    if role is None:
        return False
    return _token_value(action) in {_token_value(token) for token in role.acl or []}


class RoleTable:
    """
    Role -> frozenset[PermissionToken] table, built once and shared.

    Tokens stored in the database that are not in the catalog are dropped
    when the table is built.
    """

    def __init__(self, roles: Mapping[str, Role], acls: Mapping[str, frozenset[PermissionToken]]):
        self._roles_by_code = dict(roles)
        self._acl_by_role_id = dict(acls)

    @classmethod
    def from_roles(cls, roles: Iterable[Role]) -> "RoleTable":
        known = {token.value for token in PermissionToken}
        by_code: dict[str, Role] = {}
        acls: dict[str, frozenset[PermissionToken]] = {}
        for role in roles:
            by_code[role.code] = role
            acls[role.id] = frozenset(
                PermissionToken(token) for token in map(_token_value, role.acl or []) if token in known
            )
        return cls(by_code, acls)

    def acl_for(self, role: Role | None) -> frozenset[PermissionToken]:
        if role is None:
            return frozenset()
        return self._acl_by_role_id.get(role.id, frozenset())

    def has_permission(self, role: Role | None, action: PermissionToken | str) -> bool:
        try:
            token = PermissionToken(_token_value(action))
        except ValueError:
            return False
        return token in self.acl_for(role)

    def get_by_code(self, code: RoleCode | str) -> Role:
        code = code.value if isinstance(code, RoleCode) else code
        role = self._roles_by_code.get(code)
        if role is None:
            raise NotFoundError("Role not found", meta={"code": code})
        return role

    @property
    def manager_role(self) -> Role:
        return self.get_by_code(RoleCode.MANAGER)

    @property
    def employee_role(self) -> Role:
        return self.get_by_code(RoleCode.EMPLOYEE)

    def __len__(self) -> int:
        return len(self._roles_by_code)
