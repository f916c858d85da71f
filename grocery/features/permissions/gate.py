"""
Access-control gate.

Every mutating or listing operation that addresses a store goes through
AccessGate.authorize: first the actor's role must grant the action, then the
target store must be inside the actor's home subtree. The role check runs
first so that a role forbidden from an action learns nothing about the tree.
"""
import enum
from dataclasses import dataclass

from grocery.core.errors import AuthenticationError, ForbiddenError, ForbiddenKind, NotFoundError
from grocery.features.permissions.acl import PermissionToken, RoleTable
from grocery.features.permissions.models import Role
from grocery.features.stores.access import assert_access, assert_access_from
from grocery.features.stores.models import Store
from grocery.features.stores.repository import StoreRepository
from grocery.utils import get_logger


log = get_logger(__name__)


class DenialReason(str, enum.Enum):
    ROLE_LACKS_PERMISSION = ForbiddenKind.ROLE_LACKS_PERMISSION.value
    TARGET_OUTSIDE_SUBTREE = ForbiddenKind.TARGET_OUTSIDE_SUBTREE.value
    ORIGIN_NOT_FOUND = "origin-not-found"


@dataclass(frozen=True)
class Actor:
    """The authenticated caller, resolved once by the identity layer."""
    id: str
    role_id: str
    role: Role | None
    store_id: str
    store: Store | None = None


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    reason: DenialReason | None = None


class AccessGate:
    """
    Per-request authorization decision.

    Usage:
        gate = AccessGate(StoreRepository(db), role_table)
        await gate.authorize(actor, PermissionToken.CREATE_EMPLOYEE, store_id)
    """

    def __init__(self, repository: StoreRepository, roles: RoleTable):
        self.repository = repository
        self.roles = roles

    def check_permission(self, actor: Actor | None, action: PermissionToken | str) -> None:
        """
        Identity and role checks only.

        Raises:
            AuthenticationError: no actor
            ForbiddenError: kind ROLE_LACKS_PERMISSION
        """
        if actor is None or not actor.id:
            raise AuthenticationError()

        if not self.roles.has_permission(actor.role, action):
            log.info("Denied %s to user %s: %s", _action_name(action), actor.id,
                     ForbiddenKind.ROLE_LACKS_PERMISSION.value)
            raise ForbiddenError(
                ForbiddenKind.ROLE_LACKS_PERMISSION,
                meta={"actor_id": actor.id, "action": _action_name(action)},
            )

    async def authorize(
        self,
        actor: Actor | None,
        action: PermissionToken | str,
        target_store_id: str,
    ) -> AccessDecision:
        """
        Allow the action on target_store_id or raise.

        Raises:
            AuthenticationError: no actor
            ForbiddenError: role lacks the action, or target is outside the
                actor's subtree
            NotFoundError: the actor's home store does not resolve
        """
        self.check_permission(actor, action)

        try:
            if actor.store is not None:
                await assert_access_from(self.repository, actor.store, target_store_id)
            else:
                await assert_access(self.repository, actor.store_id, target_store_id)
        except ForbiddenError as e:
            log.info("Denied %s on store %s to user %s: %s", _action_name(action), target_store_id,
                     actor.id, e.kind.value)
            raise

        return AccessDecision(allowed=True)

    async def evaluate(
        self,
        actor: Actor | None,
        action: PermissionToken | str,
        target_store_id: str,
    ) -> AccessDecision:
        """Same checks as authorize, reported as a decision instead of raised."""
        try:
            return await self.authorize(actor, action, target_store_id)
        except ForbiddenError as e:
            return AccessDecision(allowed=False, reason=DenialReason(e.kind.value))
        except NotFoundError:
            # a missing target is already reported as outside the subtree
            return AccessDecision(allowed=False, reason=DenialReason.ORIGIN_NOT_FOUND)


def _action_name(action: PermissionToken | str) -> str:
    return action.value if isinstance(action, PermissionToken) else str(action)
