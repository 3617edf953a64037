"""
Authorization policy: decide whether an actor may perform an action on a user.

Pure function over (actor claims, target id, action); no I/O. Handlers map the
decision to 401/403.

    actor            target   READ   UPDATE  UPDATE_ROLE  DELETE
    unauthenticated  any      401    401     401          401
    user             self     allow  allow   403          allow
    user             other    allow  403     403          403
    admin            any      allow  allow   allow        allow

READ is gated by authentication only; ownership is not checked.
"""

from enum import Enum

from userhub.schemas.auth import TokenClaims
from userhub.schemas.users import Role


class Action(str, Enum):
    """Operations on a user resource."""

    READ = "read"
    UPDATE = "update"
    UPDATE_ROLE = "update_role"
    DELETE = "delete"


class Decision(str, Enum):
    """Outcome of an authorization check."""

    ALLOW = "allow"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


# Messages handlers return for a FORBIDDEN decision, keyed by action.
FORBIDDEN_MESSAGES: dict[Action, str] = {
    Action.READ: "Access denied",
    Action.UPDATE: "You can only update your own information",
    Action.UPDATE_ROLE: "Only admin users can change user roles",
    Action.DELETE: "You can only delete your own account",
}


def _user_may(actor: TokenClaims, target_id: int, action: Action) -> bool:
    is_self = actor.id == target_id
    if action is Action.READ:
        return True
    if action is Action.UPDATE:
        return is_self
    if action is Action.UPDATE_ROLE:
        return False
    if action is Action.DELETE:
        return is_self
    raise ValueError(f"Unhandled action: {action!r}")


def authorize(actor: TokenClaims | None, target_id: int, action: Action) -> Decision:
    """Apply the policy table to one request."""
    if actor is None:
        return Decision.UNAUTHENTICATED
    if actor.role is Role.ADMIN:
        return Decision.ALLOW
    if actor.role is Role.USER:
        return Decision.ALLOW if _user_may(actor, target_id, action) else Decision.FORBIDDEN
    raise ValueError(f"Unhandled role: {actor.role!r}")


def required_actions(base: Action, fields: set[str]) -> list[Action]:
    """Actions implied by a request: updating the role field also needs UPDATE_ROLE."""
    actions = [base]
    if base is Action.UPDATE and "role" in fields:
        actions.append(Action.UPDATE_ROLE)
    return actions
