import logging
from typing import Iterable

from .errors import UnauthorizedError
from .models import Role
from .storage import InMemoryStorage

logger = logging.getLogger(__name__)


class RoleAuthority:
    """Maps caller identities to roles and gates privileged operations."""

    def __init__(self, storage: InMemoryStorage):
        self.storage = storage

    def role_of(self, identity: str) -> Role:
        with self.storage.guard:
            explicit = self.storage.roles.get(identity)
            if explicit is not None:
                return Role(explicit)
            if identity in self.storage.profiles:
                return Role.USER
        return Role.GUEST

    def is_admin(self, identity: str) -> bool:
        return self.role_of(identity) == Role.ADMIN

    def require_authenticated(self, identity: str) -> None:
        if not identity or not identity.strip():
            raise UnauthorizedError("An authenticated caller identity is required")

    def require_admin(self, caller: str, action: str) -> None:
        self.require_authenticated(caller)
        if not self.is_admin(caller):
            logger.warning("Denied %s for non-admin caller %s", action, caller)
            raise UnauthorizedError(f"Only admins may {action}")

    def assign_role(self, caller: str, target: str, role: Role) -> Role:
        self.require_admin(caller, "assign roles")
        self.require_authenticated(target)
        role = Role(role)
        with self.storage.guard:
            self.storage.roles[target] = role.value
        logger.info("Role of %s set to %s by %s", target, role.value, caller)
        return role

    def bootstrap_admins(self, identities: Iterable[str]) -> None:
        with self.storage.guard:
            for identity in identities:
                self.storage.roles[identity] = Role.ADMIN.value
                logger.info("Bootstrapped admin %s", identity)
