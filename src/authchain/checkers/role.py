"""Role checker: tells privileged callers apart from ordinary ones."""

import logging
from typing import Callable, Iterable, Optional

from ..chain.base import Checker
from ..models import Credential, Outcome


logger = logging.getLogger(__name__)

ADMIN = "admin"
USER = "user"

DEFAULT_PRIVILEGED = ("admin@example.com",)


class RoleChecker(Checker):
    """
    Reports the caller's role and always passes the credential on.

    This stage cannot reject anything. It shows that a chain stage can
    exist purely for observability: it greets the caller in the log and,
    if given, calls `on_role(credential, role)` with "admin" or "user".
    """

    def __init__(
        self,
        privileged: Iterable[str] = DEFAULT_PRIVILEGED,
        on_role: Optional[Callable[[Credential, str], None]] = None,
    ):
        super().__init__()
        self.privileged = frozenset(privileged)
        self.on_role = on_role

    def role_of(self, identity: str) -> str:
        """Return "admin" for privileged identities, "user" otherwise."""
        return ADMIN if identity in self.privileged else USER

    def check(self, credential: Credential) -> Outcome:
        role = self.role_of(credential.identity)
        logger.info(f"{self.name}: Hello, {role}!")

        if self.on_role is not None:
            self.on_role(credential, role)

        return self.check_next(credential)
