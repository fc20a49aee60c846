"""Default in-memory role manager with optional pattern matching on names."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator

from .base import AbstractRoleManager, LinkConditionFunc, MatchingFunc

DEFAULT_DOMAIN = ""

_default_logger = logging.getLogger("rbacroles")


class Role:
    """A node in the role graph, linked to the roles it inherits and its users."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.roles: dict[str, Role] = {}
        self.users: dict[str, Role] = {}
        self.matched: dict[str, Role] = {}
        self.matched_by: dict[str, Role] = {}
        self.link_condition_funcs: dict[tuple[str, str], LinkConditionFunc] = {}
        self.link_condition_params: dict[tuple[str, str], list[str]] = {}

    def __repr__(self) -> str:
        return f"Role({self.name!r})"

    def __str__(self) -> str:
        roles = self.get_roles()
        if not roles:
            return ""
        if len(roles) == 1:
            return f"{self.name} < {roles[0]}"
        return f"{self.name} < ({', '.join(roles)})"

    def add_role(self, role: Role) -> None:
        """Inherit ``role``; this role becomes one of its users."""
        self.roles[role.name] = role
        role.users[self.name] = self

    def remove_role(self, role: Role) -> None:
        """Stop inheriting ``role``."""
        self.roles.pop(role.name, None)
        role.users.pop(self.name, None)

    def add_match(self, role: Role) -> None:
        """Record that ``role``'s name is matched by this role's pattern."""
        self.matched[role.name] = role
        role.matched_by[self.name] = self

    def remove_match(self, role: Role) -> None:
        """Forget the match between this role and ``role``."""
        self.matched.pop(role.name, None)
        role.matched_by.pop(self.name, None)

    def remove_matches(self) -> None:
        """Forget every match in either direction."""
        for role in list(self.matched.values()):
            self.remove_match(role)
        for role in list(self.matched_by.values()):
            role.remove_match(self)

    def _iter_roles(self) -> Iterator[tuple[str, Role]]:
        yield from list(self.roles.items())
        for role in list(self.roles.values()):
            yield from list(role.matched.items())
        for role in list(self.matched_by.values()):
            yield from list(role.roles.items())

    def _iter_users(self) -> Iterator[tuple[str, Role]]:
        yield from list(self.users.items())
        for role in list(self.users.values()):
            yield from list(role.matched.items())
        for role in list(self.matched_by.values()):
            yield from list(role.users.items())

    def get_roles(self) -> list[str]:
        """Names of the roles inherited directly or through a match, without repeats."""
        return list(dict.fromkeys(name for name, _ in self._iter_roles()))

    def get_users(self) -> list[str]:
        """Names of the users that inherit this role directly or through a match."""
        return [name for name, _ in self._iter_users()]


class RoleManagerImpl(AbstractRoleManager):
    """Role manager without domains; every link lives in one graph."""

    def __init__(self, max_hierarchy_level: int) -> None:
        self._all_roles: dict[str, Role] = {}
        self._max_hierarchy_level = max_hierarchy_level
        self._matching_func: MatchingFunc | None = None
        self._domain_matching_func: MatchingFunc | None = None
        self._logger: logging.Logger = _default_logger
        self._lock = threading.Lock()

    def _rebuild(self) -> None:
        old_roles = self._all_roles
        self.clear()
        for name1, name2 in list(_iter_links(old_roles)):
            self.add_link(name1, name2)

    def match(self, name: str, pattern: str) -> bool:
        if name == pattern:
            return True
        if self._matching_func is not None:
            return self._matching_func(name, pattern)
        return False

    def _matching_roles(self, name: str, is_pattern: bool) -> Iterator[Role]:
        for other_name, role in list(self._all_roles.items()):
            if other_name == name:
                continue
            if is_pattern and self.match(other_name, name):
                yield role
            elif not is_pattern and self.match(name, other_name):
                yield role

    def _get_role(self, name: str) -> tuple[Role, bool]:
        """Load a role, creating it when missing; report whether it was created."""
        role = self._all_roles.get(name)
        if role is not None:
            return role, False
        role = Role(name)
        self._all_roles[name] = role
        if self._matching_func is not None:
            for other in self._matching_roles(name, is_pattern=False):
                other.add_match(role)
            for other in self._matching_roles(name, is_pattern=True):
                role.add_match(other)
        return role, True

    def _remove_role(self, name: str) -> None:
        role = self._all_roles.pop(name, None)
        if role is not None:
            role.remove_matches()

    def add_matching_func(self, name: str, fn: MatchingFunc) -> None:
        self._matching_func = fn
        self._rebuild()

    def add_domain_matching_func(self, name: str, fn: MatchingFunc) -> None:
        self._domain_matching_func = fn

    def set_logger(self, logger: logging.Logger) -> None:
        self._logger = logger

    def clear(self) -> None:
        self._all_roles = {}

    def add_link(self, name1: str, name2: str, *args: str) -> None:
        user, _ = self._get_role(name1)
        role, _ = self._get_role(name2)
        user.add_role(role)

    def delete_link(self, name1: str, name2: str, *args: str) -> None:
        user, _ = self._get_role(name1)
        role, _ = self._get_role(name2)
        user.remove_role(role)

    def has_link(self, name1: str, name2: str, *args: str) -> bool:
        if name1 == name2 or (
            self._matching_func is not None and self.match(name1, name2)
        ):
            return True
        with self._lock:
            user, user_created = self._get_role(name1)
            role, role_created = self._get_role(name2)
            try:
                return self._has_link_helper(
                    role.name, {user.name: user}, self._max_hierarchy_level, args
                )
            finally:
                if role_created:
                    self._remove_role(role.name)
                if user_created:
                    self._remove_role(user.name)

    def _next_roles(
        self, role: Role, domains: tuple[str, ...]
    ) -> Iterator[tuple[str, Role]]:
        """Roles reachable in one step from ``role``."""
        return role._iter_roles()

    def _has_link_helper(
        self,
        target_name: str,
        roles: dict[str, Role],
        level: int,
        domains: tuple[str, ...] = (),
    ) -> bool:
        frontier = roles
        while level >= 0 and frontier:
            next_roles: dict[str, Role] = {}
            for role in frontier.values():
                if target_name == role.name or (
                    self._matching_func is not None
                    and self.match(role.name, target_name)
                ):
                    return True
                next_roles.update(self._next_roles(role, domains))
            frontier = next_roles
            level -= 1
        return False

    def get_roles(self, name: str, *args: str) -> list[str]:
        user, created = self._get_role(name)
        try:
            return user.get_roles()
        finally:
            if created:
                self._remove_role(user.name)

    def get_users(self, name: str, *args: str) -> list[str]:
        role, created = self._get_role(name)
        try:
            return role.get_users()
        finally:
            if created:
                self._remove_role(role.name)

    def _role_lines(self) -> list[str]:
        return [text for role in list(self._all_roles.values()) if (text := str(role))]

    def print_roles(self) -> None:
        if not self._logger.isEnabledFor(logging.INFO):
            return
        self._logger.info("Roles: %s", ", ".join(self._role_lines()))

    def get_domains(self, name: str) -> list[str]:
        return [DEFAULT_DOMAIN]

    def get_all_domains(self) -> list[str]:
        return [DEFAULT_DOMAIN]

    def _copy_from(self, other: RoleManagerImpl) -> None:
        for name1, name2 in list(other.links()):
            self.add_link(name1, name2)

    def links(self) -> Iterator[tuple[str, str]]:
        """Yield every stored link as a ``(user, role)`` pair."""
        return _iter_links(self._all_roles)

    def delete_domain(self, domain: str) -> None:
        raise RuntimeError(
            "delete_domain is not supported by RoleManagerImpl (no domain concept)"
        )


def _iter_links(all_roles: dict[str, Role]) -> Iterator[tuple[str, str]]:
    for user in list(all_roles.values()):
        for role_name in list(user.roles):
            yield user.name, role_name