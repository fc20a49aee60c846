"""Role manager that keeps a separate role graph for every domain."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from .base import AbstractRoleManager, MatchingFunc
from .role_manager import DEFAULT_DOMAIN, RoleManagerImpl

_default_logger = logging.getLogger("rbacroles")


class DomainManager(AbstractRoleManager):
    """Role manager whose links are scoped by a domain.

    The first optional positional argument of the link and lookup methods
    names the domain; without it the default (empty) domain is used.
    """

    _manager_class: type[RoleManagerImpl] = RoleManagerImpl

    def __init__(self, max_hierarchy_level: int) -> None:
        self._rm_map: dict[str, RoleManagerImpl] = {}
        self._max_hierarchy_level = max_hierarchy_level
        self._matching_func_name = ""
        self._matching_func: MatchingFunc | None = None
        self._domain_matching_func: MatchingFunc | None = None
        self._logger: logging.Logger = _default_logger

    def _new_role_manager(self) -> RoleManagerImpl:
        rm = self._manager_class(self._max_hierarchy_level)
        if self._matching_func is not None:
            rm.add_matching_func(self._matching_func_name, self._matching_func)
        return rm

    @staticmethod
    def _resolve_domain(domains: tuple[str, ...]) -> str:
        return domains[0] if domains else DEFAULT_DOMAIN

    def _forwarded_domains(self, domain: str, domains: tuple[str, ...]) -> tuple[str, ...]:
        """Domain arguments handed on to the per-domain managers."""
        return domains

    def _get_role_manager(self, domain: str, store: bool) -> RoleManagerImpl:
        """Load the manager of ``domain`` or build one, storing it if asked."""
        rm = self._rm_map.get(domain)
        if rm is not None:
            return rm
        rm = self._new_role_manager()
        if store:
            self._rm_map[domain] = rm
        if self._domain_matching_func is not None:
            for other_domain, other in list(self._rm_map.items()):
                if domain != other_domain and self.match(domain, other_domain):
                    for name1, name2 in list(other.links()):
                        rm.add_link(name1, name2)
        return rm

    def _lookup_manager(self, domains: tuple[str, ...]) -> RoleManagerImpl:
        return self._get_role_manager(self._resolve_domain(domains), store=False)

    def _affected_role_managers(self, domain: str) -> Iterator[RoleManagerImpl]:
        """Managers of other domains that the pattern ``domain`` covers."""
        if self._domain_matching_func is None:
            return
        for other_domain, rm in list(self._rm_map.items()):
            if domain != other_domain and self.match(other_domain, domain):
                yield rm

    def _update_link(self, name1: str, name2: str, domains: tuple[str, ...], add: bool) -> None:
        domain = self._resolve_domain(domains)
        forwarded = self._forwarded_domains(domain, domains)
        own = self._get_role_manager(domain, store=True)
        for rm in (own, *self._affected_role_managers(domain)):
            update = rm.add_link if add else rm.delete_link
            update(name1, name2, *forwarded)

    def _rebuild(self) -> None:
        old_map = self._rm_map
        self.clear()
        for domain, rm in old_map.items():
            for name1, name2 in list(rm.links()):
                self.add_link(name1, name2, domain)

    def set_logger(self, logger: logging.Logger) -> None:
        self._logger = logger

    def add_matching_func(self, name: str, fn: MatchingFunc) -> None:
        self._matching_func_name = name
        self._matching_func = fn
        for rm in list(self._rm_map.values()):
            rm.add_matching_func(name, fn)

    def add_domain_matching_func(self, name: str, fn: MatchingFunc) -> None:
        self._domain_matching_func = fn
        for rm in list(self._rm_map.values()):
            rm.add_domain_matching_func(name, fn)
        self._rebuild()

    def clear(self) -> None:
        self._rm_map = {}

    def match(self, name: str, pattern: str) -> bool:
        if name == pattern:
            return True
        if self._domain_matching_func is not None:
            return self._domain_matching_func(name, pattern)
        return False

    def add_link(self, name1: str, name2: str, *args: str) -> None:
        self._update_link(name1, name2, args, add=True)

    def delete_link(self, name1: str, name2: str, *args: str) -> None:
        self._update_link(name1, name2, args, add=False)

    def has_link(self, name1: str, name2: str, *args: str) -> bool:
        return self._lookup_manager(args).has_link(name1, name2, *args)

    def get_roles(self, name: str, *args: str) -> list[str]:
        return self._lookup_manager(args).get_roles(name, *args)

    def get_users(self, name: str, *args: str) -> list[str]:
        return self._lookup_manager(args).get_users(name, *args)

    def _role_lines(self) -> list[str]:
        return [
            f"{domain}: {', '.join(rm._role_lines())}"
            for domain, rm in list(self._rm_map.items())
        ]

    def print_roles(self) -> None:
        if not self._logger.isEnabledFor(logging.INFO):
            return
        self._logger.info("Roles: %s", ", ".join(self._role_lines()))

    def get_domains(self, name: str) -> list[str]:
        return [
            domain
            for domain, rm in list(self._rm_map.items())
            if rm.get_users(name) or rm.get_roles(name)
        ]

    def get_all_domains(self) -> list[str]:
        return list(self._rm_map)

    def delete_domain(self, domain: str) -> None:
        self._rm_map.pop(domain, None)


class RoleManager(DomainManager):
    """The default role manager: a domain manager."""