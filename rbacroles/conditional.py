"""Role managers whose links may depend on condition functions."""

from __future__ import annotations

from collections.abc import Callable, Iterator

from .base import AbstractConditionalRoleManager, LinkConditionFunc
from .domain_manager import DomainManager
from .role_manager import DEFAULT_DOMAIN, Role, RoleManagerImpl


class ConditionalRoleManager(RoleManagerImpl, AbstractConditionalRoleManager):
    """Role manager in which a link holds only while its condition is true."""

    def has_link(self, name1: str, name2: str, *args: str) -> bool:
        """Tell whether ``name1`` reaches ``name2`` over links whose conditions pass."""
        return super().has_link(name1, name2, *args)

    def _has_link_helper(
        self,
        target_name: str,
        roles: dict[str, Role],
        level: int,
        domains: tuple[str, ...] = (),
    ) -> bool:
        # The domain only selects the conditions of the first step.
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
            domains = ()
        return False

    def _next_roles(
        self, role: Role, domains: tuple[str, ...]
    ) -> Iterator[tuple[str, Role]]:
        for name, next_role in role._iter_roles():
            try:
                passed = self._link_passes(role, next_role, domains)
            except Exception as exc:
                self._logger.error("has_link link condition error: %s", exc)
                continue
            if passed:
                yield name, next_role

    def _link_passes(
        self, current: Role, next_role: Role, domains: tuple[str, ...]
    ) -> bool:
        domain = domains[0] if domains else DEFAULT_DOMAIN
        fn = self.get_domain_link_condition_func(current.name, next_role.name, domain)
        if fn is None:
            return True
        params = self.get_link_condition_func_params(current.name, next_role.name, domain)
        return bool(fn(*(params or [])))

    def _existing_pair(self, user_name: str, role_name: str) -> tuple[Role, Role] | None:
        """Both roles if they already exist; nothing is left behind otherwise."""
        user, user_created = self._get_role(user_name)
        role, role_created = self._get_role(role_name)
        if user_created or role_created:
            if role_created:
                self._remove_role(role.name)
            if user_created:
                self._remove_role(user.name)
            return None
        return user, role

    def _ensure_pair(self, user_name: str, role_name: str) -> tuple[Role, Role]:
        user, _ = self._get_role(user_name)
        role, _ = self._get_role(role_name)
        return user, role

    def get_link_condition_func(
        self, user_name: str, role_name: str
    ) -> LinkConditionFunc | None:
        """The condition of the link in the default domain, if any."""
        return self.get_domain_link_condition_func(user_name, role_name, DEFAULT_DOMAIN)

    def get_domain_link_condition_func(
        self, user_name: str, role_name: str, domain: str
    ) -> LinkConditionFunc | None:
        """The condition of the link within ``domain``, if any."""
        pair = self._existing_pair(user_name, role_name)
        if pair is None:
            return None
        user, role = pair
        return user.link_condition_funcs.get((role.name, domain))

    def get_link_condition_func_params(
        self, user_name: str, role_name: str, *args: str
    ) -> list[str] | None:
        """The arguments for the link's condition; the domain is the optional third."""
        pair = self._existing_pair(user_name, role_name)
        if pair is None:
            return None
        user, role = pair
        domain = args[0] if args else DEFAULT_DOMAIN
        params = user.link_condition_params.get((role.name, domain))
        return None if params is None else list(params)

    def add_link_condition_func(
        self, user_name: str, role_name: str, fn: LinkConditionFunc
    ) -> None:
        self.add_domain_link_condition_func(user_name, role_name, DEFAULT_DOMAIN, fn)

    def add_domain_link_condition_func(
        self, user_name: str, role_name: str, domain: str, fn: LinkConditionFunc
    ) -> None:
        user, role = self._ensure_pair(user_name, role_name)
        user.link_condition_funcs[(role.name, domain)] = fn

    def set_link_condition_func_params(
        self, user_name: str, role_name: str, *args: str
    ) -> None:
        self.set_domain_link_condition_func_params(
            user_name, role_name, DEFAULT_DOMAIN, *args
        )

    def set_domain_link_condition_func_params(
        self, user_name: str, role_name: str, domain: str, *args: str
    ) -> None:
        user, role = self._ensure_pair(user_name, role_name)
        user.link_condition_params[(role.name, domain)] = list(args)


class ConditionalDomainManager(DomainManager, AbstractConditionalRoleManager):
    """Domain manager whose per-domain graphs support link conditions."""

    _manager_class = ConditionalRoleManager

    def _forwarded_domains(self, domain: str, domains: tuple[str, ...]) -> tuple[str, ...]:
        # Per-domain managers always learn the resolved domain.
        return (domain,)

    def _broadcast(self, method: Callable[..., None], *args: object) -> None:
        """Apply ``method`` to every per-domain conditional manager."""
        for rm in list(self._rm_map.values()):
            if isinstance(rm, ConditionalRoleManager):
                method(rm, *args)

    def has_link(self, name1: str, name2: str, *args: str) -> bool:
        """Tell whether ``name1`` inherits ``name2`` within the given domain."""
        return super().has_link(name1, name2, *args)

    def add_link(self, name1: str, name2: str, *args: str) -> None:
        """Link ``name1`` to ``name2`` within the given domain."""
        super().add_link(name1, name2, *args)

    def delete_link(self, name1: str, name2: str, *args: str) -> None:
        """Unlink ``name1`` from ``name2`` within the given domain."""
        super().delete_link(name1, name2, *args)

    def add_link_condition_func(self, user_name, role_name, fn) -> None:
        self._broadcast(ConditionalRoleManager.add_link_condition_func, user_name, role_name, fn)

    def add_domain_link_condition_func(self, user_name, role_name, domain, fn) -> None:
        self._broadcast(
            ConditionalRoleManager.add_domain_link_condition_func,
            user_name,
            role_name,
            domain,
            fn,
        )

    def set_link_condition_func_params(self, user_name, role_name, *args) -> None:
        self._broadcast(
            ConditionalRoleManager.set_link_condition_func_params, user_name, role_name, *args
        )

    def set_domain_link_condition_func_params(self, user_name, role_name, domain, *args) -> None:
        self._broadcast(
            ConditionalRoleManager.set_domain_link_condition_func_params,
            user_name,
            role_name,
            domain,
            *args,
        )