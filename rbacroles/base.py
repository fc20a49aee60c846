"""Abstract interfaces for role managers."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable

MatchingFunc = Callable[[str, str], bool]
LinkConditionFunc = Callable[..., bool]


class AbstractRoleManager(ABC):
    """Operations every role manager provides.

    The optional trailing positional arguments of the link and lookup methods
    are domains; implementations without a domain concept ignore them.
    """

    @abstractmethod
    def clear(self) -> None:
        """Drop all stored data and return to the initial state."""

    @abstractmethod
    def add_link(self, name1: str, name2: str, *args: str) -> None:
        """Make ``name1`` inherit role ``name2``."""

    @abstractmethod
    def delete_link(self, name1: str, name2: str, *args: str) -> None:
        """Remove the inheritance of ``name2`` by ``name1``."""

    @abstractmethod
    def has_link(self, name1: str, name2: str, *args: str) -> bool:
        """Tell whether ``name1`` inherits ``name2``, directly or not."""

    @abstractmethod
    def get_roles(self, name: str, *args: str) -> list[str]:
        """Return the roles that ``name`` inherits directly."""

    @abstractmethod
    def get_users(self, name: str, *args: str) -> list[str]:
        """Return the users that inherit ``name`` directly."""

    @abstractmethod
    def get_domains(self, name: str) -> list[str]:
        """Return the domains in which ``name`` takes part."""

    @abstractmethod
    def get_all_domains(self) -> list[str]:
        """Return every known domain."""

    @abstractmethod
    def print_roles(self) -> None:
        """Write all role links to the logger."""

    @abstractmethod
    def set_logger(self, logger: logging.Logger) -> None:
        """Use ``logger`` for role output and errors."""

    @abstractmethod
    def match(self, name: str, pattern: str) -> bool:
        """Tell whether ``name`` matches ``pattern``."""

    @abstractmethod
    def add_matching_func(self, name: str, fn: MatchingFunc) -> None:
        """Enable patterns in role names, matched by ``fn``."""

    @abstractmethod
    def add_domain_matching_func(self, name: str, fn: MatchingFunc) -> None:
        """Enable patterns in domain names, matched by ``fn``."""

    @abstractmethod
    def delete_domain(self, domain: str) -> None:
        """Remove all data held for ``domain``."""


class AbstractConditionalRoleManager(AbstractRoleManager):
    """A role manager whose links may carry condition functions."""

    @abstractmethod
    def add_link_condition_func(self, user_name, role_name, fn) -> None:
        """Attach ``fn`` to the link; the link holds only while ``fn`` is true."""

    @abstractmethod
    def set_link_condition_func_params(self, user_name, role_name, *args) -> None:
        """Set the arguments passed to the link's condition function."""

    @abstractmethod
    def add_domain_link_condition_func(self, user, role, domain, fn) -> None:
        """Attach ``fn`` to the link within ``domain``."""

    @abstractmethod
    def set_domain_link_condition_func_params(self, user, role, domain, *args) -> None:
        """Set the condition function arguments for the link within ``domain``."""