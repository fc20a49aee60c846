"""Role managers for role-based access control: inheritance, patterns, domains and conditional links."""

__version__ = "0.1.0"
__all__ = ["base", "role_manager", "domain_manager", "conditional"]