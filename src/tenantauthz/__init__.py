"""Tenant RBAC and permission override resolution service."""

__version__ = "0.1.0"
