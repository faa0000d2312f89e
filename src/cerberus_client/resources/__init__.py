"""Clients for the individual Cerberus resources."""

from cerberus_client.resources.category import Category
from cerberus_client.resources.metadata import Metadata
from cerberus_client.resources.role import Role
from cerberus_client.resources.sdb import SDB
from cerberus_client.resources.secret import Secret
from cerberus_client.resources.securefile import SecureFile

__all__ = [
    "Category",
    "Metadata",
    "Role",
    "SDB",
    "Secret",
    "SecureFile",
]
