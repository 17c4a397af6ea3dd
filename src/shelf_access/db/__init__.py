"""Supabase-backed collaborators."""

from shelf_access.db.client import DatabaseClient, create_supabase_client
from shelf_access.db.gateway import SupabaseCredentialGateway
from shelf_access.db.protocols import CredentialGateway, DirectoryStore

__all__ = [
    "CredentialGateway",
    "DatabaseClient",
    "DirectoryStore",
    "SupabaseCredentialGateway",
    "create_supabase_client",
]
