"""Versioned SQL migrations."""

from orderdesk.infrastructure.storage.sqlite.migrations.migrator import (
    get_migration_status,
    run_migrations,
    verify_schema_integrity,
)

__all__ = ["run_migrations", "get_migration_status", "verify_schema_integrity"]
