"""
Migration script for the policy click tracking tables.

The application runs the same bootstrap on every startup; this script is
for preparing a database ahead of deployment, or for dropping the tables
again during development.

Usage:
    cd backend
    python -m handbook.migrations.create_click_tracking_tables
    python -m handbook.migrations.create_click_tracking_tables --rollback
"""

from ..core.bootstrap import SchemaBootstrap, CLICK_TRACKING_TABLES, BootstrapState
from ..database import engine, SQLALCHEMY_DATABASE_URL


def run_migration(bind=None) -> bool:
    """Create missing click tracking tables. Returns True on success."""
    bind = bind if bind is not None else engine
    print(f"Running migration on database: {SQLALCHEMY_DATABASE_URL}")

    bootstrap = SchemaBootstrap(bind)
    created = bootstrap.run()

    for name in created:
        print(f"  - {name} table created")
    if not created and bootstrap.state == BootstrapState.READY:
        print("  - click tracking tables already exist")

    if bootstrap.state != BootstrapState.READY:
        print("\nMigration failed, see log for details")
        return False

    print("\nMigration completed successfully!")
    return True


def rollback_migration(bind=None):
    """Drop the click tracking tables (for development purposes)"""
    bind = bind if bind is not None else engine
    print(f"Rolling back migration on database: {SQLALCHEMY_DATABASE_URL}")

    with bind.begin() as conn:
        # Reverse order, counters first
        for table in reversed(CLICK_TRACKING_TABLES):
            table.drop(bind=conn, checkfirst=True)
            print(f"  - {table.name} table dropped")


if __name__ == "__main__":
    import argparse
    import sys

    parser = argparse.ArgumentParser(description="Policy click tracking migration")
    parser.add_argument("--rollback", action="store_true", help="Drop the click tracking tables")

    args = parser.parse_args()

    if args.rollback:
        rollback_migration()
    elif not run_migration():
        sys.exit(1)
