#!/usr/bin/env python3
"""
Database migration script enforcing one notification per (task, type).

Deployments that ran the old read-then-write reminder jobs may already hold
duplicate due_soon/overdue rows. This script:
1. Deletes duplicate notifications, keeping the oldest row of each (task_id, type)
2. Creates the unique index uq_notifications_task_type on (task_id, type)

Run this script BEFORE starting the scheduler against an existing database.
"""

import sys
from sqlalchemy import text
from sqlalchemy.orm import sessionmaker

INDEX_NAME = "uq_notifications_task_type"


def _get_engine(engine=None):
    if engine is not None:
        return engine
    from server.database import engine as default_engine
    return default_engine


def run_migration(engine=None) -> int:
    """Execute the migration steps. Returns the number of duplicates removed."""
    session = sessionmaker(bind=_get_engine(engine))()

    try:
        print("\n" + "="*60)
        print("NOTIFICATION (task, type) UNIQUENESS MIGRATION")
        print("="*60 + "\n")

        # Step 1: Remove duplicates
        print("📋 Step 1: Removing duplicate notifications...")
        result = session.execute(text("""
            DELETE FROM notifications
            WHERE id NOT IN (
                SELECT keep_id FROM (
                    SELECT MIN(id) AS keep_id
                    FROM notifications
                    GROUP BY task_id, type
                ) AS keepers
            );
        """))
        removed = result.rowcount or 0
        session.commit()
        print(f"✅ Removed {removed} duplicate notifications\n")

        # Step 2: Unique index
        print(f"📋 Step 2: Creating unique index {INDEX_NAME}...")
        session.execute(text(f"""
            CREATE UNIQUE INDEX IF NOT EXISTS {INDEX_NAME}
            ON notifications (task_id, type);
        """))
        session.commit()
        print("✅ Unique index created\n")

        print("🎉 Migration complete")
        return removed

    except Exception as e:
        session.rollback()
        print(f"\n❌ ERROR during migration: {e}")
        raise
    finally:
        session.close()


def _rollback_statements(dialect_name: str) -> list:
    statements = []
    if dialect_name == "postgresql":
        # create_all schemas carry uniqueness as a table constraint that owns the index
        statements.append(f"ALTER TABLE notifications DROP CONSTRAINT IF EXISTS {INDEX_NAME};")
    statements.append(f"DROP INDEX IF EXISTS {INDEX_NAME};")
    return statements


def rollback_migration(engine=None) -> None:
    """
    Remove the (task_id, type) uniqueness. Deleted duplicates are not restored.

    On PostgreSQL both the standalone index and a table constraint of the same
    name are dropped. SQLite cannot drop a table-level UNIQUE, so on a table
    created from the models only the standalone index (if any) goes away and
    uniqueness stays enforced.
    """
    engine = _get_engine(engine)
    session = sessionmaker(bind=engine)()
    try:
        print(f"⏪ Dropping {INDEX_NAME}...")
        for statement in _rollback_statements(engine.dialect.name):
            session.execute(text(statement))
        session.commit()
        print("✅ Rollback complete")
    except Exception as e:
        session.rollback()
        print(f"\n❌ ERROR during rollback: {e}")
        raise
    finally:
        session.close()


if __name__ == "__main__":
    try:
        if len(sys.argv) > 1 and sys.argv[1] == "--rollback":
            rollback_migration()
        else:
            run_migration()
    except Exception:
        sys.exit(1)
