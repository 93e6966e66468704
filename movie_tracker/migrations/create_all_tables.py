"""
Migration script to create all database tables

Run this script to create all database tables:
    python -m movie_tracker.migrations.create_all_tables
"""

from movie_tracker.database import Base, DATABASE_URL, init_db


def create_tables():
    """Create all database tables"""
    print("=" * 60)
    print("Creating all database tables...")
    print(f"   Database: {DATABASE_URL.split('@')[-1]}")
    print("=" * 60)

    init_db()

    print("\n✅ All tables created successfully!")
    print("\nTables created:")
    for table_name in Base.metadata.tables:
        print(f"   - {table_name}")
    print("=" * 60)


if __name__ == "__main__":
    create_tables()
