"""
Database initialization and seeding.

This script:
- Creates the author, book, borrow and user tables
- Optionally adds sample data for development/testing
- Can reset the database (drop and recreate)

Usage:
    # Create tables
    python -m lms.database.init_db

    # Reset database (drops all tables and recreates)
    python -m lms.database.init_db --reset

    # Add sample data for testing
    python -m lms.database.init_db --sample-data
"""

import argparse
from datetime import timedelta
from typing import Dict, Optional

from lms.core.datetimes import now
from lms.database.gateway import Gateway
from lms.database.schema import create_all_tables, drop_all_tables
from lms.models import Author, Book, Borrow, User


def create_tables(gateway: Gateway, reset: bool = False) -> None:
    """
    Create all database tables.

    Args:
        gateway: Gateway whose engine the tables are created on
        reset: If True, drop existing tables first
    """
    schema = gateway.settings.db_schema
    if reset:
        print("🗑️  Dropping existing tables...")
        drop_all_tables(gateway.engine, schema)
        print("✅ Tables dropped")

    print("📊 Creating database tables...")
    create_all_tables(gateway.engine, schema)
    print("✅ Tables created")


def seed_sample_data(gateway: Gateway) -> None:
    """
    Seed a few authors, books, users and borrows.

    Rows are written through the entity records, the same way an
    application would write them.
    """
    print("\n🌱 Seeding sample data...")

    authors = [Author.new("Jane", "Austen"), Author.new("Chinua", "Achebe")]
    for author in authors:
        print(f"  {author.add_to_database(gateway)} row(s): {author!r}")

    # Identities are only known once the store reports them
    saved = {(a.first_name, a.last_name): a.author_id for a in Author.list_all(gateway)}

    books = [
        Book.new("Pride and Prejudice", "A novel of manners.", 432, "Romance",
                 saved[("Jane", "Austen")]),
        Book.new("Things Fall Apart", "The story of Okonkwo.", 209, "Historical fiction",
                 saved[("Chinua", "Achebe")]),
    ]
    for book in books:
        print(f"  {book.add_to_database(gateway)} row(s): {book!r}")

    users = [User.new("Ada", "Lovelace"), User.new("Alan", "Turing")]
    users[1].booking_record = False
    for user in users:
        print(f"  {user.add_to_database(gateway)} row(s): {user!r}")

    first_book = Book.list_all(gateway)[0]
    first_user = User.list_all(gateway)[0]
    borrow = Borrow.new(first_book.book_id, first_user.user_id, now() + timedelta(days=14))
    print(f"  {borrow.add_to_database(gateway)} row(s): {borrow!r}")

    print("✅ Sample data seeded")


def table_counts(gateway: Gateway) -> Dict[str, int]:
    """Row count per table."""
    counts = {}
    for record in (Author, Book, User, Borrow):
        rows = gateway.execute_query(f"SELECT COUNT(*) FROM {gateway.qualified(record.table)}")
        counts[record.table] = int(rows[0][0])
    return counts


def print_database_status(gateway: Gateway) -> None:
    """Print current database status and counts."""
    print("\n" + "=" * 60)
    print("📊 Database Status")
    print("=" * 60)

    for table, count in table_counts(gateway).items():
        print(f"  {table + ':':<9} {count}")

    print("=" * 60)


def initialize_database(
    reset: bool = False,
    sample_data: bool = False,
    gateway: Optional[Gateway] = None,
) -> None:
    """
    Initialize the database.

    Args:
        reset: Drop existing tables before creating
        sample_data: Add sample data for testing
        gateway: Gateway to use (default: a new one from the global settings)
    """
    owned = gateway is None
    gateway = gateway or Gateway()

    print("=" * 60)
    print("🗄️  Database Initialization")
    print("=" * 60)

    try:
        create_tables(gateway, reset=reset)
        if sample_data:
            seed_sample_data(gateway)
        print_database_status(gateway)
    finally:
        if owned:
            gateway.close()

    print("\n✅ Database initialization complete!")


def main(argv=None):
    """Main entry point with CLI argument parsing."""
    parser = argparse.ArgumentParser(
        description="Initialize and seed the library database",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Create the tables
  python -m lms.database.init_db

  # Reset database (drop all tables and recreate)
  python -m lms.database.init_db --reset

  # Full reset with sample data, skipping the confirmation prompt
  python -m lms.database.init_db --reset --sample-data --yes
        """
    )

    parser.add_argument(
        "--reset",
        action="store_true",
        help="Drop existing tables before creating (WARNING: deletes all data!)"
    )

    parser.add_argument(
        "--sample-data",
        action="store_true",
        help="Add sample data for development/testing"
    )

    parser.add_argument(
        "--yes",
        action="store_true",
        help="Do not ask for confirmation before --reset"
    )

    args = parser.parse_args(argv)

    # Confirm reset if requested
    if args.reset and not args.yes:
        print("⚠️  WARNING: This will DELETE ALL DATA in the database!")
        response = input("Are you sure? Type 'yes' to continue: ")
        if response.lower() != 'yes':
            print("❌ Aborted")
            return

    initialize_database(reset=args.reset, sample_data=args.sample_data)


if __name__ == "__main__":
    main()
