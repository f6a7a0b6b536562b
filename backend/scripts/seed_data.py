"""Seed script to populate a local dev database with registration keys and demo books.

Usage:
    PYTHONPATH=backend/src python backend/scripts/seed_data.py populate
    PYTHONPATH=backend/src python backend/scripts/seed_data.py populate --force
    PYTHONPATH=backend/src python backend/scripts/seed_data.py clear
"""

import argparse
import asyncio
from datetime import UTC, datetime, timedelta
from urllib.parse import urlparse

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import get_settings
from db.session import dispose_engine, get_session_factory
from models import Book, RegistrationKey

# One invite key per role, prefixed so clear() only touches seeded rows
SEED_KEY_PREFIX = 'seed-'
ROLES = ['super_admin', 'moderator', 'author', 'school', 'teacher', 'student']

BOOKS = [
    {
        'base_url': 'algebra-basics',
        'title': 'Algebra Basics',
        'description': 'Linear equations, inequalities and graphs for beginners.',
        'grade_level': '7',
        'course': 'Mathematics',
        'status': 'Active',
    },
    {
        'base_url': 'world-geography',
        'title': 'World Geography',
        'description': 'Continents, climates and the people who live there.',
        'grade_level': '6',
        'course': 'Geography',
        'status': 'Active',
    },
    {
        'base_url': 'intro-to-chemistry',
        'title': 'Introduction to Chemistry',
        'description': 'Atoms, molecules and the periodic table.',
        'grade_level': '8',
        'course': 'Chemistry',
        'status': 'Moderation',
    },
    {
        'base_url': 'reading-workshop',
        'title': 'Reading Workshop',
        'description': 'Short stories with comprehension questions.',
        'grade_level': '5',
        'course': 'Literature',
        'status': 'Draft',
    },
]


def require_local_database() -> None:
    """Refuse to run against anything but a local, non-production database."""
    settings = get_settings()
    hostname = (urlparse(settings.database_url).hostname or '').lower()
    if settings.is_production or hostname not in {'localhost', '127.0.0.1', '::1'}:
        print(
            'ERROR: Seed script only runs against a local development database.\n'
            f"Database host '{hostname}' with APP_ENV={settings.environment} was refused."
        )
        raise SystemExit(1)


async def create_keys(session: AsyncSession) -> None:
    """Create one multi-use registration key per role."""
    for role in ROLES:
        session.add(RegistrationKey(
            key=f'{SEED_KEY_PREFIX}{role}',
            role=role,
            is_active=True,
            uses=0,
            max_uses=100,
        ))


async def create_books(session: AsyncSession) -> None:
    """Create demo books with distinct created_at values (newest first in listings)."""
    now = datetime.now(UTC)
    for offset, data in enumerate(BOOKS):
        session.add(Book(**data, created_at=now - timedelta(days=offset)))


async def clear_data(session: AsyncSession) -> None:
    """Delete seeded keys and books."""
    await session.execute(
        delete(RegistrationKey).where(RegistrationKey.key.startswith(SEED_KEY_PREFIX)),
    )
    await session.execute(
        delete(Book).where(Book.base_url.in_([book['base_url'] for book in BOOKS])),
    )


async def populate(force: bool = False) -> None:
    """Populate the database with seed data."""
    async with get_session_factory()() as session:
        try:
            key_count = (await session.execute(
                select(func.count())
                .select_from(RegistrationKey)
                .where(RegistrationKey.key.startswith(SEED_KEY_PREFIX))
            )).scalar()

            if key_count:
                if force:
                    print('Existing data found, clearing first (--force)...')
                    await clear_data(session)
                    await session.flush()
                else:
                    print(
                        f'Data already exists ({key_count} keys). '
                        f'Use --force to clear and re-seed.'
                    )
                    return

            print('Populating seed data...')
            await create_keys(session)
            await create_books(session)
            await session.commit()
            print('Seed data created successfully.')
            for role in ROLES:
                print(f'  {role}: {SEED_KEY_PREFIX}{role}')
        except Exception:
            await session.rollback()
            raise
        finally:
            await dispose_engine()


async def clear() -> None:
    """Remove seed data."""
    async with get_session_factory()() as session:
        try:
            await clear_data(session)
            await session.commit()
            print('Seed data cleared.')
        except Exception:
            await session.rollback()
            raise
        finally:
            await dispose_engine()


def main() -> None:
    """CLI entry point."""
    require_local_database()

    parser = argparse.ArgumentParser(description='Seed the dev database with test data.')
    subparsers = parser.add_subparsers(dest='command', required=True)

    populate_parser = subparsers.add_parser('populate', help='Populate database with test data')
    populate_parser.add_argument(
        '--force', action='store_true',
        help='Clear existing data before populating',
    )

    subparsers.add_parser('clear', help='Remove seeded keys and books')

    args = parser.parse_args()

    if args.command == 'populate':
        asyncio.run(populate(force=args.force))
    elif args.command == 'clear':
        asyncio.run(clear())


if __name__ == '__main__':
    main()
