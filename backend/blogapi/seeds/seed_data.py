"""Demo users and posts for local development.

Seeding is idempotent: users are matched by email and posts by
``(author, title)``, so running it twice creates nothing the second time.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Mapping

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import select

from blogapi.models.post import Post
from blogapi.models.user import User
from blogapi.services._shared.ports import PasswordHasher

LOGGER = logging.getLogger(__name__)

Summary = dict[str, dict[str, int]]

USER_FIXTURES: list[dict[str, str]] = [
    {"name": "Jane Doe", "email": "jane@example.com", "password": "devPass123"},
    {"name": "Minh Tran", "email": "minh.tran@example.com", "password": "writeMore2024"},
]

POST_FIXTURES: list[dict[str, str]] = [
    {
        "author_email": "jane@example.com",
        "title": "Hello, world",
        "content": "First post on the demo blog.",
    },
    {
        "author_email": "jane@example.com",
        "title": "Rotating refresh tokens",
        "content": "Each refresh token works once; a new login replaces it.",
    },
    {
        "author_email": "minh.tran@example.com",
        "title": "Notes from the road",
        "content": "Short travel notes, posted from a phone.",
    },
]


def _tally(table: str, outcomes: Counter[bool]) -> Summary:
    return {table: {"created": outcomes[True], "existing": outcomes[False]}}


def seed_users(database: SQLAlchemy, hasher: PasswordHasher, *, verbose: bool = False) -> Summary:
    """Create demo users. Existing users keep their password."""
    if verbose:
        LOGGER.info("Seeding users...")
    session = database.session
    outcomes: Counter[bool] = Counter()
    for fixture in USER_FIXTURES:
        email = fixture["email"].strip().lower()
        found = session.execute(select(User.id).filter_by(email=email)).first()
        if found is None:
            session.add(
                User(name=fixture["name"], email=email, password_hash=hasher.hash(fixture["password"]))
            )
        outcomes[found is None] += 1
    session.flush()
    return _tally("users", outcomes)


def _authors_by_email(database: SQLAlchemy, emails: set[str]) -> Mapping[str, int]:
    rows = database.session.execute(select(User.email, User.id).where(User.email.in_(emails)))
    return {email: user_id for email, user_id in rows}


def seed_posts(database: SQLAlchemy, *, verbose: bool = False) -> Summary:
    """Create demo posts keyed by (author, title).

    :raises RuntimeError: If an author has not been seeded.
    """
    if verbose:
        LOGGER.info("Seeding posts...")
    session = database.session
    authors = _authors_by_email(database, {f["author_email"] for f in POST_FIXTURES})
    outcomes: Counter[bool] = Counter()
    for fixture in POST_FIXTURES:
        author_id = authors.get(fixture["author_email"])
        if author_id is None:
            raise RuntimeError(f"Seed author missing: {fixture['author_email']}")
        found = session.execute(
            select(Post.id).filter_by(user_id=author_id, title=fixture["title"])
        ).first()
        if found is None:
            session.add(Post(title=fixture["title"], content=fixture["content"], user_id=author_id))
        outcomes[found is None] += 1
    session.flush()
    return _tally("posts", outcomes)


def run_all(database: SQLAlchemy, hasher: PasswordHasher, *, verbose: bool = False) -> Summary:
    """Seed users, then posts, and commit once."""
    summary = seed_users(database, hasher, verbose=verbose)
    summary.update(seed_posts(database, verbose=verbose))
    database.session.commit()
    return summary


__all__ = ["seed_users", "seed_posts", "run_all"]
