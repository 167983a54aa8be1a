# tests/unit/repositories/test_repository_post.py
from __future__ import annotations

import pytest
from blogapi.models.post import Post
from blogapi.repositories.base import Pagination, parse_sort_tokens
from blogapi.repositories.post import PostRepository
from tests.factories.post import PostFactory
from tests.factories.user import UserFactory


@pytest.fixture()
def repo(session) -> PostRepository:
    return PostRepository(session=session)


def test_parse_sort_tokens():
    assert parse_sort_tokens(["-created_at", "title", "-"]) == [
        ("created_at", True),
        ("title", False),
    ]


def test_add_get_and_delete(repo, session):
    author = UserFactory()
    session.flush()

    post = repo.add(Post(title="T", content="C", user_id=author.id))
    assert post.id is not None
    assert repo.get(post.id) is post
    assert repo.exists(user_id=author.id) is True

    repo.delete(post)
    repo.flush()
    assert repo.get(post.id) is None


def test_paginate_filters_by_owner_with_pk_tiebreak(repo, session):
    jane, minh = UserFactory(), UserFactory()
    first = PostFactory(author=jane, title="same")
    second = PostFactory(author=jane, title="same")
    PostFactory(author=minh)
    session.flush()

    page = repo.paginate(Pagination(page=1, limit=10, sort=["title"]), filters={"user_id": jane.id})
    assert [p.id for p in page.items] == [first.id, second.id]
    assert page.total == 2
    assert page.has_prev is False
    assert page.has_next is False


def test_paginate_descending_and_page_flags(repo, session):
    author = UserFactory()
    for title in ("a", "b", "c"):
        PostFactory(author=author, title=title)
    session.flush()

    page = repo.paginate(Pagination(page=2, limit=1, sort=["-title"]))
    assert [p.title for p in page.items] == ["b"]
    assert (page.has_prev, page.has_next) == (True, True)


def test_deleting_author_cascades_to_posts(session):
    post = PostFactory()
    session.flush()
    post_id = post.id

    author = post.author
    assert post in author.posts

    session.delete(author)
    session.flush()
    assert session.get(Post, post_id) is None


def test_update_whitelist(repo, session):
    post = PostFactory(title="Old")
    session.flush()

    repo.update(post, title="New")
    assert post.title == "New"
    with pytest.raises(ValueError):
        repo.update(post, user_id=123)
