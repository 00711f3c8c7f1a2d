"""
test_tag_repository.py
----------------------
Tests for tag find-or-create, counts and post associations.
"""
import pytest
from folio.core.exceptions import NotFoundError, ValidationError
from folio.models.post import PostStatus
from folio.models.tag import Tag
from sqlmodel import select
from conftest import AUTHOR_ID


class TestFindOrCreate:
    """Tag find-or-create semantics."""

    def test_creates_new_tag(self, tag_repo):
        tag = tag_repo.find_or_create("React Native")
        assert tag.name == "React Native"
        assert tag.slug == "react-native"
        assert tag.color == "#3B82F6"

    def test_returns_existing(self, tag_repo):
        """Repeated calls with the same name return the same row."""
        first = tag_repo.find_or_create("Python")
        second = tag_repo.find_or_create("Python")
        assert first.id == second.id
        assert len(tag_repo.get_all()) == 1

    def test_strips_name(self, tag_repo):
        first = tag_repo.find_or_create("Python")
        assert tag_repo.find_or_create("  Python ").id == first.id

    def test_custom_color(self, tag_repo):
        assert tag_repo.find_or_create("Go", color="#00ADD8").color == "#00ADD8"

    def test_same_slug_different_name(self, tag_repo):
        """A name that slugifies onto an existing tag reuses that tag."""
        original = tag_repo.find_or_create("React")
        again = tag_repo.find_or_create("react")
        assert again.id == original.id
        assert len(tag_repo.get_all()) == 1

    def test_name_without_slug_characters(self, tag_repo):
        with pytest.raises(ValidationError):
            tag_repo.find_or_create("!!!")

    def test_find_by_slug_and_name(self, tag_repo):
        tag = tag_repo.find_or_create("Machine Learning")
        assert tag_repo.find_by_slug("machine-learning").id == tag.id
        assert tag_repo.find_by_name("Machine Learning").id == tag.id
        assert tag_repo.find_by_slug("missing") is None


class TestCounts:
    """Tag listings with post counts."""

    def test_counts_include_unused_tags(self, tag_repo, post_repo, post_input):
        tag_repo.find_or_create("Unused")
        post_repo.create_with_tags(post_input("One", tags=["python", "aws"]), AUTHOR_ID)
        post_repo.create_with_tags(post_input("Two", tags=["python"]), AUTHOR_ID)

        counts = {t.name: t.post_count for t in tag_repo.get_all_with_counts()}
        assert counts == {"Unused": 0, "aws": 1, "python": 2}

    def test_popular_orders_by_count(self, tag_repo, post_repo, post_input):
        post_repo.create_with_tags(post_input("One", tags=["a", "b", "c"]), AUTHOR_ID)
        post_repo.create_with_tags(post_input("Two", tags=["c", "b"]), AUTHOR_ID)
        post_repo.create_with_tags(post_input("Three", tags=["c"]), AUTHOR_ID)

        popular = tag_repo.get_popular(limit=2)
        assert [(t.name, t.post_count) for t in popular] == [("c", 3), ("b", 2)]

    def test_popular_ties_keep_name_order(self, tag_repo):
        for name in ["zeta", "alpha", "mid"]:
            tag_repo.find_or_create(name)
        assert [t.name for t in tag_repo.get_popular()] == ["alpha", "mid", "zeta"]


class TestAssociations:
    """Tags per post."""

    def test_get_by_post(self, tag_repo, post_repo, post_input):
        post = post_repo.create_with_tags(post_input(tags=["b", "a"]), AUTHOR_ID)
        assert [t.name for t in tag_repo.get_by_post(post.id)] == ["a", "b"]

    def test_get_by_posts_includes_untagged(self, tag_repo, post_repo, post_input):
        tagged = post_repo.create_with_tags(post_input("Tagged", tags=["x"]), AUTHOR_ID)
        untagged = post_repo.create_with_tags(post_input("Untagged"), AUTHOR_ID)

        result = tag_repo.get_by_posts([tagged.id, untagged.id])
        assert [t.name for t in result[tagged.id]] == ["x"]
        assert result[untagged.id] == []

    def test_get_by_posts_empty(self, tag_repo):
        assert tag_repo.get_by_posts([]) == {}


class TestUpdateDelete:
    def test_update_tag_renames_and_reslugs(self, tag_repo):
        tag = tag_repo.find_or_create("JS")
        updated = tag_repo.update_tag(tag.id, name="JavaScript", color="#F7DF1E")
        assert updated.slug == "javascript"
        assert updated.color == "#F7DF1E"

    def test_update_missing(self, tag_repo):
        with pytest.raises(NotFoundError):
            tag_repo.update_tag("missing", color="#000000")

    def test_delete_keeps_posts(self, db_session, tag_repo, post_repo, post_input):
        """Deleting a tag removes its associations but not the posts."""
        post = post_repo.create_with_tags(post_input(tags=["gone", "kept"], status=PostStatus.PUBLISHED), AUTHOR_ID)
        gone = tag_repo.find_by_slug("gone")

        tag_repo.delete_tag(gone.id)

        assert db_session.exec(select(Tag).where(Tag.slug == "gone")).first() is None
        remaining = post_repo.find_by_id_with_relations(post.id)
        assert [t.slug for t in remaining.tags] == ["kept"]
