"""Tests for the domain layer."""

import pytest

from rangelog.domain import (
    CombinedDocument,
    CombinedEntry,
    CombinedGroup,
    Release,
    ReleasePage,
    RepositoryRef,
    SectionNode,
)


class TestRepositoryRef:
    """Tests for RepositoryRef domain object."""

    def test_from_api_response(self):
        """Test owner login and name are read."""
        repo = RepositoryRef.from_api_response({"owner": {"login": "foo"}, "name": "bar"})
        assert repo == RepositoryRef("foo", "bar")

    def test_from_api_response_missing_owner(self):
        """Test a record without owner keeps the name."""
        assert RepositoryRef.from_api_response({"name": "bar"}) == RepositoryRef("", "bar")

    def test_from_api_response_missing_name(self):
        """Test a record without name keeps the owner."""
        repo = RepositoryRef.from_api_response({"owner": {"login": "foo"}})
        assert repo == RepositoryRef("foo", "")

    def test_from_api_response_none(self):
        """Test None degrades to empty fields."""
        assert RepositoryRef.from_api_response(None) == RepositoryRef("", "")

    @pytest.mark.parametrize("text, owner, name", [
        ("testing-library/dom-testing-library", "testing-library", "dom-testing-library"),
        ("https://github.com/renovatebot/renovate", "renovatebot", "renovate"),
        ("https://github.com/renovatebot/renovate.git", "renovatebot", "renovate"),
        ("git@github.com:renovatebot/renovate.git", "renovatebot", "renovate"),
        ("github.com/foo/bar/releases", "foo", "bar"),
        ("foo", "foo", ""),
        ("", "", ""),
        (None, "", ""),
    ])
    def test_parse(self, text, owner, name):
        """Test lenient owner/name parsing."""
        assert RepositoryRef.parse(text) == RepositoryRef(owner, name)

    def test_properties(self):
        """Test derived names and urls."""
        repo = RepositoryRef("foo", "bar")
        assert repo.full_name == "foo/bar"
        assert repo.html_url == "https://github.com/foo/bar"
        assert repo.is_complete
        assert str(repo) == "foo/bar"
        assert repo.to_dict() == {'owner': 'foo', 'name': 'bar'}
        assert not RepositoryRef("foo").is_complete


class TestRelease:
    """Tests for Release and ReleasePage."""

    def test_to_dict(self):
        """Test serialization."""
        release = Release(tag="v1.0.0", display_name="One", html_url="u")
        assert release.to_dict() == {
            'tag': 'v1.0.0',
            'display_name': 'One',
            'published_at': None,
            'html_url': 'u',
            'body_markdown': '',
        }
        assert str(release) == "v1.0.0"

    def test_published_naive_is_utc(self):
        """Test timestamps without offset compare with aware ones."""
        naive = Release(tag="a", published_at="2020-01-01T00:00:00")
        aware = Release(tag="b", published_at="2020-01-01T01:00:00Z")
        assert naive.published_datetime < aware.published_datetime

    def test_page(self):
        """Test page iteration and tags."""
        page = ReleasePage(releases=(Release(tag="v2.0.0"), Release(tag="v1.0.0")), has_more=True)
        assert len(page) == 2
        assert [r.tag for r in page] == ["v2.0.0", "v1.0.0"]
        assert page.tags == ("v2.0.0", "v1.0.0")

    def test_immutable(self):
        """Test releases cannot be modified."""
        release = Release(tag="v1.0.0")
        with pytest.raises(AttributeError):
            release.tag = "v2.0.0"


class TestCombinedDocument:
    """Tests for changelog document objects."""

    def test_section_with_group(self):
        """Test with_group returns a classified copy."""
        section = SectionNode(title="Bug Fixes", content="- a")
        classified = section.with_group("bug fixes")
        assert classified.group == "bug fixes"
        assert section.group is None

    def test_lookup(self):
        """Test group lookup helpers."""
        v2, v1 = Release(tag="v2.0.0"), Release(tag="v1.0.0")
        document = CombinedDocument(groups=(
            CombinedGroup("features", (
                CombinedEntry(v2, "a"), CombinedEntry(v2, "b"), CombinedEntry(v1, "c"),
            )),
        ))
        assert not document.is_empty
        assert document.group_names == ["features"]
        assert document.get("bug fixes") is None
        assert document.releases_for("features") == [v2, v1]
        assert [g.group for g in document] == ["features"]

    def test_empty(self):
        """Test the empty document."""
        assert CombinedDocument().is_empty
        assert CombinedDocument().to_dict() == {'groups': []}
