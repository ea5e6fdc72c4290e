"""Tests for version parsing and comparison."""

import pytest

from rangelog.domain import Release
from rangelog.domain.version import (
    VersionKey,
    compare_versions,
    get_display_version,
    is_stable_release,
    is_version,
    parse_version_key,
    sort_releases,
)
from rangelog.exit_codes import DATA_ERROR, InvalidVersionError


class TestParseVersionKey:
    """Tests for parse_version_key."""

    def test_plain_version(self):
        """Test major.minor.patch without prefix."""
        assert parse_version_key("26.9.0") == VersionKey(26, 9, 0)

    def test_v_prefix(self):
        """Test the common v prefix is stripped."""
        assert parse_version_key("v8.1.0") == VersionKey(8, 1, 0)

    def test_long_prefix(self):
        """Test any leading non-digit run counts as prefix."""
        key = parse_version_key("release-2.0.1")
        assert (key.major, key.minor, key.patch) == (2, 0, 1)

    def test_prerelease(self):
        """Test pre-release component is kept."""
        key = parse_version_key("v5.0.0-alpha.3")
        assert key.prerelease == "alpha.3"
        assert key.is_prerelease
        assert str(key) == "5.0.0-alpha.3"

    def test_accepts_release(self):
        """Test a Release is parsed by its tag."""
        assert parse_version_key(Release(tag="v1.2.3")) == VersionKey(1, 2, 3)

    @pytest.mark.parametrize("tag", ["1", "v1.2", "latest", "", "v1.2.3.4", "1.2.x", "v1.2.3-"])
    def test_invalid_shapes(self, tag):
        """Test anything but major.minor.patch[-pre] is rejected."""
        with pytest.raises(InvalidVersionError) as exc_info:
            parse_version_key(tag)
        assert exc_info.value.tag == tag

    def test_error_message_and_code(self):
        """Test the error carries the literal tag and a data error code."""
        with pytest.raises(InvalidVersionError) as exc_info:
            parse_version_key("nightly")
        assert str(exc_info.value) == "Invalid Version: nightly"
        assert exc_info.value.exit_code == DATA_ERROR
        assert isinstance(exc_info.value, ValueError)


class TestCompareVersions:
    """Tests for compare_versions."""

    def test_equal_versions(self):
        """Test identical major.minor.patch compare equal."""
        assert compare_versions("v1.2.3", "1.2.3") == 0

    def test_newer_first_descending(self):
        """Test descending order puts the newer version first."""
        assert compare_versions("v2.0.0", "v1.9.9") == -1
        assert compare_versions("v1.9.9", "v2.0.0") == 1

    def test_numeric_not_lexicographic(self):
        """Test components compare as numbers."""
        assert compare_versions("v1.10.0", "v1.9.0") == -1
        assert compare_versions("v2.0.10", "v2.0.9") == -1

    def test_stable_beats_prerelease(self):
        """Test a stable release is newer than its pre-releases."""
        assert compare_versions("v5.0.0", "v5.0.0-alpha.3") == -1
        assert compare_versions("v5.0.0-beta.1", "v5.0.0") == 1

    def test_prereleases_lexicographic(self):
        """Test two pre-releases compare as strings."""
        assert compare_versions("v5.0.0-beta.1", "v5.0.0-alpha.3") == -1
        assert compare_versions("v5.0.0-alpha.3", "v5.0.0-alpha.3") == 0

    def test_ascending_inverts(self):
        """Test asc direction inverts the sign."""
        assert compare_versions("v2.0.0", "v1.0.0", direction="asc") == 1
        assert compare_versions("v1.0.0", "v1.0.0", direction="asc") == 0

    def test_unknown_direction(self):
        """Test an unknown direction is rejected."""
        with pytest.raises(ValueError):
            compare_versions("v1.0.0", "v2.0.0", direction="sideways")

    def test_invalid_tag_raises(self):
        """Test invalid tags propagate InvalidVersionError."""
        with pytest.raises(InvalidVersionError):
            compare_versions("v1.0.0", "nightly")


class TestSortReleases:
    """Tests for sort_releases."""

    def test_descending(self):
        """Test releases sort newest first."""
        tags = ["v1.0.0", "v2.1.0", "v2.0.0-rc.1", "v2.0.0", "v1.10.0"]
        assert sort_releases(tags) == ["v2.1.0", "v2.0.0", "v2.0.0-rc.1", "v1.10.0", "v1.0.0"]

    def test_ascending(self):
        """Test asc direction sorts oldest first."""
        assert sort_releases(["v2.0.0", "v1.0.0"], direction="asc") == ["v1.0.0", "v2.0.0"]

    def test_sorting_twice_is_stable(self):
        """Test equal keys keep their relative order and re-sorting changes nothing."""
        releases = [
            Release(tag="v1.0.0", display_name="first"),
            Release(tag="1.0.0", display_name="second"),
            Release(tag="v3.0.0"),
        ]
        once = sort_releases(releases)
        assert [r.display_name for r in once] == ["", "first", "second"]
        assert sort_releases(once) == once


class TestReleaseHelpers:
    """Tests for is_version, is_stable_release and get_display_version."""

    def test_is_version(self):
        """Test is_version never raises."""
        assert is_version("v1.0.0")
        assert not is_version("nightly")

    def test_is_stable_release(self):
        """Test stability badge rules."""
        assert is_stable_release("v1.0.0")
        assert not is_stable_release("v5.0.0-alpha.3")
        assert not is_stable_release("not a version")

    def test_is_stable_release_accepts_release(self):
        """Test stability of a Release object."""
        assert is_stable_release(Release(tag="v2.0.0"))

    def test_display_version_plain(self):
        """Test ordinary releases display their tag."""
        assert get_display_version(Release(tag="v8.1.0", display_name="Big one")) == "v8.1.0"

    def test_display_version_latest_with_name(self):
        """Test the synthetic latest release shows its name."""
        latest = Release(tag="latest", display_name="Latest (v8.17.1)")
        assert get_display_version(latest) == "Latest (v8.17.1)"

    def test_display_version_latest_without_name(self):
        """Test latest without a name falls back to the literal."""
        assert get_display_version(Release(tag="latest")) == "latest"
