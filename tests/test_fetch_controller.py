"""Tests for range-aware release fetching."""

import pytest

from rangelog.config import get_default_config
from rangelog.domain import Release, ReleasePage, RepositoryRef, VersionRange
from rangelog.exit_codes import FetchFailure, InvalidVersionError, RangeUnresolvedError
from rangelog.infra import StaticReleaseFeed
from rangelog.services.fetch_controller import (
    FetchState,
    ReleaseFetcher,
    initial_state,
    step,
)


REPO = RepositoryRef("renovatebot", "renovate")

# 24 releases, newest first: v24.0.0 ... v1.0.0. With page_size=2 that is
# 12 pages; page n holds v(26-2n).0.0 and v(25-2n).0.0.
RELEASES = [Release(tag=f"v{n}.0.0") for n in range(24, 0, -1)]


def make_feed(**kwargs):
    return StaticReleaseFeed(RELEASES, **kwargs)


def page_of(*tags, has_more=True):
    return ReleasePage(releases=tuple(Release(tag=t) for t in tags), has_more=has_more)


class TestStep:
    """Tests for the pure step() transition."""

    def test_initial_state_latest(self):
        """Test a latest upper end is satisfied before any page."""
        assert initial_state(VersionRange("v1.0.0")).found_to
        assert not initial_state(VersionRange("v1.0.0", "v2.0.0")).found_to
        assert initial_state(None) == FetchState()

    def test_continue_until_both_found(self):
        """Test fetching continues while an endpoint is missing."""
        version_range = VersionRange("v1.0.0", "v3.0.0")
        state, more = step(initial_state(version_range), page_of("v4.0.0", "v3.0.0"), version_range)
        assert more
        assert state == FetchState(pages_fetched=1, found_from=False, found_to=True, exhausted=False)

        state, more = step(state, page_of("v2.0.0", "v1.0.0"), version_range)
        assert not more
        assert state.resolved
        assert state.pages_fetched == 2

    def test_stop_when_exhausted(self):
        """Test the last page stops fetching even if unresolved."""
        version_range = VersionRange("v0.1.0")
        state, more = step(initial_state(version_range), page_of("v1.0.0", has_more=False), version_range)
        assert not more
        assert state.exhausted
        assert not state.resolved

    def test_found_flags_are_sticky(self):
        """Test endpoints stay found once seen."""
        version_range = VersionRange("v2.0.0", "v3.0.0")
        state = FetchState(pages_fetched=1, found_from=False, found_to=True)
        state, more = step(state, page_of("v2.5.0"), version_range)
        assert state.found_to
        assert more

    def test_no_range_reads_until_exhausted(self):
        """Test without a range only exhaustion stops."""
        state, more = step(FetchState(), page_of("v1.0.0"))
        assert more
        state, more = step(state, page_of("v0.9.0", has_more=False))
        assert not more
        assert state.pages_fetched == 2


class TestReleaseFetcher:
    """Tests for ReleaseFetcher."""

    def test_stops_once_range_covered(self):
        """Test endpoints within pages 1-11 of 12 take exactly 11 requests."""
        feed = make_feed(fail_on_pages={12})
        fetcher = ReleaseFetcher(feed, page_size=2)

        result = fetcher.fetch(REPO, VersionRange("v4.0.0", "v20.0.0"))

        assert feed.requested_pages == list(range(1, 12))
        assert result.pages_fetched == 11
        assert len(result.releases) == 22
        assert not result.unresolved

    def test_latest_needs_only_from(self):
        """Test a latest range stops on the page containing from."""
        feed = make_feed()
        result = ReleaseFetcher(feed, page_size=2).fetch(REPO, VersionRange("v23.0.0"))
        assert feed.request_count == 1
        assert [r.tag for r in result.releases] == ["v24.0.0", "v23.0.0"]

    def test_to_before_from(self):
        """Test to on a later page than from still needs both."""
        feed = make_feed()
        ReleaseFetcher(feed, page_size=2).fetch(REPO, VersionRange("v24.0.0", "v17.0.0"))
        assert feed.request_count == 4

    def test_page_bound(self):
        """Test hitting max_pages with more pages left raises."""
        feed = make_feed()
        fetcher = ReleaseFetcher(feed, page_size=2, max_pages=3)

        with pytest.raises(RangeUnresolvedError) as exc_info:
            fetcher.fetch(REPO, VersionRange("v1.0.0", "v20.0.0"))

        assert exc_info.value.pages_fetched == 3
        assert feed.request_count == 3

    def test_exhausted_feed_is_unresolved(self):
        """Test running out of pages is reported, not raised."""
        feed = make_feed()
        result = ReleaseFetcher(feed, page_size=5).fetch(REPO, VersionRange("v0.5.0"))
        assert feed.requested_pages == [1, 2, 3, 4, 5]
        assert result.unresolved
        assert len(result.releases) == 24

    def test_invalid_range_fetches_nothing(self):
        """Test endpoints are validated before any request."""
        feed = make_feed()
        with pytest.raises(InvalidVersionError):
            ReleaseFetcher(feed).fetch(REPO, VersionRange("1"))
        assert feed.requested_pages == []

    def test_fetch_failure_propagates(self):
        """Test a failing page aborts the fetch unchanged."""
        feed = make_feed(fail_on_pages={2})
        with pytest.raises(FetchFailure, match="Request page not available: 2"):
            ReleaseFetcher(feed, page_size=2).fetch(REPO, VersionRange("v1.0.0"))
        assert feed.requested_pages == [1, 2]

    def test_without_range_reads_default_pages(self):
        """Test listing reads at most default_pages pages."""
        feed = make_feed()
        result = ReleaseFetcher(feed, page_size=2, default_pages=3).fetch(REPO)
        assert feed.requested_pages == [1, 2, 3]
        assert result.version_range is None
        assert not result.unresolved

    def test_repeated_releases_skipped(self):
        """Test a release repeated across pages is kept once."""
        releases = [Release(tag="v3.0.0"), Release(tag="v2.0.0"), Release(tag="v2.0.0"), Release(tag="v1.0.0")]
        feed = StaticReleaseFeed(releases)
        result = ReleaseFetcher(feed, page_size=2).fetch(REPO, VersionRange("v1.0.0"))
        assert [r.tag for r in result.releases] == ["v3.0.0", "v2.0.0", "v1.0.0"]

    def test_invalid_bounds(self):
        """Test page bounds must be positive."""
        with pytest.raises(ValueError):
            ReleaseFetcher(make_feed(), max_pages=0)

    def test_from_config(self):
        """Test settings come from the releases section."""
        config = get_default_config()
        config['releases'].update({'page_size': 5, 'max_pages': 7, 'default_pages': 2})
        fetcher = ReleaseFetcher.from_config(make_feed(), config)
        assert (fetcher.page_size, fetcher.max_pages, fetcher.default_pages) == (5, 7, 2)
