"""Unit tests for the playlist fill engine."""

import asyncio
import random
from unittest.mock import AsyncMock

import httpx
import pytest

from spotmix.application.services.playlist_fill_service import (
    NO_TRACKS_ERROR,
    PlaylistFillService,
    select_random_tracks,
)
from spotmix.application.services.track_aggregator import TrackAggregator
from spotmix.domain.dtos import FillResult, PlaylistFillRequest, Track


def _tracks(prefix: str, count: int) -> list[Track]:
    return [Track(id=f"{prefix}{i}", uri=f"spotify:track:{prefix}{i}") for i in range(count)]


class TestSelectRandomTracks:
    def test_returns_at_most_track_count(self) -> None:
        selected = select_random_tracks({"a": _tracks("a", 10), "b": _tracks("b", 10)}, 5)
        assert len(selected) == 5

    def test_small_pool_returns_everything(self) -> None:
        pool = {"a": _tracks("a", 3), "b": _tracks("b", 2)}

        selected = select_random_tracks(pool, 50)

        assert sorted(t.id for t in selected) == ["a0", "a1", "a2", "b0", "b1"]

    def test_zero_count_and_empty_pool(self) -> None:
        assert select_random_tracks({"a": _tracks("a", 3)}, 0) == []
        assert select_random_tracks({}, 10) == []
        assert select_random_tracks([], 10) == []

    def test_accepts_list_of_lists(self) -> None:
        selected = select_random_tracks([_tracks("a", 2), _tracks("b", 2)], 4)
        assert len(selected) == 4

    def test_no_cross_artist_dedup(self) -> None:
        shared = Track(id="collab", uri="spotify:track:collab")

        selected = select_random_tracks({"a": [shared], "b": [shared]}, 10)

        assert [t.id for t in selected] == ["collab", "collab"]

    def test_seeded_rng_is_reproducible(self) -> None:
        pool = {"a": _tracks("a", 20)}

        first = select_random_tracks(pool, 5, random.Random(42))
        second = select_random_tracks(pool, 5, random.Random(42))

        assert first == second

    def test_does_not_mutate_input(self) -> None:
        tracks = _tracks("a", 10)
        pool = {"a": tracks}

        select_random_tracks(pool, 5, random.Random(1))

        assert [t.id for t in tracks] == [f"a{i}" for i in range(10)]


class TestPlaylistFillService:
    """Test suite for PlaylistFillService."""

    @pytest.fixture
    def service(self, catalog) -> PlaylistFillService:
        return PlaylistFillService(catalog, TrackAggregator(catalog), rng=random.Random(7))

    async def test_end_to_end_partial_artist_failure(self, catalog, service) -> None:
        """Two artists contribute 10 + 15 tracks, the middle one fails."""
        catalog.add_artist("artist-a", {"a-alb": [f"a{i}" for i in range(10)]})
        catalog.albums["artist-b"] = httpx.ConnectError("unreachable")
        catalog.add_artist(
            "artist-c",
            {"c-alb1": [f"c{i}" for i in range(8)], "c-alb2": [f"c{i}" for i in range(8, 15)]},
        )

        result = await service.fill_playlist(
            "playlist", ["artist-a", "artist-b", "artist-c"], 50, replace_existing=True
        )

        assert result == FillResult(success=True, track_count=25)
        assert result.to_dict() == {"success": True, "trackCount": 25}
        assert len(catalog.replaced) == 1
        playlist_id, uris = catalog.replaced[0]
        assert playlist_id == "playlist"
        assert len(uris) == 25
        assert len(set(uris)) == 25
        assert catalog.added == []

    async def test_append_mode_adds_tracks(self, catalog, service) -> None:
        catalog.add_artist("artist", {"alb": [f"t{i}" for i in range(10)]})

        result = await service.fill_playlist("playlist", ["artist"], 4)

        assert result == FillResult(success=True, track_count=4)
        assert len(catalog.added) == 1
        assert len(catalog.added[0][1]) == 4
        assert catalog.replaced == []

    async def test_empty_pool_reports_error_without_mutation(self, catalog, service) -> None:
        catalog.albums["artist"] = []

        result = await service.fill_playlist("playlist", ["artist"], 10, replace_existing=True)

        assert result == FillResult(success=False, track_count=0, error=NO_TRACKS_ERROR)
        assert result.to_dict() == {
            "success": False,
            "trackCount": 0,
            "error": "No tracks found for selected artists",
        }
        assert catalog.added == []
        assert catalog.replaced == []

    async def test_no_artists(self, catalog, service) -> None:
        result = await service.fill_playlist("playlist", [], 10)
        assert result.error == NO_TRACKS_ERROR

    async def test_mutation_failure_becomes_result(self, catalog, service, mocker) -> None:
        catalog.add_artist("artist", {"alb": ["t1", "t2"]})
        mocker.patch.object(
            catalog,
            "add_tracks_to_playlist",
            side_effect=RuntimeError("Spotify said no"),
        )

        result = await service.fill_playlist("playlist", ["artist"], 2)

        assert result == FillResult(success=False, track_count=0, error="Spotify said no")

    async def test_invalid_request_becomes_result(self, catalog, service) -> None:
        result = await service.fill_playlist("playlist", ["artist"], -1)

        assert result.success is False
        assert result.error == "track_count cannot be negative"
        assert catalog.album_calls == []

    async def test_duplicate_artist_ids_fetched_per_occurrence(self, catalog, service) -> None:
        catalog.add_artist("artist", {"alb": ["t1", "t2", "t3"]})

        result = await service.fill_playlist("playlist", ["artist", "artist"], 10)

        assert result.track_count == 3
        assert len(catalog.album_calls) == 2

    async def test_fill_with_request_object(self, catalog, service) -> None:
        catalog.add_artist("artist", {"alb": ["t1"]})

        result = await service.fill(
            PlaylistFillRequest(
                playlist_id="playlist",
                artist_ids=["artist"],
                track_count=1,
                replace_existing=True,
            )
        )

        assert result.success is True
        assert catalog.replaced == [("playlist", ["spotify:track:t1"])]

    async def test_collect_artist_tracks_drops_failures(self) -> None:
        aggregator = AsyncMock(spec=TrackAggregator)
        aggregator.get_all_artist_tracks.side_effect = [
            _tracks("a", 2),
            httpx.ReadTimeout("slow"),
        ]
        service = PlaylistFillService(AsyncMock(), aggregator)

        result = await service.collect_artist_tracks(["a", "b"])

        assert list(result) == ["a"]
        assert len(result["a"]) == 2

    async def test_slow_artist_does_not_block_the_others(self) -> None:
        """The slow artist can only finish after the fast one did, so both must be in flight."""
        fast_done = asyncio.Event()
        finished: list[str] = []

        async def aggregate(artist_id: str):
            if artist_id == "slow":
                await asyncio.wait_for(fast_done.wait(), timeout=1)
            else:
                fast_done.set()
            finished.append(artist_id)
            return _tracks(artist_id, 1)

        aggregator = AsyncMock(spec=TrackAggregator)
        aggregator.get_all_artist_tracks.side_effect = aggregate
        service = PlaylistFillService(AsyncMock(), aggregator)

        result = await service.collect_artist_tracks(["slow", "fast"])

        assert finished == ["fast", "slow"]
        assert set(result) == {"slow", "fast"}
