"""
Tests for the moderation data model and its persistence.

Verifies that:
- ModerationResult enforces its invariants
- Results and states serialize and load back unchanged, timestamps included
- The state machine only allows the documented transitions
- Both stores round-trip a state and treat absent records as pending
"""
import asyncio
import json

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from modreview.analysis.store import JsonModerationStore, SqlModerationStore
from modreview.db.models import Base
from modreview.db.repository import ContentItemRepository, ModerationRepository
from modreview.fusion import ConsensusEngine
from modreview.items.models import ContentItem
from modreview.moderation import (
    InvalidTransitionError,
    ModerationResult,
    ModerationState,
    ModerationStatus,
    TimeMarker,
)


@pytest.fixture
def video_result():
    """A completed consensus record with time markers."""
    google = ModerationResult(
        flagged=True,
        categories=["violence"],
        category_scores={"violence": 0.82, "on_screen_text": 0.5},
        provider="google_video_intelligence",
        timestamps=[TimeMarker(10.0, ["violence"], 0.82), TimeMarker(42.5, ["violence"], 0.9)],
    )
    openai = ModerationResult(
        flagged=False,
        categories=[],
        category_scores={"violence": 0.3},
        provider="openai",
    )
    return ConsensusEngine().merge([google, openai])


@pytest.fixture
def completed_state(video_result):
    state = ModerationState()
    state.begin()
    state.complete(video_result, {"azure": "[azure] moderate-azure returned 503"})
    return state


@pytest.fixture
def session_factory():
    """In-memory SQLite shared across threads."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


class TestModerationResult:
    """Tests for ModerationResult invariants and serialization."""

    def test_category_without_score_rejected(self):
        with pytest.raises(ValueError):
            ModerationResult(flagged=True, categories=["hate"], category_scores={}, provider="openai")

    def test_score_out_of_range_rejected(self):
        with pytest.raises(ValueError):
            ModerationResult(flagged=False, categories=[], category_scores={"hate": -0.1}, provider="openai")

    def test_flagged_must_follow_categories(self):
        with pytest.raises(ValueError):
            ModerationResult(flagged=True, categories=[], category_scores={}, provider="openai")

    def test_categories_deduplicated(self):
        result = ModerationResult(
            flagged=True, categories=["hate", "hate"], category_scores={"hate": 0.9}, provider="azure"
        )
        assert result.categories == ["hate"]

    def test_marker_validation(self):
        with pytest.raises(ValueError):
            TimeMarker(-1.0, ["violence"], 0.5)
        with pytest.raises(ValueError):
            TimeMarker(1.0, ["violence"], 1.5)

    def test_dict_round_trip_keeps_timestamps(self, video_result):
        """Timestamps survive a trip through JSON."""
        loaded = ModerationResult.from_dict(json.loads(json.dumps(video_result.to_dict())))

        assert loaded == video_result
        assert [m.time_offset_seconds for m in loaded.timestamps] == [10.0, 42.5]
        assert loaded.sources[1].timestamps is None

    def test_absent_timestamps_not_serialized(self):
        result = ModerationResult(flagged=False, categories=[], category_scores={}, provider="openai")

        assert "timestamps" not in result.to_dict()
        assert result.markers == []

    def test_legacy_marker_key(self):
        marker = TimeMarker.from_dict({"timeOffset": 45, "categories": ["sexual_content"], "confidence": 0.95})

        assert marker.time_offset_seconds == 45.0


class TestModerationState:
    """Tests for the per-item state machine."""

    def test_default_is_pending(self):
        state = ModerationState.from_dict(None)

        assert state.status == ModerationStatus.PENDING
        assert state.result is None

    def test_automatic_path(self, video_result):
        state = ModerationState()

        state.begin()
        assert state.status == ModerationStatus.ANALYZING
        state.complete(video_result)

        assert state.status == ModerationStatus.COMPLETED
        assert state.result is video_result
        assert state.updated_at is not None

    def test_completed_requires_explicit_rerun(self, completed_state):
        assert not completed_state.can_transition(ModerationStatus.ANALYZING)
        with pytest.raises(InvalidTransitionError):
            completed_state.begin()

        completed_state.begin(explicit=True)

        assert completed_state.status == ModerationStatus.ANALYZING
        assert completed_state.result is None
        assert completed_state.provider_errors == {}

    def test_failed_requires_explicit_rerun(self):
        state = ModerationState()
        state.begin()
        state.fail("All providers failed")

        assert state.result is None
        assert state.error == "All providers failed"
        assert not state.can_transition(ModerationStatus.ANALYZING)
        assert state.can_transition(ModerationStatus.ANALYZING, explicit=True)

    def test_cannot_skip_analyzing(self, video_result):
        with pytest.raises(InvalidTransitionError):
            ModerationState().complete(video_result)

    def test_result_only_when_completed(self, video_result):
        with pytest.raises(ValueError):
            ModerationState(status=ModerationStatus.FAILED, result=video_result)
        with pytest.raises(ValueError):
            ModerationState(status=ModerationStatus.COMPLETED)

    def test_dict_round_trip(self, completed_state):
        loaded = ModerationState.from_dict(json.loads(json.dumps(completed_state.to_dict())))

        assert loaded == completed_state


class TestJsonModerationStore:
    """Tests for the JSON file store."""

    @pytest.fixture
    def store(self, tmp_path):
        return JsonModerationStore(data_dir=str(tmp_path))

    def test_absent_item_is_pending(self, store):
        state = asyncio.run(store.load("missing"))

        assert state.status == ModerationStatus.PENDING

    def test_round_trip(self, store, completed_state):
        asyncio.run(store.save("item-1", completed_state))

        loaded = asyncio.run(store.load("item-1"))

        assert loaded == completed_state
        assert [m.time_offset_seconds for m in loaded.result.timestamps] == [10.0, 42.5]

    def test_file_layout(self, store, completed_state):
        store.save_sync("item-1", completed_state)

        data = json.loads(store.results_file.read_text())

        assert data["version"] == "1.0"
        assert data["results"]["item-1"]["status"] == "completed"

    def test_delete(self, store, completed_state):
        store.save_sync("item-1", completed_state)

        assert store.delete("item-1") is True
        assert store.delete("item-1") is False
        assert store.load_sync("item-1").status == ModerationStatus.PENDING


class TestSqlModerationStore:
    """Tests for the SQL store."""

    @pytest.fixture
    def store(self, session_factory):
        session = session_factory()
        ContentItemRepository(session).create(ContentItem(id="item-1", title="clip"))
        session.close()
        return SqlModerationStore(session_factory)

    def test_absent_item_is_pending(self, store):
        assert asyncio.run(store.load("item-1")).status == ModerationStatus.PENDING

    def test_round_trip(self, store, completed_state):
        asyncio.run(store.save("item-1", completed_state))

        loaded = asyncio.run(store.load("item-1"))

        assert loaded == completed_state
        assert loaded.provider_errors == {"azure": "[azure] moderate-azure returned 503"}

    def test_overwrite(self, store, completed_state):
        store.save_sync("item-1", completed_state)
        completed_state.begin(explicit=True)
        store.save_sync("item-1", completed_state)

        loaded = store.load_sync("item-1")

        assert loaded.status == ModerationStatus.ANALYZING
        assert loaded.result is None

    def test_delete_keeps_item(self, store, session_factory, completed_state):
        store.save_sync("item-1", completed_state)

        assert store.delete("item-1") is True
        assert store.delete("item-1") is False
        assert store.load_sync("item-1").status == ModerationStatus.PENDING

        session = session_factory()
        try:
            assert ContentItemRepository(session).get("item-1") is not None
        finally:
            session.close()

    def test_unknown_item_rejected(self, store, completed_state):
        with pytest.raises(KeyError):
            store.save_sync("nope", completed_state)

    def test_list_by_status(self, store, session_factory, completed_state):
        store.save_sync("item-1", completed_state)

        session = session_factory()
        try:
            records = ModerationRepository(session).list_by_status(ModerationStatus.COMPLETED)
            assert [r.item_id for r in records] == ["item-1"]
        finally:
            session.close()
