"""
Tests for feedback draft persistence.
"""

import json
import logging
import stat

import pytest
from pydantic import ValidationError

from interviewslots.domain.exceptions import DraftValidationError
from interviewslots.services.drafts import (
    DRAFT_KEY_PREFIX,
    FeedbackDraft,
    FeedbackDraftKeeper,
    InMemoryDraftStore,
    JsonFileDraftStore,
)

LONG_FEEDBACK = "Strong problem solving, explained trade-offs clearly and wrote clean code."


class TestFeedbackDraft:
    """Tests for the FeedbackDraft model."""

    def test_defaults(self):
        """Test a fresh form starts neutral."""
        draft = FeedbackDraft()

        assert draft.overall_score == 5
        assert draft.recommendation == "pending"
        assert draft.feedback == ""

    def test_score_range(self):
        """Test scores are limited to 1..10."""
        with pytest.raises(ValidationError):
            FeedbackDraft(overall_score=11)
        with pytest.raises(ValidationError):
            FeedbackDraft(technical_skills=0)

    def test_recommendation_values(self):
        """Test only known recommendations are accepted."""
        with pytest.raises(ValidationError):
            FeedbackDraft(recommendation="maybe")

    def test_short_feedback_not_ready(self):
        """Test feedback needs a minimum length."""
        draft = FeedbackDraft(feedback="Good.")

        assert not draft.ready_to_submit()
        assert "at least 50 characters" in draft.validation_errors()[0]
        assert FeedbackDraft(feedback=LONG_FEEDBACK).ready_to_submit()


class TestFeedbackDraftKeeper:
    """Tests for FeedbackDraftKeeper."""

    def test_save_and_load(self):
        """Test a saved draft is restored unchanged."""
        store = InMemoryDraftStore()
        keeper = FeedbackDraftKeeper(store)
        draft = FeedbackDraft(overall_score=8, recommendation="hire", feedback="Partial")

        keeper.save(17, draft)

        assert store.keys() == [f"{DRAFT_KEY_PREFIX}17"]
        assert keeper.load(17) == draft

    def test_drafts_are_per_interview(self):
        """Test drafts do not leak between interviews."""
        keeper = FeedbackDraftKeeper(InMemoryDraftStore())
        keeper.save(1, FeedbackDraft(feedback="first"))

        assert keeper.load(2) is None
        assert keeper.load_or_new(2) == FeedbackDraft()

    def test_corrupt_draft_is_discarded(self, caplog):
        """Test an unreadable draft is removed instead of raising."""
        store = InMemoryDraftStore()
        store.set(FeedbackDraftKeeper.key_for(5), "{not json")
        keeper = FeedbackDraftKeeper(store)

        with caplog.at_level(logging.WARNING, logger="interviewslots.services.drafts"):
            assert keeper.load(5) is None

        assert "Discarding unreadable draft for interview 5" in caplog.text
        assert store.keys() == []

    def test_submit_clears_draft(self):
        """Test a successful submit removes the draft."""
        keeper = FeedbackDraftKeeper(InMemoryDraftStore())
        draft = FeedbackDraft(feedback=LONG_FEEDBACK)
        keeper.save(3, draft)
        submitted = []

        keeper.submit(3, draft, submitted.append)

        assert submitted == [draft]
        assert keeper.load(3) is None

    def test_failed_submit_keeps_draft(self):
        """Test the draft survives when the hand-over fails."""
        keeper = FeedbackDraftKeeper(InMemoryDraftStore())
        draft = FeedbackDraft(feedback=LONG_FEEDBACK)
        keeper.save(3, draft)

        def failing(_draft):
            raise ConnectionError("server unavailable")

        with pytest.raises(ConnectionError):
            keeper.submit(3, draft, failing)

        assert keeper.load(3) == draft

    def test_invalid_submit_rejected(self):
        """Test short feedback is not handed over."""
        keeper = FeedbackDraftKeeper(InMemoryDraftStore())
        submitted = []

        with pytest.raises(DraftValidationError):
            keeper.submit(3, FeedbackDraft(feedback="too short"), submitted.append)

        assert submitted == []


class TestJsonFileDraftStore:
    """Tests for the file-backed draft store."""

    def test_round_trip_on_disk(self, tmp_path):
        """Test drafts persist across store instances."""
        path = tmp_path / "drafts.json"
        FeedbackDraftKeeper(JsonFileDraftStore(path)).save(9, FeedbackDraft(cultural_fit=7))

        restored = FeedbackDraftKeeper(JsonFileDraftStore(path)).load(9)

        assert restored.cultural_fit == 7
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_delete(self, tmp_path):
        """Test deleting one key keeps the others."""
        store = JsonFileDraftStore(tmp_path / "drafts.json")
        store.set("a", "1")
        store.set("b", "2")

        store.delete("a")
        store.delete("missing")

        assert store.get("a") is None
        assert store.get("b") == "2"

    def test_missing_file(self, tmp_path):
        """Test a missing file behaves as empty."""
        assert JsonFileDraftStore(tmp_path / "none.json").get("x") is None

    def test_corrupt_file(self, tmp_path):
        """Test a corrupt file is treated as empty and then overwritten."""
        path = tmp_path / "drafts.json"
        path.write_text("not json", encoding="utf-8")
        store = JsonFileDraftStore(path)

        assert store.get("x") is None

        store.set("x", "1")
        assert json.loads(path.read_text(encoding="utf-8")) == {"x": "1"}
