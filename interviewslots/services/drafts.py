"""
Draft persistence for interview feedback forms.

In-progress feedback is kept in an injected key-value store so closing a
form by accident does not lose input.
"""

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Literal, Optional, Protocol

from pydantic import BaseModel, Field, ValidationError

from ..domain.exceptions import DraftValidationError

logger = logging.getLogger(__name__)

DRAFT_KEY_PREFIX = "interview-feedback-draft-"
MIN_FEEDBACK_LENGTH = 50


class DraftStore(Protocol):
    """Minimal key-value persistence port."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class FeedbackDraft(BaseModel):
    """Interviewer feedback as typed so far."""
    overall_score: int = Field(default=5, ge=1, le=10)
    recommendation: Literal["hire", "pending", "reject"] = "pending"
    feedback: str = ""
    strengths: str = ""
    weaknesses: str = ""
    technical_skills: int = Field(default=5, ge=1, le=10)
    communication_skills: int = Field(default=5, ge=1, le=10)
    cultural_fit: int = Field(default=5, ge=1, le=10)
    interviewer_notes: str = ""

    def validation_errors(self) -> List[str]:
        """Problems that block submission; empty when ready."""
        errors: List[str] = []
        if len(self.feedback.strip()) < MIN_FEEDBACK_LENGTH:
            errors.append(f"Feedback must be at least {MIN_FEEDBACK_LENGTH} characters long")
        return errors

    def ready_to_submit(self) -> bool:
        return not self.validation_errors()


class InMemoryDraftStore:
    """Dictionary-backed store, mainly for tests."""

    def __init__(self) -> None:
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._data)


class JsonFileDraftStore:
    """
    Stores all drafts in one JSON object on disk.

    The file is readable by its owner only.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not load drafts from %s: %s", self.path, e)
            return {}

        if not isinstance(data, dict):
            logger.warning("Ignoring malformed drafts file %s", self.path)
            return {}
        return data

    def _save(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        self.path.chmod(0o600)

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def delete(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)


class FeedbackDraftKeeper:
    """
    Loads, auto-saves and clears feedback drafts per interview.
    """

    def __init__(self, store: DraftStore):
        self._store = store

    @staticmethod
    def key_for(interview_id: Any) -> str:
        return f"{DRAFT_KEY_PREFIX}{interview_id}"

    def load(self, interview_id: Any) -> Optional[FeedbackDraft]:
        """
        Restore a saved draft.

        Undecodable drafts are removed and reported instead of raising.
        """
        key = self.key_for(interview_id)
        raw = self._store.get(key)
        if raw is None:
            return None

        try:
            return FeedbackDraft.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(
                "Discarding unreadable draft for interview %s: %d error(s)",
                interview_id,
                e.error_count(),
            )
            self._store.delete(key)
            return None

    def load_or_new(self, interview_id: Any) -> FeedbackDraft:
        return self.load(interview_id) or FeedbackDraft()

    def save(self, interview_id: Any, draft: FeedbackDraft) -> None:
        self._store.set(self.key_for(interview_id), draft.model_dump_json())

    def clear(self, interview_id: Any) -> None:
        self._store.delete(self.key_for(interview_id))

    def submit(
        self,
        interview_id: Any,
        draft: FeedbackDraft,
        on_submit: Callable[[FeedbackDraft], None],
    ) -> None:
        """
        Validate and hand the draft over; the draft is cleared only if
        ``on_submit`` returns without raising.

        Raises:
            DraftValidationError: If the draft is not ready to submit
        """
        errors = draft.validation_errors()
        if errors:
            raise DraftValidationError("; ".join(errors))

        on_submit(draft)
        self.clear(interview_id)
