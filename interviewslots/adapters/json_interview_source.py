"""
Interview source backed by a JSON file, for the CLI and for demos.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from pendulum import Date

from ..domain.models import Interview, as_date

logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = Path(__file__).parent / "mock_interviews.json"


class JsonInterviewSource:
    """
    Loads interview records from a JSON file.

    The file holds either a list of interview objects or an object with an
    ``interviews`` list, using the field names of the upstream API
    (``scheduled_date``, ``scheduled_time``, ``duration_minutes``, ``status``).
    Records that cannot be read are skipped with a warning.
    """

    def __init__(self, data_file: Optional[Path] = None):
        self.data_file = Path(data_file) if data_file else DEFAULT_DATA_FILE
        self.interviews = self._load_interviews()

    def _load_interviews(self) -> List[Interview]:
        """Load interview records from the JSON file."""
        if not self.data_file.exists():
            raise FileNotFoundError(f"Interview data file not found: {self.data_file}")

        with open(self.data_file, "r", encoding="utf-8") as f:
            data = json.load(f)

        records: List[Dict[str, Any]] = data.get("interviews", []) if isinstance(data, dict) else data
        if not isinstance(records, list):
            raise ValueError(f"Expected a list of interviews in {self.data_file}")

        interviews: List[Interview] = []
        for index, record in enumerate(records):
            if not isinstance(record, dict):
                logger.warning("Skipping interview record #%d: not an object", index)
                continue
            try:
                interviews.append(Interview.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping interview record #%d: %s", index, e)
                continue

        return interviews

    async def list_interviews(self, start_date: Date, end_date: Date) -> List[Interview]:
        """
        Return interviews between the dates (inclusive).
        """
        start = as_date(start_date)
        end = as_date(end_date)
        return [i for i in self.interviews if start <= i.scheduled_date <= end]

    def save(self, interviews: List[Interview]) -> None:
        """Write the interviews back to the data file."""
        payload = {"interviews": [interview.to_dict() for interview in interviews]}
        with open(self.data_file, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
        self.interviews = list(interviews)
