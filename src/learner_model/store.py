# ABOUTME: Record stores that hand a learner's practice history to the engine.
# ABOUTME: Offers an in-memory store and a pandas-backed store loaded from table files.

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol, Union

import pandas as pd

from .features import RECORD_COLUMNS, records_from_frame
from .schemas import LearningRecord


class RecordStore(Protocol):
    def get_history(self, user_id: str) -> List[LearningRecord]:
        ...


class InMemoryRecordStore:
    """Dictionary-backed store, mostly for tests and demos."""

    def __init__(self, histories: Optional[Dict[str, Iterable[LearningRecord]]] = None):
        self._histories: Dict[str, List[LearningRecord]] = {
            user_id: list(records) for user_id, records in (histories or {}).items()
        }

    def add(self, user_id: str, record: LearningRecord) -> None:
        self._histories.setdefault(user_id, []).append(record)

    def user_ids(self) -> List[str]:
        return list(self._histories)

    def get_history(self, user_id: str) -> List[LearningRecord]:
        return list(self._histories.get(user_id, []))


class FrameRecordStore:
    """
    Store over a pandas table with a ``user_id`` column plus the record columns.

    Rows are converted lazily per user; malformed values are passed through so
    the engine can count and skip them.
    """

    def __init__(self, frame: pd.DataFrame):
        missing = [c for c in ["user_id"] + RECORD_COLUMNS if c not in frame.columns]
        if missing:
            raise ValueError(f"Records table is missing columns: {', '.join(missing)}")
        self.frame = frame

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "FrameRecordStore":
        path = Path(path)
        suffix = path.suffix.lower()
        if suffix == ".parquet":
            frame = pd.read_parquet(path)
        elif suffix == ".csv":
            frame = pd.read_csv(path, dtype={"user_id": str})
        elif suffix in (".json", ".jsonl"):
            frame = pd.read_json(path, lines=suffix == ".jsonl", dtype={"user_id": str})
        else:
            raise ValueError(f"Unsupported records file type: {path.suffix}")
        return cls(frame)

    def user_ids(self) -> List[str]:
        return [str(u) for u in self.frame["user_id"].drop_duplicates()]

    def get_history(self, user_id: str) -> List[LearningRecord]:
        return records_from_frame(self.frame, user_id=user_id)
