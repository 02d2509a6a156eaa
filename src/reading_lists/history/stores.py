"""Baseline snapshot stores."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from reading_lists.history.base import Snapshot
from reading_lists.history.models import USER_HISTORY_BASELINE_NAME
from reading_lists.storage.common import utc_now
from reading_lists.storage.sqlmodel_models import DEFAULT_USER_ID, SnapshotBaseline


class InMemorySnapshotStore:
    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._snapshot: Snapshot | None = dict(initial) if initial is not None else None
        self.saves = 0

    def load(self) -> Snapshot | None:
        return dict(self._snapshot) if self._snapshot is not None else None

    def save(self, snapshot: Mapping[str, Any]) -> None:
        self._snapshot = dict(snapshot)
        self.saves += 1


class SQLiteSnapshotStore:
    """Baseline kept in ``snapshot_baselines`` so it survives process restarts."""

    def __init__(
        self,
        engine: Engine,
        *,
        user_id: str = DEFAULT_USER_ID,
        name: str = USER_HISTORY_BASELINE_NAME,
    ) -> None:
        self.engine = engine
        self.user_id = user_id
        self.name = name

    def load(self) -> Snapshot | None:
        with Session(self.engine) as session:
            row = self._find(session)
            if row is None:
                return None
            payload = json.loads(row.snapshot_json)
        if not isinstance(payload, dict):
            raise ValueError(f"Stored snapshot {self.name!r} is not a JSON object.")
        return payload

    def save(self, snapshot: Mapping[str, Any]) -> None:
        snapshot_json = json.dumps(dict(snapshot), ensure_ascii=False, sort_keys=True)
        with Session(self.engine) as session:
            row = self._find(session)
            if row is None:
                row = SnapshotBaseline(
                    name=self.name,
                    user_id=self.user_id,
                    snapshot_json=snapshot_json,
                    updated_at=utc_now(),
                )
            else:
                row.snapshot_json = snapshot_json
                row.updated_at = utc_now()
            session.add(row)
            session.commit()

    def clear(self) -> None:
        with Session(self.engine) as session:
            row = self._find(session)
            if row is not None:
                session.delete(row)
                session.commit()

    def _find(self, session: Session) -> SnapshotBaseline | None:
        return session.exec(
            select(SnapshotBaseline).where(
                SnapshotBaseline.name == self.name,
                SnapshotBaseline.user_id == self.user_id,
            ),
        ).one_or_none()
