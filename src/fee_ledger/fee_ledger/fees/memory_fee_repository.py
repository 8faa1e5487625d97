from __future__ import annotations

import threading
from dataclasses import replace
from typing import Optional, Sequence

from ..core.enums import FeeStatus
from .model import StudentFeeRecord
from .repository import FeeRecordRepository, Mutation
from .serialization import record_from_doc, record_to_doc
from .signals import fee_records_changed


class InMemoryFeeRepository(FeeRecordRepository):
    """Process-local document store.

    Documents are kept serialized, keyed by student id. modify() holds a lock per
    student id so concurrent writers for one student are applied one after the other.
    """

    def __init__(self):
        self._docs: dict[str, dict] = {}
        self._guard = threading.Lock()
        self._record_locks: dict[str, threading.Lock] = {}

    def _lock_for(self, student_id: str) -> threading.Lock:
        with self._guard:
            lock = self._record_locks.get(student_id)
            if lock is None:
                lock = threading.Lock()
                self._record_locks[student_id] = lock
            return lock

    def get(self, student_id: str) -> Optional[StudentFeeRecord]:
        with self._guard:
            doc = self._docs.get(student_id)
        return record_from_doc(doc) if doc else None

    def create(self, record: StudentFeeRecord) -> bool:
        with self._guard:
            if record.student_id in self._docs:
                return False
            self._docs[record.student_id] = record_to_doc(record)
        fee_records_changed.send(self, student_id=record.student_id)
        return True

    def modify(self, student_id: str, mutate: Mutation) -> Optional[StudentFeeRecord]:
        with self._lock_for(student_id):
            current = self.get(student_id)
            if current is None:
                return None
            changes = mutate(current)
            updated = replace(current, **changes, version=current.version + 1)
            with self._guard:
                self._docs[student_id] = record_to_doc(updated)
        fee_records_changed.send(self, student_id=student_id)
        return updated

    def list(
        self,
        *,
        cohort: Optional[str] = None,
        status: Optional[FeeStatus] = None,
    ) -> Sequence[StudentFeeRecord]:
        with self._guard:
            docs = list(self._docs.values())
        records = [record_from_doc(d) for d in docs]
        if cohort is not None:
            records = [r for r in records if r.cohort == cohort]
        if status is not None:
            records = [r for r in records if r.status == status]
        records.sort(key=lambda r: (r.student_name, r.student_id))
        return records
