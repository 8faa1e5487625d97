from __future__ import annotations

from typing import Callable, Optional, Protocol, Sequence

from ..core.enums import FeeStatus
from .model import StudentFeeRecord

# Receives the current record under lock and returns the fields to change.
Mutation = Callable[[StudentFeeRecord], dict]


class FeeRecordRepository(Protocol):
    def get(self, student_id: str) -> Optional[StudentFeeRecord]:
        raise NotImplementedError

    def create(self, record: StudentFeeRecord) -> bool:
        """Insert the record if the student has none yet.

        Returns False (and writes nothing) when a record already exists.
        """

        raise NotImplementedError

    def modify(self, student_id: str, mutate: Mutation) -> Optional[StudentFeeRecord]:
        """Atomic read-modify-write of one record.

        ``mutate`` runs while the record is locked against concurrent modify()
        calls for the same student; the returned fields are merged into the
        record, ``version`` is bumped and the result persisted. Returns the new
        record, or None when the student has no record.
        """

        raise NotImplementedError

    def list(
        self,
        *,
        cohort: Optional[str] = None,
        status: Optional[FeeStatus] = None,
    ) -> Sequence[StudentFeeRecord]:
        """All records matching the equality filters, ordered by student name."""

        raise NotImplementedError
