from __future__ import annotations

import json
from dataclasses import replace
from typing import Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.constants import FEES_TABLE
from ..core.enums import FeeStatus
from ..core.exceptions import StoreError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, load_json
from .model import StudentFeeRecord
from .repository import FeeRecordRepository, Mutation
from .serialization import record_from_doc, record_to_doc
from .signals import fee_records_changed


class MySQLFeeRepository(FeeRecordRepository):
    """One row per student: the full record as a JSON document plus the filter columns."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, student_id: str) -> Optional[StudentFeeRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT doc FROM {FEES_TABLE} WHERE student_id=%s", (student_id,))
            r = fetchone(cur)
            if not r:
                return None
            return record_from_doc(load_json(r["doc"]))

    def create(self, record: StudentFeeRecord) -> bool:
        created = True
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    f"""
                    INSERT INTO {FEES_TABLE}(student_id, student_name, cohort, status, version, doc)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        record.student_id,
                        record.student_name,
                        record.cohort,
                        record.status.value,
                        record.version,
                        json.dumps(record_to_doc(record)),
                    ),
                )
            except mysql.connector.IntegrityError as e:
                if e.errno != errorcode.ER_DUP_ENTRY:
                    raise
                # existing row is left as is
                created = False
        if created:
            fee_records_changed.send(self, student_id=record.student_id)
        return created

    def modify(self, student_id: str, mutate: Mutation) -> Optional[StudentFeeRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT doc, version FROM {FEES_TABLE} WHERE student_id=%s FOR UPDATE",
                (student_id,),
            )
            r = fetchone(cur)
            if not r:
                return None

            current = replace(record_from_doc(load_json(r["doc"])), version=int(r["version"]))
            changes = mutate(current)
            updated = replace(current, **changes, version=current.version + 1)

            cur.execute(
                f"""
                UPDATE {FEES_TABLE}
                SET student_name=%s, cohort=%s, status=%s, version=%s, doc=%s
                WHERE student_id=%s AND version=%s
                """,
                (
                    updated.student_name,
                    updated.cohort,
                    updated.status.value,
                    updated.version,
                    json.dumps(record_to_doc(updated)),
                    student_id,
                    current.version,
                ),
            )
            if cur.rowcount != 1:
                raise StoreError(f"Fee record {student_id} changed during update")

        fee_records_changed.send(self, student_id=student_id)
        return updated

    def list(
        self,
        *,
        cohort: Optional[str] = None,
        status: Optional[FeeStatus] = None,
    ) -> Sequence[StudentFeeRecord]:
        clauses: list[str] = []
        params: list[object] = []

        if cohort is not None:
            clauses.append("cohort=%s")
            params.append(cohort)
        if status is not None:
            clauses.append("status=%s")
            params.append(FeeStatus(status).value)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT doc FROM {FEES_TABLE}
                {where}
                ORDER BY student_name ASC, student_id ASC
                """,
                tuple(params),
            )
            rows = fetchall(cur)
            return [record_from_doc(load_json(r["doc"])) for r in rows]
