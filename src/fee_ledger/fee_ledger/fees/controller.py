from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, current_app, jsonify, request, session

from ..common.datetime_utils import parse_iso_date, start_of_day_utc
from ..core.exceptions import AlreadyExistsError, NotFoundError, StoreError, ValidationError
from ..container import Container
from .model import FeeStructure, NewPayment
from .serialization import payment_to_doc, record_to_doc
from .service import RawScholarship

logger = logging.getLogger(__name__)


def _fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def _object(value, field_name: str) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValidationError(f"{field_name} must be an object")
    return value


def _flag(value, field_name: str) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"true", "false"}:
        return value.strip().lower() == "true"
    raise ValidationError(f"{field_name} must be true or false")


def _raw_scholarship(data) -> RawScholarship:
    data = _object(data, "scholarship")
    return RawScholarship(
        has_scholarship=_flag(data.get("hasScholarship"), "hasScholarship"),
        type=data.get("type"),
        percentage=data.get("percentage"),
        description=data.get("description"),
    )


def register(app: Flask, container: Container) -> None:
    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return _fail("Login required", 401)
            return view(*args, **kwargs)

        return wrapper

    def ledger_errors(view):
        """Map ledger exceptions to JSON error responses."""

        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except ValidationError as e:
                return _fail(str(e), 400)
            except NotFoundError as e:
                return _fail(str(e), 404)
            except AlreadyExistsError as e:
                return _fail(str(e), 409)
            except StoreError as e:
                logger.exception("Fee store failure on %s", request.path)
                return _fail(str(e), 500)

        return wrapper

    def _acting_user() -> tuple[str, str]:
        return str(session["user_id"]), str(session.get("name") or session["user_id"])

    @app.route("/api/fees", methods=["GET"], endpoint="fees_list")
    @ledger_errors
    def fees_list():
        student_id = request.args.get("studentId")
        if student_id:
            record = container.fee_query_service.get_record(student_id)
            records = [record] if record else []
        else:
            records = container.fee_query_service.list_records(
                cohort=request.args.get("cohort") or None,
                status=request.args.get("status") or None,
            )
        return jsonify({"success": True, "fees": [record_to_doc(r) for r in records]})

    @app.route("/api/fees", methods=["POST"], endpoint="fees_initialize")
    @login_required
    @ledger_errors
    def fees_initialize():
        data = _object(request.get_json(silent=True), "Request body")
        fs = _object(data.get("feeStructure"), "feeStructure")
        installments = _object(fs.get("installments"), "feeStructure.installments")

        try:
            enrollment = data.get("enrollmentDate")
            enrollment_date = parse_iso_date(enrollment) if enrollment else None
        except ValueError:
            raise ValidationError("enrollmentDate must be YYYY-MM-DD")

        fee_structure = FeeStructure.create(
            full_amount=fs.get("fullAmount"),
            currency=fs.get("currency") or current_app.config["DEFAULT_CURRENCY"],
            payment_plan=fs.get("paymentPlan") or "full",
            installment_count=installments.get("count"),
        )
        record = container.fee_service.initialize(
            student_id=data.get("studentId", ""),
            student_name=data.get("studentName", ""),
            cohort=data.get("cohort", ""),
            email=data.get("email", ""),
            fee_structure=fee_structure,
            scholarship=_raw_scholarship(data.get("scholarship")),
            enrollment_date=start_of_day_utc(enrollment_date) if enrollment_date else None,
        )
        return jsonify({"success": True, "fee": record_to_doc(record)}), 201

    @app.route("/api/fees/statistics", methods=["GET"], endpoint="fees_statistics")
    @ledger_errors
    def fees_statistics():
        stats = container.fee_report_service.statistics(cohort=request.args.get("cohort") or None)
        return jsonify({"success": True, "statistics": stats.to_dict()})

    @app.route("/api/fees/<student_id>", methods=["GET"], endpoint="fees_detail")
    @ledger_errors
    def fees_detail(student_id: str):
        record = container.fee_query_service.get_record(student_id)
        if not record:
            return _fail("Fee record not found", 404)
        return jsonify({"success": True, "fee": record_to_doc(record)})

    @app.route("/api/fees/<student_id>/payment", methods=["POST"], endpoint="fees_record_payment")
    @login_required
    @ledger_errors
    def fees_record_payment(student_id: str):
        data = _object(request.get_json(silent=True), "Request body")
        recorded_by, recorded_by_name = _acting_user()
        record, payment = container.fee_service.record_payment(
            student_id,
            NewPayment(
                amount=data.get("amount"),
                method=data.get("method") or "",
                reference=data.get("reference"),
                notes=data.get("notes"),
                recorded_by=recorded_by,
                recorded_by_name=recorded_by_name,
            ),
        )
        return jsonify({"success": True, "fee": record_to_doc(record), "payment": payment_to_doc(payment)})

    @app.route("/api/fees/<student_id>/scholarship", methods=["PUT"], endpoint="fees_update_scholarship")
    @login_required
    @ledger_errors
    def fees_update_scholarship(student_id: str):
        data = _object(request.get_json(silent=True), "Request body")
        updated_by, _ = _acting_user()
        record = container.fee_service.update_scholarship(
            student_id,
            _raw_scholarship(data),
            updated_by=updated_by,
        )
        return jsonify({"success": True, "fee": record_to_doc(record)})

