from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional, Tuple

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_iso_date, format_timestamp
from ..common.validators import optional_text, optional_timestamp, require_iso_date
from ..container import Container
from ..core.enums import ChartGranularity, PresetRange, PunchField
from ..core.exceptions import (
    DomainError,
    InvalidTimeRange,
    InvalidTransition,
    NoActiveSession,
    NotFound,
    StorageIOError,
    ValidationError,
)
from ..records.codec import record_to_dict
from ..records.model import NewPunch, PunchUpdate
from ..session.state_machine import TodaySummary
from ..stats.ranges import DateRange
from .runner import LoopRunner

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (NotFound, 404),
    (InvalidTransition, 409),
    (NoActiveSession, 409),
    (StorageIOError, 503),
    (InvalidTimeRange, 400),
    (ValidationError, 400),
)

# JSON body keys accepted by the record edit endpoints
_BODY_FIELDS = {
    "date": PunchField.DATE,
    "punchIn": PunchField.PUNCH_IN,
    "punchOut": PunchField.PUNCH_OUT,
    "notes": PunchField.NOTES,
}


def _today_to_dict(summary: TodaySummary, elapsed_seconds: int) -> dict:
    return {
        "date": format_iso_date(summary.today),
        "state": summary.state.value,
        "isWorking": summary.is_working,
        "currentRecordId": summary.current_record_id,
        "currentPunchInTime": format_timestamp(summary.current_punch_in_time),
        "elapsedSeconds": elapsed_seconds,
        "totalHours": summary.total_hours,
        "records": [record_to_dict(r) for r in summary.records],
    }


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("request body must be a JSON object")
    return data


def _parse_update(data: dict) -> PunchUpdate:
    changes: dict[str, Any] = {}
    for key, value in data.items():
        field = _BODY_FIELDS.get(key)
        if field is None:
            raise ValidationError(f"Unknown punch field: {key}")
        if field is PunchField.DATE:
            changes[field.value] = require_iso_date(value, key)
        elif field is PunchField.NOTES:
            changes[field.value] = optional_text(value, key)
        else:
            changes[field.value] = optional_timestamp(value, key)
    if not changes:
        raise ValidationError("Nothing to update")
    return PunchUpdate.of(**changes)


def _parse_range_args(default: Optional[PresetRange] = PresetRange.THIS_WEEK):
    preset = request.args.get("range")
    start = request.args.get("start")
    end = request.args.get("end")
    if start or end:
        return DateRange(require_iso_date(start, "start"), require_iso_date(end, "end"))
    if preset:
        try:
            return PresetRange(preset)
        except ValueError:
            raise ValidationError(f"Unknown range preset: {preset}")
    if default is None:
        raise ValidationError("range or start/end is required")
    return default


def register(app: Flask, container: Container, runner: LoopRunner) -> None:
    coordinator = container.coordinator

    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError) -> Tuple[Any, int]:
        status = next((code for kind, code in _STATUS_BY_ERROR if isinstance(e, kind)), 400)
        if status >= 500:
            logger.error("storage failure: %s", e)
        return jsonify({"success": False, "error": type(e).__name__, "message": str(e)}), status

    def _today_response(summary: TodaySummary):
        return jsonify({"success": True, "today": _today_to_dict(summary, coordinator.elapsed_seconds())})

    @app.route("/api/today", methods=["GET"], endpoint="today")
    def today():
        return _today_response(runner.run(coordinator.refresh_today()))

    @app.route("/api/punch-in", methods=["POST"], endpoint="punch_in")
    def punch_in():
        notes = optional_text(_json_body().get("notes"), "notes")
        return _today_response(runner.run(coordinator.punch_in(notes)))

    @app.route("/api/punch-out", methods=["POST"], endpoint="punch_out")
    def punch_out():
        notes = optional_text(_json_body().get("notes"), "notes")
        return _today_response(runner.run(coordinator.punch_out(notes)))

    @app.route("/api/session/reset", methods=["POST"], endpoint="reset_session")
    def reset_session():
        runner.run(coordinator.reset_state())
        return jsonify({"success": True})

    @app.route("/api/records", methods=["GET"], endpoint="list_records")
    def list_records():
        day = request.args.get("date")
        if day:
            records = runner.run(coordinator.query_day(require_iso_date(day, "date")))
        elif request.args.get("start") or request.args.get("end"):
            rng = _parse_range_args()
            records = runner.run(coordinator.query_range(rng.start, rng.end))
        else:
            records = runner.run(coordinator.query_all())
        return jsonify({"success": True, "records": [record_to_dict(r) for r in records]})

    @app.route("/api/records", methods=["POST"], endpoint="add_record")
    def add_record():
        data = _json_body()
        entry = NewPunch(
            date=require_iso_date(data.get("date"), "date"),
            punch_in=optional_timestamp(data.get("punchIn"), "punchIn"),
            punch_out=optional_timestamp(data.get("punchOut"), "punchOut"),
            notes=optional_text(data.get("notes"), "notes"),
        )
        record = runner.run(coordinator.add_record(entry))
        return jsonify({"success": True, "record": record_to_dict(record)}), 201

    @app.route("/api/records/<record_id>", methods=["PATCH"], endpoint="update_record")
    def update_record(record_id: str):
        record = runner.run(coordinator.update_record(record_id, _parse_update(_json_body())))
        return jsonify({"success": True, "record": record_to_dict(record)})

    @app.route("/api/records/<record_id>", methods=["DELETE"], endpoint="delete_record")
    def delete_record(record_id: str):
        runner.run(coordinator.delete_record(record_id))
        return jsonify({"success": True})

    @app.route("/api/records", methods=["DELETE"], endpoint="clear_records")
    def clear_records():
        runner.run(coordinator.clear_all())
        return jsonify({"success": True})

    @app.route("/api/stats", methods=["GET"], endpoint="stats")
    def stats():
        rng = coordinator.resolve_range(_parse_range_args())
        result = runner.run(coordinator.get_stats(rng))
        return jsonify({"success": True, "range": rng.to_dict(), "stats": result.to_dict()})

    @app.route("/api/stats/presets", methods=["GET"], endpoint="preset_stats")
    def preset_stats():
        result = runner.run(coordinator.get_all_preset_stats())
        return jsonify({"success": True, "stats": {p.value: s.to_dict() for p, s in result.items()}})

    @app.route("/api/chart", methods=["GET"], endpoint="chart")
    def chart():
        raw = request.args.get("granularity", ChartGranularity.WEEK.value)
        try:
            granularity = ChartGranularity(raw)
        except ValueError:
            raise ValidationError(f"Unknown granularity: {raw}")
        if granularity is ChartGranularity.YEAR and not (request.args.get("range") or request.args.get("start")):
            try:
                year = int(request.args.get("year") or coordinator.today().year)
            except ValueError:
                raise ValidationError("year must be an integer")
            points = runner.run(coordinator.get_monthly_totals(year))
        else:
            points = runner.run(coordinator.get_chart_series(_parse_range_args(), granularity))
        return jsonify({"success": True, "granularity": granularity.value, "series": [p.to_dict() for p in points]})

    @app.route("/api/export", methods=["GET"], endpoint="export_records")
    def export_records():
        payload = runner.run(coordinator.export_records())
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        return app.response_class(
            payload,
            mimetype="application/json",
            headers={"Content-Disposition": f"attachment; filename=punch_log_{stamp}.json"},
        )

    @app.route("/api/import", methods=["POST"], endpoint="import_records")
    def import_records():
        replace = request.args.get("replace", "0").lower() in {"1", "true", "yes"}
        count = runner.run(coordinator.import_records(request.get_data(as_text=True), replace=replace))
        return jsonify({"success": True, "imported": count})
