from __future__ import annotations

import time

from flask import Flask, jsonify, request

from ..checkins.model import parse_check_in_request
from ..common.validators import require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from ..container import Container
from ..events.model import NewEvent
from ..insights.model import MemberMatchRequest
from ..notifications.stream import QueueObserver, stream_changes


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def _error(message: str, status: int):
        return jsonify({"status": "error", "message": message}), status

    def _json_body() -> dict:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        return data

    @app.errorhandler(NotFoundError)
    def handle_not_found(e: NotFoundError):
        return _error(str(e) or "Not found", 404)

    @app.errorhandler(ValidationError)
    def handle_validation(e: ValidationError):
        return _error(str(e), 400)

    # ===== CHECK-IN LOG =====

    @app.route("/api/checkin", methods=["POST"], endpoint="api_checkin")
    def api_checkin():
        check_in = parse_check_in_request(_json_body())
        message = service.record_check_in(check_in)
        return jsonify({"status": "success", "message": message})

    @app.route("/api/records", methods=["GET"], endpoint="api_records")
    def api_records():
        return jsonify({"records": [e.to_dict() for e in service.records()]})

    @app.route("/api/records", methods=["DELETE"], endpoint="api_records_clear")
    def api_records_clear():
        service.clear_records()
        return jsonify({"status": "success", "message": "All records cleared"})

    @app.route("/api/records/<int(signed=True):index>", methods=["DELETE"], endpoint="api_records_delete")
    def api_records_delete(index: int):
        service.delete_record(index)
        return jsonify({"status": "success", "message": "Record deleted"})

    # ===== EVENTS AND REPORTS =====

    @app.route("/api/events", methods=["POST"], endpoint="api_events_create")
    def api_events_create():
        event = service.create_event(NewEvent.from_dict(_json_body()))
        return jsonify(
            {
                "status": "success",
                "message": "Event created with all members set to absent",
                "event": event.to_dict(),
            }
        )

    @app.route("/api/events", methods=["GET"], endpoint="api_events_list")
    def api_events_list():
        return jsonify({"events": [e.to_dict() for e in service.events()]})

    @app.route("/api/events/current", methods=["GET"], endpoint="api_events_current")
    def api_events_current():
        event = service.current_event()
        if event is None:
            raise NotFoundError("No current event")
        return jsonify(event.to_dict())

    @app.route("/api/events/clear-all", methods=["DELETE"], endpoint="api_events_clear_all")
    def api_events_clear_all():
        service.clear_all()
        return jsonify({"status": "success", "message": "All events and attendance records cleared"})

    @app.route("/api/report", methods=["GET"], endpoint="api_report")
    def api_report():
        report = service.report()
        if report is None:
            raise NotFoundError("No current event")
        return jsonify(report.to_dict())

    @app.route("/api/export", methods=["GET"], endpoint="api_export")
    def api_export():
        return app.response_class(
            service.export_csv(),
            mimetype="text/csv",
            headers={"Content-Disposition": "attachment; filename=attendance.csv"},
        )

    # ===== ROSTER =====

    @app.route("/api/members", methods=["GET"], endpoint="api_members")
    def api_members():
        return jsonify({"members": service.members()})

    @app.route("/api/guests", methods=["GET"], endpoint="api_guests")
    def api_guests():
        return jsonify({"guests": service.guests(), "files": service.guest_files()})

    @app.route("/api/members/<name>/qr", methods=["GET"], endpoint="api_member_qr")
    def api_member_qr(name: str):
        return app.response_class(service.member_qr_png(name), mimetype="image/png")

    # ===== QR SCANS AND HISTORY =====

    @app.route("/api/attendance/scan", methods=["POST"], endpoint="api_attendance_scan")
    def api_attendance_scan():
        payload = _json_body().get("qrPayload")
        message = service.record_qr_scan(str(payload or ""))
        return jsonify({"message": message})

    @app.route("/api/attendance/member", methods=["GET"], endpoint="api_attendance_member")
    def api_attendance_member():
        name = request.args.get("name") or ""
        return jsonify([m.to_dict() for m in service.search_member_attendance(name)])

    @app.route("/api/attendance/event", methods=["GET"], endpoint="api_attendance_event")
    def api_attendance_event():
        event_date = request.args.get("date") or ""
        return jsonify([a.to_dict() for a in service.search_event_attendance(event_date)])

    # ===== LIVE UPDATES =====

    @app.route("/api/stream", methods=["GET"], endpoint="api_stream")
    def api_stream():
        observer = QueueObserver(
            maxsize=int(app.config["STREAM_QUEUE_SIZE"]),
            send_timeout=float(app.config["BROADCAST_SEND_TIMEOUT"]),
        )
        return app.response_class(
            stream_changes(container.notifier, observer),
            mimetype="text/event-stream",
            headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
        )

    # ===== INSIGHTS AND MATCHING =====

    @app.route("/api/insights/generate", methods=["POST"], endpoint="api_insights_generate")
    def api_insights_generate():
        data = _json_body()
        try:
            event_id = int(data.get("eventId"))
        except (TypeError, ValueError):
            raise ValidationError("eventId must be an integer")
        response = container.insight_service.generate(
            event_id, str(data.get("analysisType") or ""), now=container.clock()
        )
        return jsonify(response.to_dict())

    @app.route("/api/insights/<int:event_id>", methods=["GET"], endpoint="api_insights_list")
    def api_insights_list(event_id: int):
        return jsonify([r.to_dict() for r in container.insight_service.insights_for(event_id)])

    @app.route("/api/insights/<int:event_id>/retention-strategy", methods=["GET"], endpoint="api_insights_retention")
    def api_insights_retention(event_id: int):
        return jsonify({"eventId": event_id, "strategy": container.insight_service.retention_strategy(event_id)})

    @app.route("/api/insights/data-export/<int:event_id>", methods=["GET"], endpoint="api_insights_export")
    def api_insights_export(event_id: int):
        data = container.insight_service.export_ai_ready_data(event_id, now=container.clock())
        if data is None:
            return jsonify({"error": "Event not found"}), 404
        return jsonify(data)

    @app.route("/api/matching/members", methods=["POST"], endpoint="api_matching_members")
    def api_matching_members():
        result = container.insight_client.match_members(MemberMatchRequest.from_dict(_json_body()))
        provider = "error" if "error" in result else container.insight_client.model
        return jsonify({"matches": result, "provider": provider})

    @app.route("/api/matching/guest-analysis", methods=["POST"], endpoint="api_matching_guest_analysis")
    def api_matching_guest_analysis():
        data = _json_body()
        name = require_non_empty(str(data.get("guestName") or data.get("name") or ""), "guestName")
        return jsonify(container.insight_service.guest_match_analysis(name, str(data.get("profession") or "")))

    @app.route("/api/matching/health", methods=["GET"], endpoint="api_matching_health")
    def api_matching_health():
        return jsonify({"status": "ok", "service": "matching", "timestamp": str(int(time.time() * 1000))})
