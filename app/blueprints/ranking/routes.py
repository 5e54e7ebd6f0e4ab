from io import BytesIO
from flask import jsonify, request, send_file
from . import bp
from ...services import ranking
from ...utils.decorators import admin_required, staff_required
from ...utils.http import json_body, require_int, optional_int


@bp.get("")
@staff_required
def view_ranking():
    year = require_int(request.args.get("year"), "year")
    institution_id = optional_int(request.args.get("institution_id"), "institution_id")
    groups = ranking.generate_ranking(year, institution_id=institution_id, persist=False)
    return jsonify({"year": year, "institutions": groups})


@bp.post("/generate")
@admin_required
def generate_ranking():
    payload = json_body()
    year = require_int(payload.get("year"), "year")
    institution_id = optional_int(payload.get("institution_id"), "institution_id")
    groups = ranking.generate_ranking(year, institution_id=institution_id, persist=True)
    return jsonify({"year": year, "institutions": groups})


@bp.post("/publish")
@admin_required
def publish_ranking():
    payload = json_body()
    year = require_int(payload.get("year"), "year")
    result = ranking.publish_ranking(year)
    result["year"] = year
    return jsonify(result)


@bp.get("/export.csv")
@staff_required
def export_ranking():
    year = require_int(request.args.get("year"), "year")
    institution_id = optional_int(request.args.get("institution_id"), "institution_id")
    data = ranking.export_ranking_csv(year, institution_id=institution_id).encode("utf-8")
    bio = BytesIO(data)
    bio.seek(0)
    return send_file(bio, as_attachment=True, download_name=f"ranking_{year}.csv", mimetype="text/csv")


@bp.post("/applications/<int:application_id>/accept")
@admin_required
def accept_application(application_id):
    app_row = ranking.accept_application(application_id)
    return jsonify({"application_id": app_row.id, "status": app_row.status})
