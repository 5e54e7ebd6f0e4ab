from flask import jsonify, request
from . import bp
from .forms import InterviewerForm, InterviewerUpdateForm
from ...services import magic_link
from ...utils.decorators import admin_required
from ...utils.http import form_error_response, json_body, require_int


def _with_link(interviewer):
    out = interviewer.to_dict(include_token=True)
    out["access_link"] = magic_link.access_link(interviewer) if interviewer.access_token else None
    return out


@bp.get("")
@admin_required
def list_interviewers():
    year = require_int(request.args.get("year"), "year")
    return jsonify({"year": year, "items": [i.to_dict() for i in magic_link.list_interviewers(year)]})


@bp.post("")
@admin_required
def create_interviewer():
    form = InterviewerForm()
    if not form.validate_on_submit():
        return form_error_response(form)
    interviewer = magic_link.create_interviewer(
        year=form.year.data,
        name=form.name.data,
        email=form.email.data,
        institution=form.institution.data,
        specialty=form.specialty.data,
    )
    return jsonify(_with_link(interviewer)), 201


@bp.get("/<int:interviewer_id>")
@admin_required
def get_interviewer(interviewer_id):
    return jsonify(_with_link(magic_link.get_interviewer(interviewer_id)))


@bp.patch("/<int:interviewer_id>")
@admin_required
def update_interviewer(interviewer_id):
    payload = json_body()
    form = InterviewerUpdateForm()
    if not form.validate_on_submit():
        return form_error_response(form)
    fields = {name: getattr(form, name).data for name in magic_link.PROFILE_FIELDS if name in payload}
    interviewer = magic_link.update_interviewer(interviewer_id, **fields)
    return jsonify(interviewer.to_dict())


@bp.post("/<int:interviewer_id>/regenerate-token")
@admin_required
def regenerate_token(interviewer_id):
    return jsonify(_with_link(magic_link.regenerate_token(interviewer_id)))


@bp.post("/<int:interviewer_id>/deactivate")
@admin_required
def deactivate(interviewer_id):
    return jsonify(magic_link.deactivate_interviewer(interviewer_id).to_dict())


@bp.post("/<int:interviewer_id>/reactivate")
@admin_required
def reactivate(interviewer_id):
    return jsonify(_with_link(magic_link.reactivate_interviewer(interviewer_id)))


@bp.post("/<int:interviewer_id>/send-link")
@admin_required
def send_link(interviewer_id):
    n = magic_link.send_access_link(interviewer_id)
    return jsonify({"notification_id": n.id, "sent_to": n.sent_to}), 202
