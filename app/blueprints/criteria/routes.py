from flask import jsonify, request
from . import bp
from .forms import CriterionForm, CriterionUpdateForm
from ...services import criteria as registry
from ...utils.decorators import admin_required
from ...utils.http import form_error_response, json_body, require_int


@bp.get("")
@admin_required
def list_criteria():
    year = require_int(request.args.get("year"), "year")
    include_inactive = request.args.get("include_inactive") in ("1", "true", "yes")
    items = registry.list_criteria(year, include_inactive=include_inactive)
    return jsonify({"year": year, "items": [c.to_dict() for c in items]})


@bp.post("")
@admin_required
def create_criterion():
    form = CriterionForm()
    if not form.validate_on_submit():
        return form_error_response(form)
    crit = registry.create_criterion(
        year=form.year.data,
        name=form.name.data,
        max_points=form.max_points.data,
        weight=form.weight.data,
        category=form.category.data,
        display_name=form.display_name.data or None,
    )
    return jsonify(crit.to_dict()), 201


@bp.get("/<int:criterion_id>")
@admin_required
def get_criterion(criterion_id):
    return jsonify(registry.get_criterion(criterion_id).to_dict())


@bp.patch("/<int:criterion_id>")
@admin_required
def update_criterion(criterion_id):
    payload = json_body()
    form = CriterionUpdateForm()
    if not form.validate_on_submit():
        return form_error_response(form)
    fields = {name: getattr(form, name).data for name in registry.EDITABLE_FIELDS if name in payload}
    crit = registry.update_criterion(criterion_id, **fields)
    return jsonify(crit.to_dict())


@bp.post("/<int:criterion_id>/deactivate")
@admin_required
def deactivate_criterion(criterion_id):
    crit = registry.deactivate_criterion(criterion_id)
    return jsonify(crit.to_dict())
