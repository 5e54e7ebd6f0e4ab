"""Criteria registry: the weighted scoring rubric of a program year."""
from flask import current_app
from ..extensions import db
from ..errors import ValidationError, NotFound
from ..models.criterion import Criterion, CATEGORIES
from ..utils.db import transaction
from .aggregator import recompute_year

EDITABLE_FIELDS = ("name", "display_name", "max_points", "weight", "category", "sort_order")
# fields whose change alters already computed totals
RECOMPUTE_FIELDS = {"weight", "category"}


def _non_negative(fields, key):
    if key not in fields or fields[key] is None:
        return
    try:
        value = float(fields[key])
    except (TypeError, ValueError):
        raise ValidationError(f"{key} must be a number", field=key)
    if value < 0:
        raise ValidationError(f"{key} must be non-negative", field=key, bound="min", limit=0)
    fields[key] = value


def _validate(fields):
    _non_negative(fields, "max_points")
    _non_negative(fields, "weight")
    if fields.get("sort_order") is not None:
        if isinstance(fields["sort_order"], bool):
            raise ValidationError("sort_order must be an integer", field="sort_order")
        try:
            fields["sort_order"] = int(fields["sort_order"])
        except (TypeError, ValueError):
            raise ValidationError("sort_order must be an integer", field="sort_order")
    if "category" in fields and fields["category"] not in CATEGORIES:
        raise ValidationError(f"category must be one of {', '.join(CATEGORIES)}", field="category")
    if "name" in fields:
        name = (fields["name"] or "").strip()
        if not name:
            raise ValidationError("name is required", field="name")
        fields["name"] = name


def _name_taken(year, name, exclude_id=None):
    q = Criterion.query.filter_by(year=year, name=name)
    if exclude_id is not None:
        q = q.filter(Criterion.id != exclude_id)
    return db.session.query(q.exists()).scalar()


def get_criterion(criterion_id):
    crit = db.session.get(Criterion, criterion_id)
    if crit is None:
        raise NotFound(f"criterion {criterion_id} not found")
    return crit


def list_criteria(year, include_inactive=False):
    q = Criterion.query.filter_by(year=year)
    if not include_inactive:
        q = q.filter(Criterion.active.is_(True))
    return q.order_by(Criterion.sort_order.asc(), Criterion.id.asc()).all()


def create_criterion(year, name, max_points=10, weight=1, category="objective", display_name=None):
    fields = {"name": name, "max_points": max_points, "weight": weight, "category": category}
    _validate(fields)
    with transaction():
        if _name_taken(year, fields["name"]):
            raise ValidationError(f"criterion {fields['name']!r} already exists for {year}", field="name")
        last = db.session.query(db.func.max(Criterion.sort_order)).filter(Criterion.year == year).scalar()
        crit = Criterion(
            year=year,
            name=fields["name"],
            display_name=display_name or None,
            max_points=fields["max_points"] if fields["max_points"] is not None else 10.0,
            weight=fields["weight"] if fields["weight"] is not None else 1.0,
            category=fields["category"],
            sort_order=(last + 1) if last is not None else 0,
            active=True,
        )
        db.session.add(crit)
    current_app.logger.info('criterion created id=%s year=%s name=%s', crit.id, year, crit.name)
    return crit


def update_criterion(criterion_id, **fields):
    """Merge the given fields into the criterion.

    Stored scores are never rescaled. A weight or category change is applied
    to every application of the year straight away because aggregation always
    reads the current weight.
    """
    unknown = set(fields) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(f"unknown field(s): {', '.join(sorted(unknown))}", field=sorted(unknown)[0])
    _validate(fields)
    with transaction():
        crit = get_criterion(criterion_id)
        if "name" in fields and _name_taken(crit.year, fields["name"], exclude_id=crit.id):
            raise ValidationError(f"criterion {fields['name']!r} already exists for {crit.year}", field="name")
        changed = set()
        for key, value in fields.items():
            if value is None and key in ("name", "max_points", "weight", "category", "sort_order"):
                continue
            if getattr(crit, key) != value:
                setattr(crit, key, value)
                changed.add(key)
        if changed & RECOMPUTE_FIELDS:
            db.session.flush()
            recompute_year(crit.year, commit=False)
    return crit


def deactivate_criterion(criterion_id):
    with transaction():
        crit = get_criterion(criterion_id)
        if crit.active:
            crit.active = False
            db.session.flush()
            # drop its contribution from objective_score right away
            recompute_year(crit.year, commit=False)
    current_app.logger.info('criterion deactivated id=%s year=%s', crit.id, crit.year)
    return crit
