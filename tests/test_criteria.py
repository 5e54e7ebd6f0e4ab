import pytest

from app.errors import ValidationError, NotFound
from app.extensions import db
from app.models import Criterion
from app.services import criteria as registry
from app.services import scoring

from conftest import YEAR


def test_create_appends_sort_order_per_year(app):
    a = registry.create_criterion(YEAR, "Academic Excellence", max_points=10, weight=0.3)
    b = registry.create_criterion(YEAR, "Motivation", max_points=10, weight=0.25)
    other = registry.create_criterion(YEAR + 1, "Motivation")
    assert (a.sort_order, b.sort_order) == (0, 1)
    assert other.sort_order == 0
    assert [c.name for c in registry.list_criteria(YEAR)] == ["Academic Excellence", "Motivation"]


def test_create_uses_defaults(app):
    c = registry.create_criterion(YEAR, "Research", max_points=None, weight=None)
    assert c.max_points == 10.0
    assert c.weight == 1.0
    assert c.category == "objective"
    assert c.active is True


@pytest.mark.parametrize("kwargs,field", [
    ({"max_points": -1}, "max_points"),
    ({"weight": -0.1}, "weight"),
    ({"category": "holistic"}, "category"),
    ({"weight": "heavy"}, "weight"),
])
def test_create_rejects_invalid_values(app, kwargs, field):
    with pytest.raises(ValidationError) as exc:
        registry.create_criterion(YEAR, "Bad", **kwargs)
    assert exc.value.field == field
    assert Criterion.query.count() == 0


def test_zero_weight_is_allowed(app):
    c = registry.create_criterion(YEAR, "Tiebreaker", weight=0)
    assert c.weight == 0.0


def test_duplicate_name_in_same_year_rejected(app):
    registry.create_criterion(YEAR, "Motivation")
    with pytest.raises(ValidationError):
        registry.create_criterion(YEAR, "Motivation")
    assert Criterion.query.count() == 1


def test_list_orders_by_sort_order_and_hides_inactive(app):
    a = registry.create_criterion(YEAR, "A")
    b = registry.create_criterion(YEAR, "B")
    c = registry.create_criterion(YEAR, "C")
    registry.update_criterion(a.id, sort_order=5)
    registry.deactivate_criterion(b.id)
    assert [x.name for x in registry.list_criteria(YEAR)] == ["C", "A"]
    assert [x.name for x in registry.list_criteria(YEAR, include_inactive=True)] == ["B", "C", "A"]


def test_update_coerces_sort_order(app):
    c = registry.create_criterion(YEAR, "A")
    with pytest.raises(ValidationError) as exc:
        registry.update_criterion(c.id, sort_order="x")
    assert exc.value.field == "sort_order"
    assert db.session.get(Criterion, c.id).sort_order == 0
    assert registry.update_criterion(c.id, sort_order="3").sort_order == 3


def test_update_rejects_unknown_and_negative_fields(app):
    c = registry.create_criterion(YEAR, "A")
    with pytest.raises(ValidationError):
        registry.update_criterion(c.id, year=2020)
    with pytest.raises(ValidationError):
        registry.update_criterion(c.id, max_points=-5)
    with pytest.raises(NotFound):
        registry.update_criterion(9999, weight=2)


def test_weight_change_applies_to_existing_scores(app, make_application):
    crit = registry.create_criterion(YEAR, "Academic Excellence", weight=0.5)
    app_row = make_application()
    scoring.submit_score(app_row.id, crit.id, 8)
    assert db.session.get(type(app_row), app_row.id).objective_score == pytest.approx(4.0)

    registry.update_criterion(crit.id, weight=2)
    refreshed = db.session.get(type(app_row), app_row.id)
    # stored score is untouched, only the weight applied to it changed
    assert refreshed.objective_score == pytest.approx(16.0)
    assert refreshed.total_score == pytest.approx(16.0)


def test_max_points_change_does_not_rescale_scores(app, make_application):
    crit = registry.create_criterion(YEAR, "Essay", max_points=10, weight=1)
    app_row = make_application()
    scoring.submit_score(app_row.id, crit.id, 9)
    registry.update_criterion(crit.id, max_points=5)
    assert db.session.get(type(app_row), app_row.id).objective_score == pytest.approx(9.0)


def test_deactivate_keeps_row_and_drops_contribution(app, make_application):
    keep = registry.create_criterion(YEAR, "Keep", weight=1)
    drop = registry.create_criterion(YEAR, "Drop", weight=1)
    app_row = make_application()
    scoring.submit_batch(app_row.id, [
        {"criterion_id": keep.id, "score": 4},
        {"criterion_id": drop.id, "score": 6},
    ])
    assert db.session.get(type(app_row), app_row.id).objective_score == pytest.approx(10.0)

    registry.deactivate_criterion(drop.id)
    assert db.session.get(Criterion, drop.id) is not None
    assert db.session.get(Criterion, drop.id).active is False
    assert db.session.get(type(app_row), app_row.id).objective_score == pytest.approx(4.0)
