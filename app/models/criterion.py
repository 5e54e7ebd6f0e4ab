from ..extensions import db
from .base import YearScopedMixin, TimestampMixin

CATEGORIES = ("objective", "subjective")


class Criterion(db.Model, YearScopedMixin, TimestampMixin):
    __tablename__ = "criteria"

    id = db.Column(db.Integer, primary_key=True)
    # YearScopedMixin: year
    name = db.Column(db.String(120), nullable=False)
    display_name = db.Column(db.String(200))
    max_points = db.Column(db.Float, nullable=False, default=10.0)
    weight = db.Column(db.Float, nullable=False, default=1.0)
    category = db.Column(db.String(20), nullable=False, default="objective")
    sort_order = db.Column(db.Integer, nullable=False, default=0)
    active = db.Column(db.Boolean, nullable=False, default=True)

    __table_args__ = (
        db.UniqueConstraint('year', 'name', name='uq_criteria_year_name'),
        db.CheckConstraint('max_points >= 0', name='ck_criteria_max_points'),
        db.CheckConstraint('weight >= 0', name='ck_criteria_weight'),
        db.CheckConstraint("category IN ('objective', 'subjective')", name='ck_criteria_category'),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "year": self.year,
            "name": self.name,
            "display_name": self.display_name or self.name,
            "max_points": self.max_points,
            "weight": self.weight,
            "category": self.category,
            "sort_order": self.sort_order,
            "active": self.active,
        }

    def __repr__(self) -> str:
        return f"<Criterion id={self.id} name={self.name!r} year={self.year}>"
