from ..extensions import db
from .base import YearScopedMixin, TimestampMixin


class Institution(db.Model, YearScopedMixin, TimestampMixin):
    __tablename__ = "institutions"

    id = db.Column(db.Integer, primary_key=True)
    # YearScopedMixin: year
    name = db.Column(db.String(200), nullable=False)
    # seats offered for the year; the top N ranked applicants advance to interview
    available_spots = db.Column(db.Integer, nullable=False, default=0)
    # seats already taken by accepted applicants, only ever moved by a conditional UPDATE
    filled_spots = db.Column(db.Integer, nullable=False, default=0)
    active = db.Column(db.Boolean, nullable=False, default=True)

    __table_args__ = (
        db.CheckConstraint('available_spots >= 0', name='ck_institutions_available_spots'),
        db.CheckConstraint('filled_spots >= 0', name='ck_institutions_filled_spots'),
    )

    def __repr__(self) -> str:
        return f"<Institution id={self.id} name={self.name!r} spots={self.available_spots}>"
