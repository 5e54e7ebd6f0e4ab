from ..extensions import db
from .base import YearScopedMixin, TimestampMixin

STATUSES = ("draft", "submitted", "under_review", "accepted", "rejected")
VALIDITY_STATUSES = ("valid", "invalid")


class Application(db.Model, YearScopedMixin, TimestampMixin):
    """Applicant record as far as evaluation is concerned.

    The application itself is owned by the registration flow; only the score
    and ranking columns are written here, and only by the aggregator and the
    ranking generator.
    """
    __tablename__ = "applications"

    id = db.Column(db.Integer, primary_key=True)
    # YearScopedMixin: year
    # anonymized 3-digit public identifier shown to evaluators
    candidate_id = db.Column(db.String(8), nullable=False)
    email = db.Column(db.String(254))
    selected_institution_id = db.Column(db.Integer, db.ForeignKey("institutions.id"), index=True)
    status = db.Column(db.String(20), nullable=False, default="draft", index=True)
    validity_status = db.Column(db.String(20))  # valid/invalid/NULL (not yet checked)
    gpa = db.Column(db.Float)
    submitted_at = db.Column(db.DateTime)

    # derived, never user-editable
    objective_score = db.Column(db.Float, nullable=False, default=0.0)
    interview_score = db.Column(db.Float)
    external_score = db.Column(db.Float)
    total_score = db.Column(db.Float, nullable=False, default=0.0)
    scores_updated_at = db.Column(db.DateTime)

    # ranking output
    rank_position = db.Column(db.Integer)
    advancing_to_interview = db.Column(db.Boolean, nullable=False, default=False)
    ranking_published_at = db.Column(db.DateTime)

    selected_institution = db.relationship("Institution", lazy="joined")

    __table_args__ = (
        db.UniqueConstraint('year', 'candidate_id', name='uq_applications_year_candidate'),
    )

    @property
    def is_rankable(self):
        return self.status == "submitted" and self.validity_status == "valid"

    def __repr__(self) -> str:
        return f"<Application id={self.id} candidate_id={self.candidate_id!r} total={self.total_score}>"
