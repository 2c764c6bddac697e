import json
import uuid
from ..extensions import db
from ..utils.dates import utcnow


class Form(db.Model):
    __tablename__ = "forms"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey("profiles.id"), nullable=False, index=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    questions_json = db.Column("questions", db.Text, nullable=False, default="[]")  # JSON list
    version = db.Column(db.Integer, nullable=False, default=1)
    created_at = db.Column(db.DateTime, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    owner = db.relationship("Profile", backref=db.backref("forms", lazy=True))
    responses = db.relationship(
        "FeedbackResponse",
        backref="form",
        lazy=True,
        cascade="all, delete-orphan",
    )

    @property
    def questions(self) -> list:
        return json.loads(self.questions_json or "[]")

    @questions.setter
    def questions(self, value):
        self.questions_json = json.dumps(value or [])

    def __repr__(self):
        return f"<Form {self.id} {self.title!r}>"
