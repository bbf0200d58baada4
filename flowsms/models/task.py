"""Project tasks, subtasks and task comments."""

from datetime import datetime, timezone

from flowsms.models import db, iso

TASK_STATUSES = ("todo", "in_progress", "review", "completed", "blocked")
TASK_PRIORITIES = ("low", "medium", "high", "urgent")

# Sort weight for priority ordering (urgent first)
PRIORITY_RANK = {"urgent": 3, "high": 2, "medium": 1, "low": 0}


def _now():
    return datetime.now(timezone.utc)


class Task(db.Model):
    """Unit of project work.

    ``completed_at`` is set exactly when ``status == "completed"``; use
    :meth:`set_status` rather than assigning ``status`` directly.
    """

    __tablename__ = "tasks"

    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(
        db.Integer,
        db.ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    phase_id = db.Column(
        db.Integer,
        db.ForeignKey("phases.id", ondelete="SET NULL"),
        nullable=True,
    )
    parent_id = db.Column(
        db.Integer,
        db.ForeignKey("tasks.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    title = db.Column(db.String(300), nullable=False)
    description = db.Column(db.Text, nullable=True)
    status = db.Column(
        db.String(30), nullable=False, default="todo",
        comment="todo | in_progress | review | completed | blocked",
    )
    priority = db.Column(
        db.String(20), nullable=False, default="medium",
        comment="low | medium | high | urgent",
    )
    assignee_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    creator_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    due_date = db.Column(db.Date, nullable=True)
    completed_at = db.Column(db.DateTime(timezone=True), nullable=True)
    estimated_hours = db.Column(db.Float, nullable=True)
    actual_hours = db.Column(db.Float, nullable=True)
    order = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_now)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    assignee = db.relationship("User", foreign_keys=[assignee_id])
    creator = db.relationship("User", foreign_keys=[creator_id])
    phase = db.relationship("Phase")
    comments = db.relationship(
        "Comment", backref="task", lazy="select",
        cascade="all, delete-orphan", passive_deletes=True,
        order_by="Comment.created_at.desc()",
    )
    subtasks = db.relationship(
        "Task",
        backref=db.backref("parent", remote_side=[id]),
        lazy="select",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Task.order",
    )

    def set_status(self, status: str) -> None:
        """Change status and keep ``completed_at`` in step with it."""
        if status == "completed":
            if self.status != "completed" or self.completed_at is None:
                self.completed_at = _now()
        else:
            self.completed_at = None
        self.status = status

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "project_id": self.project_id,
            "project": {"id": self.project.id, "name": self.project.name} if self.project else None,
            "phase_id": self.phase_id,
            "parent_id": self.parent_id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "priority": self.priority,
            "assignee_id": self.assignee_id,
            "assignee": self.assignee.to_brief() if self.assignee else None,
            "creator": self.creator.to_brief() if self.creator else None,
            "due_date": iso(self.due_date),
            "completed_at": iso(self.completed_at),
            "estimated_hours": self.estimated_hours,
            "actual_hours": self.actual_hours,
            "order": self.order,
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }

    def __repr__(self):
        return f"<Task {self.id}: {self.title} [{self.status}]>"


class Comment(db.Model):
    __tablename__ = "comments"

    id = db.Column(db.Integer, primary_key=True)
    task_id = db.Column(
        db.Integer,
        db.ForeignKey("tasks.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    content = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_now)

    user = db.relationship("User")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "task_id": self.task_id,
            "content": self.content,
            "user": self.user.to_brief() if self.user else None,
            "created_at": iso(self.created_at),
        }
