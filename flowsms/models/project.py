"""Studio project domain: projects, team membership, phases, milestones,
documents and the activity log."""

from datetime import datetime, timezone

from flowsms.models import db, iso

PROJECT_TYPES = ("architecture", "interior", "engineering", "mixed")
PROJECT_STATUSES = ("planning", "active", "on_hold", "completed")


def _now():
    return datetime.now(timezone.utc)


class Project(db.Model):
    """A commissioned studio project for a client."""

    __tablename__ = "projects"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    type = db.Column(
        db.String(30), nullable=False, default="architecture",
        comment="architecture | interior | engineering | mixed",
    )
    status = db.Column(
        db.String(30), nullable=False, default="planning",
        comment="planning | active | on_hold | completed",
    )
    client_id = db.Column(
        db.Integer,
        db.ForeignKey("clients.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    location = db.Column(db.String(200), nullable=True)
    start_date = db.Column(db.Date, nullable=True)
    end_date = db.Column(db.Date, nullable=True)
    budget = db.Column(db.Float, nullable=True)
    progress = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_now)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    client = db.relationship("Client", back_populates="projects")
    members = db.relationship(
        "ProjectMember", backref="project", lazy="select",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    phases = db.relationship(
        "Phase", backref="project", lazy="select",
        cascade="all, delete-orphan", passive_deletes=True,
        order_by="Phase.order",
    )
    milestones = db.relationship(
        "Milestone", backref="project", lazy="select",
        cascade="all, delete-orphan", passive_deletes=True,
        order_by="Milestone.due_date",
    )
    tasks = db.relationship(
        "Task", backref="project", lazy="dynamic",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    documents = db.relationship(
        "Document", backref="project", lazy="dynamic",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    activities = db.relationship(
        "Activity", backref="project", lazy="dynamic",
        cascade="all, delete-orphan", passive_deletes=True,
    )

    def team(self) -> list[dict]:
        """Project members flattened with their user details."""
        return [m.to_dict() for m in self.members]

    def counts(self) -> dict:
        return {
            "tasks": self.tasks.count(),
            "documents": self.documents.count(),
            "milestones": len(self.milestones),
        }

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "type": self.type,
            "status": self.status,
            "client_id": self.client_id,
            "location": self.location,
            "start_date": iso(self.start_date),
            "end_date": iso(self.end_date),
            "budget": self.budget,
            "progress": self.progress,
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }

    def __repr__(self):
        return f"<Project {self.id}: {self.name}>"


class ProjectMember(db.Model):
    """Project ↔ user membership with a project-specific role."""

    __tablename__ = "project_members"

    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(
        db.Integer,
        db.ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role = db.Column(db.String(100), nullable=False, default="member")
    joined_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_now)

    user = db.relationship("User")

    __table_args__ = (
        db.UniqueConstraint("project_id", "user_id", name="uq_project_members_project_user"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.user.id,
            "name": self.user.name,
            "email": self.user.email,
            "role": self.role,
            "avatar": self.user.avatar,
            "department": self.user.department,
        }


class Phase(db.Model):
    """Ordered delivery stage of a project (concept, schematic, ...)."""

    __tablename__ = "phases"

    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(
        db.Integer,
        db.ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    order = db.Column(db.Integer, nullable=False, default=0)
    start_date = db.Column(db.Date, nullable=True)
    end_date = db.Column(db.Date, nullable=True)
    progress = db.Column(db.Integer, nullable=False, default=0)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "project_id": self.project_id,
            "name": self.name,
            "description": self.description,
            "order": self.order,
            "start_date": iso(self.start_date),
            "end_date": iso(self.end_date),
            "progress": self.progress,
        }


class Milestone(db.Model):
    __tablename__ = "milestones"

    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(
        db.Integer,
        db.ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    due_date = db.Column(db.Date, nullable=False)
    status = db.Column(
        db.String(30), nullable=False, default="pending",
        comment="pending | in_progress | completed | overdue",
    )
    completed_at = db.Column(db.DateTime(timezone=True), nullable=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "project_id": self.project_id,
            "name": self.name,
            "description": self.description,
            "due_date": iso(self.due_date),
            "status": self.status,
            "completed_at": iso(self.completed_at),
        }


class Document(db.Model):
    """Drawing, report or contract filed against a project."""

    __tablename__ = "documents"

    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(
        db.Integer,
        db.ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = db.Column(db.String(300), nullable=False)
    category = db.Column(db.String(50), nullable=False, default="other")
    file_url = db.Column(db.String(1000), nullable=False)
    uploader_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_now)

    uploader = db.relationship("User")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "file_url": self.file_url,
            "uploaded_by": self.uploader.name if self.uploader else None,
            "created_at": iso(self.created_at),
        }


class Activity(db.Model):
    """Append-only project activity feed entry."""

    __tablename__ = "activities"

    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(
        db.Integer,
        db.ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    action = db.Column(db.String(100), nullable=False)
    target = db.Column(db.String(300), nullable=True)
    details = db.Column(db.JSON, nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_now, index=True)

    user = db.relationship("User")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user": self.user.name if self.user else None,
            "project": self.project.name if self.project else None,
            "action": self.action,
            "target": self.target,
            "details": self.details,
            "time": iso(self.created_at),
        }
