"""Studio staff accounts and clients."""

from datetime import datetime, timezone

from flowsms.models import db, iso


class User(db.Model):
    """A studio team member who can log in and be assigned work."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    name = db.Column(db.String(200), nullable=False)
    role = db.Column(
        db.String(30), nullable=False, default="viewer",
        comment="admin | project_manager | team_lead | designer | engineer | viewer",
    )
    department = db.Column(db.String(100), nullable=True)
    phone = db.Column(db.String(50), nullable=True)
    avatar = db.Column(db.String(500), nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    password_hash = db.Column(db.String(255), nullable=True)
    created_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def to_dict(self) -> dict:
        """Public user fields (never includes the password hash)."""
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "department": self.department,
            "phone": self.phone,
            "avatar": self.avatar,
            "is_active": self.is_active,
            "created_at": iso(self.created_at),
        }

    def to_brief(self) -> dict:
        return {"id": self.id, "name": self.name, "email": self.email, "avatar": self.avatar}

    def __repr__(self):
        return f"<User {self.id}: {self.email}>"


class Client(db.Model):
    """Developer or owner commissioning studio projects."""

    __tablename__ = "clients"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    email = db.Column(db.String(255), nullable=True)
    phone = db.Column(db.String(50), nullable=True)
    contact_name = db.Column(db.String(200), nullable=True)
    address = db.Column(db.Text, nullable=True)
    created_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    projects = db.relationship("Project", back_populates="client", lazy="dynamic")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "contact_name": self.contact_name,
            "address": self.address,
        }

    def __repr__(self):
        return f"<Client {self.id}: {self.name}>"
