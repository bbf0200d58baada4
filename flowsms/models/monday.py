"""Link between a PXT register project and its Monday.com board."""

from datetime import datetime, timezone

from flowsms.models import db, iso


class MondayBoardMapping(db.Model):
    __tablename__ = "monday_board_mappings"

    id = db.Column(db.Integer, primary_key=True)
    pxt_project_sr_no = db.Column(
        db.String(50), nullable=False, unique=True, index=True,
        comment="Sr. No. column of the PXT register",
    )
    monday_board_id = db.Column(db.String(50), nullable=False)
    board_name = db.Column(db.String(300), nullable=True)
    last_synced_at = db.Column(db.DateTime(timezone=True), nullable=True)
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
        return {
            "id": self.id,
            "pxt_project_sr_no": self.pxt_project_sr_no,
            "monday_board_id": self.monday_board_id,
            "board_name": self.board_name,
            "last_synced_at": iso(self.last_synced_at),
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }
