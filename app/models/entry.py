"""ORM model for owned entries (vehicle weighing log records)."""

from sqlalchemy import Column, Date, ForeignKey, Index, String, UniqueConstraint

from app.models.base import Base, TimestampMixin, new_id, utcnow


def _today():
    return utcnow().date()


class Entry(TimestampMixin, Base):
    """
    One entry per (user_id, sr_no). Two owners may reuse a serial number,
    one owner may not; the unique constraint is the final arbiter.
    """

    __tablename__ = "entries"
    __table_args__ = (
        UniqueConstraint("user_id", "sr_no", name="uq_entries_user_id_sr_no"),
        Index("ix_entries_user_id_date_created_at", "user_id", "date", "created_at"),
        Index("ix_entries_user_id_vehicle_no", "user_id", "vehicle_no"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sr_no = Column(String(20), nullable=False)
    vehicle_no = Column(String(20), nullable=False)
    name_details = Column(String(100), nullable=False)
    date = Column(Date, nullable=False, default=_today)
    net_weight = Column(String(20), nullable=True)
    moisture = Column(String(20), nullable=True)
    gate_pass_no = Column(String(30), nullable=True)
    mobile_no = Column(String(10), nullable=True)
    unload = Column(String(50), nullable=True)
    shortage = Column(String(50), nullable=True)
    remarks = Column(String(200), nullable=True)
    rate = Column(String(20), nullable=True)
