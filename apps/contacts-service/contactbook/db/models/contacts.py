from sqlalchemy import Column, Integer, String, Date, DateTime, Index
from .base import Base, now_utc


class Contact(Base):
    __tablename__ = 'contacts'
    id = Column(Integer, primary_key=True, autoincrement=True)
    # Ownership column: every query is filtered on the session email
    owner_email = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    phone = Column(String(15), nullable=True)
    email = Column(String(255), nullable=True)
    birthday = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    __table_args__ = (
        Index('idx_contacts_owner_email', 'owner_email'),
    )
