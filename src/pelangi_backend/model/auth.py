from sqlalchemy import Column, DateTime, Index, String, func
from sqlalchemy.orm import relationship

from .base import Base, generate_id


class User(Base):
    __tablename__ = 'user'
    __table_args__ = (
        Index('user_role_status_idx', 'role', 'status'),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    created_at = Column(DateTime(True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(True), nullable=False, server_default=func.now(), onupdate=func.now())
    email = Column(String(320), unique=True, nullable=False)
    full_name = Column(String(255), nullable=False)
    nip = Column(String(64), unique=True)
    # Stored as plain text; converted into the closed Role enum at the authentication boundary.
    role = Column(String(32), nullable=False)
    status = Column(String(16), nullable=False, default="ACTIVE")
    password = Column(String(255))

    # Relationships
    teaching_assignments = relationship("ClassTeacherSubject", back_populates="teacher", uselist=True, lazy="select")
