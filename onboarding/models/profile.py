from sqlalchemy import Column, String, DateTime, Enum
from sqlalchemy.sql import func
from sqlalchemy.dialects.postgresql import UUID
import uuid
import enum
from onboarding.core.database import Base


class ProfileRole(str, enum.Enum):
    CANDIDATE = "candidate"
    ADMIN = "admin"


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=False, default="")

    role = Column(
        Enum(ProfileRole, name="profilerole", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=ProfileRole.CANDIDATE,
        index=True,
    )

    # Path inside the profile-photos bucket: {user_id}/{filename}
    avatar_path = Column(String(500), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    @property
    def is_admin(self) -> bool:
        return self.role == ProfileRole.ADMIN

    @property
    def display_name(self) -> str:
        return self.full_name or self.email

    def __repr__(self):
        return f"<Profile(id={self.id}, email={self.email}, role={self.role})>"
