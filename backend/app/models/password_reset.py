"""
One-time codes issued by the forgot-password flow.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey

from app.db.base import Base, TimestampMixin


class PasswordReset(Base, TimestampMixin):
    __tablename__ = "password_resets"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    otp_code = Column(String(6), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<PasswordReset(id={self.id}, user={self.user_id}, expires_at={self.expires_at})>"
