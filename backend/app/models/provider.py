"""
Provider model: the company running trips, with its bank transfer details.
"""

from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin
from app.models.user import new_public_id


class Provider(Base, TimestampMixin):
    __tablename__ = "providers"

    id = Column(Integer, primary_key=True, index=True)
    public_id = Column(String(36), unique=True, index=True, nullable=False, default=new_public_id)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True)
    company_name = Column(String(255), nullable=False)
    company_logo_path = Column(String(500), nullable=True)
    phone_number = Column(String(30), nullable=True)

    # Shown to customers on the payment details page
    bank_name = Column(String(100), nullable=True)
    bank_account_number = Column(String(50), nullable=True)
    bank_account_name = Column(String(255), nullable=True)

    user = relationship("User", back_populates="provider")
    trips = relationship("Trip", back_populates="provider")

    @property
    def email(self) -> str | None:
        # Only valid when `user` was eager-loaded
        return self.user.email if self.user is not None else None

    def __repr__(self) -> str:
        return f"<Provider(id={self.id}, company={self.company_name})>"
