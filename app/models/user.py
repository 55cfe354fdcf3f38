import enum
from sqlalchemy import Column, String, Boolean, Enum, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base, TimestampMixin, generate_id

class UserRole(str, enum.Enum):
    superadmin = "superadmin"
    company_admin = "company_admin"
    employee = "employee"

class User(Base, TimestampMixin):
    __tablename__ = "user"

    id = Column(String(36), primary_key=True, default=generate_id)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.employee)
    company_id = Column(String(36), ForeignKey("company.id", ondelete="SET NULL"), nullable=True, index=True)
    is_active = Column(Boolean, nullable=False, default=True)

    company = relationship("Company", lazy="joined")
