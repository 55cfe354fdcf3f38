from sqlalchemy import Column, String, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base, TimestampMixin, generate_id

class Employee(Base, TimestampMixin):
    __tablename__ = "employee"

    id = Column(String(36), primary_key=True, default=generate_id)
    company_id = Column(String(36), ForeignKey("company.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("user.id", ondelete="SET NULL"), nullable=True, index=True)

    name = Column(String, nullable=False)
    surname = Column(String, nullable=False)
    patronymic = Column(String, default="")
    role = Column(String, default="")
    agency = Column(String, default="")
    email = Column(String, nullable=False)
    phone = Column(String, default="")
    home_phone = Column(String, default="")
    work_phone = Column(String, default="")
    insurance_agent = Column(String, default="")
    personal_site = Column(String, default="")
    birth_date = Column(String, default="")
    corporate_email = Column(String, default="")
    home_address = Column(String, default="")

    # Social profiles
    facebook = Column(String, default="")
    x = Column(String, default="")
    linkedin = Column(String, default="")
    instagram = Column(String, default="")
    github = Column(String, default="")
    icq = Column(String, default="")

    title = Column(String, default="")
    avatar = Column(String, nullable=True)
    background = Column(String, nullable=True)

    company = relationship("Company", lazy="joined")
    user = relationship("User", lazy="joined")
