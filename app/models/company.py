import enum
from sqlalchemy import Column, String, Enum
from app.database import Base, TimestampMixin, generate_id

class CompanyStatus(str, enum.Enum):
    active = "active"
    suspended = "suspended"

class CompanySector(str, enum.Enum):
    technology = "Technologie"
    health = "Santé"
    education = "Éducation"
    commerce = "Commerce"
    services = "Services"
    other = "Autre"

class CompanySize(str, enum.Enum):
    xs = "1-10 employés"
    s = "11-50 employés"
    m = "51-200 employés"
    l = "201-500 employés"
    xl = "500+ employés"

class CompanyType(str, enum.Enum):
    sas = "SAS"
    sarl = "SARL"
    sole_trader = "Auto-entrepreneur"
    association = "Association"
    other = "Autre"


class Company(Base, TimestampMixin):
    __tablename__ = "company"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    phone = Column(String, nullable=True)
    address = Column(String, nullable=True)
    city = Column(String, nullable=True)
    postal_code = Column(String, nullable=True)
    country = Column(String, nullable=True, default="France")
    website = Column(String, nullable=True)
    sector = Column(Enum(CompanySector, values_callable=lambda e: [m.value for m in e]), default=CompanySector.other)
    size = Column(Enum(CompanySize, values_callable=lambda e: [m.value for m in e]), default=CompanySize.xs)
    type = Column(Enum(CompanyType, values_callable=lambda e: [m.value for m in e]), default=CompanyType.sarl)
    logo = Column(String, nullable=True)
    color = Column(String, nullable=True, default="#3b82f6")
    qr_color = Column(String, nullable=True, default="#000000")
    creation_year = Column(String, nullable=True)
    status = Column(Enum(CompanyStatus), nullable=False, default=CompanyStatus.active)
    created_by = Column(String(36), nullable=True)

    @property
    def is_suspended(self) -> bool:
        return self.status == CompanyStatus.suspended
