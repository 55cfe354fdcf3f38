from .company import Company
from .employee import Employee
from .user import User
