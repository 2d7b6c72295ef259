from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from payroll_engine.db.session import Base


class Department(Base):
    __tablename__ = "departments"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False, unique=True)

    employees = relationship("Employee", back_populates="department")
