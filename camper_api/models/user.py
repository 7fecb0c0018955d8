from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from camper_api.database import Base
from camper_api.models.camper import Camper
from camper_api.models.city import City


class User(Base):
    __tablename__ = "USER"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="camper")
    document_type_id = Column(Integer, ForeignKey("DOCUMENT_TYPE.id"), nullable=False, default=1)
    # Cifrado con Fernet, ver services/encryption.py
    document_number = Column(String(255), nullable=False)
    city_id = Column(Integer, ForeignKey("CITY.id"), nullable=True)
    birth_date = Column(Date, nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    city = relationship(City)
    camper = relationship(Camper, back_populates="user", uselist=False)
