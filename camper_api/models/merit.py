from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.sql import func
from camper_api.database import Base


class Merit(Base):
    __tablename__ = "MERIT"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    icon = Column(String(255), nullable=True)


class CamperMerit(Base):
    __tablename__ = "CAMPER_MERIT"

    camper_id = Column(Integer, ForeignKey("CAMPER.id"), primary_key=True)
    merit_id = Column(Integer, ForeignKey("MERIT.id"), primary_key=True)
    assigned_at = Column(DateTime, nullable=False, server_default=func.now())
