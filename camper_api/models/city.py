from sqlalchemy import Column, Integer, String
from camper_api.database import Base


class City(Base):
    __tablename__ = "CITY"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)
