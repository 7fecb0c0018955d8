from sqlalchemy import Column, Integer, String
from camper_api.database import Base


class DocumentType(Base):
    __tablename__ = "DOCUMENT_TYPE"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False)
