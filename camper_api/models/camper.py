from sqlalchemy import Column, Integer, String, Text, ForeignKey
from sqlalchemy.orm import relationship
from camper_api.database import Base
from camper_api.models.merit import Merit

DEFAULT_TITLE = "Nuevo Camper"
DEFAULT_DESCRIPTION = "Bienvenido a mi perfil de Camper"
DEFAULT_ABOUT = "Cuéntanos sobre ti..."
DEFAULT_STATUS = "formacion"


class Camper(Base):
    __tablename__ = "CAMPER"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    # 1:1 con USER
    user_id = Column(Integer, ForeignKey("USER.id"), unique=True, nullable=False)
    title = Column(String(100), nullable=False, default=DEFAULT_TITLE)
    description = Column(Text, nullable=False, default=DEFAULT_DESCRIPTION)
    about = Column(Text, nullable=True, default=DEFAULT_ABOUT)
    image = Column(String(255), nullable=True)
    main_video_url = Column(String(255), nullable=True)
    full_name = Column(String(200), nullable=True)
    profile_picture = Column(String(255), nullable=True)
    status = Column(String(30), nullable=False, default=DEFAULT_STATUS)

    user = relationship("User", back_populates="camper")
    # Las asignaciones se escriben a través de CamperMerit
    merits = relationship(Merit, secondary="CAMPER_MERIT", order_by=Merit.id, viewonly=True)
