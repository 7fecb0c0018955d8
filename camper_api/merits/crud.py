import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from camper_api.models.camper import Camper
from camper_api.models.merit import Merit, CamperMerit
from camper_api.models.user import User

logger = logging.getLogger(__name__)


class MeritDataError(Exception):
    status_code = 400


class CamperNotFound(MeritDataError):
    status_code = 404

    def __init__(self):
        super().__init__("Camper no encontrado")


class MeritNotFound(MeritDataError):
    status_code = 404

    def __init__(self):
        super().__init__("Mérito no encontrado")


class MeritAlreadyAssigned(MeritDataError):
    def __init__(self):
        super().__init__("El camper ya tiene este mérito")


def get_all(db: Session):
    return db.query(Merit).order_by(Merit.id).all()


def create_merit(db: Session, name: str, description: str = None, icon: str = None) -> Merit:
    merit = Merit(name=name, description=description, icon=icon)
    db.add(merit)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(merit)
    return merit


def get_camper_by_user_id(db: Session, user_id: int):
    return db.query(Camper).join(User, Camper.user_id == User.id).filter(User.id == user_id).first()


def assign_merit(db: Session, camper_id: int, merit_id: int) -> Camper:
    camper = db.get(Camper, camper_id)
    if camper is None:
        raise CamperNotFound()
    if db.get(Merit, merit_id) is None:
        raise MeritNotFound()
    if db.get(CamperMerit, (camper_id, merit_id)) is not None:
        raise MeritAlreadyAssigned()

    db.add(CamperMerit(camper_id=camper_id, merit_id=merit_id))
    try:
        db.commit()
    except IntegrityError as e:
        # Otra petición asignó el mismo mérito entre la comprobación y el INSERT
        db.rollback()
        raise MeritAlreadyAssigned() from e
    except Exception:
        db.rollback()
        logger.exception("Error al asignar el mérito %s al camper %s", merit_id, camper_id)
        raise

    logger.info("Mérito %s asignado al camper %s", merit_id, camper_id)
    db.refresh(camper)
    return camper
