import logging

from sqlalchemy import select, delete as sql_delete
from sqlalchemy.dialects.mysql import insert as mysql_insert
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from camper_api.auth.argon import hash_password, verify_password
from camper_api.models.camper import (
    Camper,
    DEFAULT_TITLE,
    DEFAULT_DESCRIPTION,
    DEFAULT_ABOUT,
    DEFAULT_STATUS,
)
from camper_api.models.city import City
from camper_api.models.document_type import DocumentType
from camper_api.models.merit import CamperMerit
from camper_api.models.user import User
from camper_api.services.encryption import encrypt_document

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "camper"
DEFAULT_DOCUMENT_TYPE_ID = 1

UPDATABLE_FIELDS = {
    "first_name",
    "last_name",
    "email",
    "password",
    "birth_date",
    "document_type_id",
    "document_number",
    "city",
}


class UserDataError(Exception):
    """Error de datos que se puede devolver tal cual al cliente."""


class EmailAlreadyRegistered(UserDataError):
    def __init__(self):
        super().__init__("El email ya está registrado")


class DocumentTypeNotFound(UserDataError):
    def __init__(self):
        super().__init__("Tipo de documento no encontrado")


class UnknownUserField(UserDataError):
    def __init__(self, fields):
        self.fields = sorted(fields)
        super().__init__(f"Campos no permitidos: {', '.join(self.fields)}")


def _with_relations(db: Session):
    return db.query(User).options(joinedload(User.city), joinedload(User.camper))


def check_existing_email(db: Session, email: str):
    if db.query(User.id).filter(User.email == email).first():
        raise EmailAlreadyRegistered()


def check_document_type(db: Session, type_id: int = DEFAULT_DOCUMENT_TYPE_ID) -> int:
    if db.get(DocumentType, type_id) is None:
        raise DocumentTypeNotFound()
    return type_id


def get_or_create_city(db: Session, name: str) -> int:
    """
    Devuelve el id de la ciudad, insertándola si no existe.

    El INSERT ignora el duplicado en la propia base de datos (CITY.name es
    único), así dos peticiones con la misma ciudad nueva no crean dos filas.
    """
    dialect = db.get_bind().dialect.name
    if dialect == "mysql":
        stmt = mysql_insert(City).values(name=name)
        stmt = stmt.on_duplicate_key_update(name=stmt.inserted.name)
    elif dialect == "postgresql":
        stmt = postgresql_insert(City).values(name=name).on_conflict_do_nothing(index_elements=["name"])
    elif dialect == "sqlite":
        stmt = sqlite_insert(City).values(name=name).on_conflict_do_nothing(index_elements=["name"])
    else:
        raise NotImplementedError(f"Dialecto no soportado: {dialect}")

    db.execute(stmt)
    return db.execute(select(City.id).where(City.name == name)).scalar_one()


def create_camper_profile(db: Session, user: User) -> Camper:
    camper = Camper(
        user_id=user.id,
        title=DEFAULT_TITLE,
        description=DEFAULT_DESCRIPTION,
        about=DEFAULT_ABOUT,
        image=None,
        main_video_url=None,
        full_name=f"{user.first_name} {user.last_name}",
        profile_picture=None,
        status=DEFAULT_STATUS,
    )
    db.add(camper)
    db.flush()
    return camper


def _raise_integrity_error(db: Session, error: IntegrityError, email: str):
    # La restricción única de USER.email cubre la carrera entre la comprobación y el INSERT
    if email and db.query(User.id).filter(User.email == email).first():
        raise EmailAlreadyRegistered() from error
    raise error


def create_with_relations(db: Session, data: dict) -> User:
    """
    Crea USER + CAMPER (y CITY si hace falta) en una sola transacción.

    Si falla cualquier paso se hace rollback y se relanza la excepción.
    """
    try:
        check_existing_email(db, data["email"])
        document_type_id = check_document_type(
            db, data.get("document_type_id") or DEFAULT_DOCUMENT_TYPE_ID
        )
        city_id = get_or_create_city(db, data["city"])

        user = User(
            first_name=data["first_name"],
            last_name=data["last_name"],
            email=data["email"],
            password=hash_password(data["password"]),
            role=DEFAULT_ROLE,
            document_type_id=document_type_id,
            document_number=encrypt_document(str(data["document_number"])),
            city_id=city_id,
            birth_date=data["birth_date"],
        )
        db.add(user)
        db.flush()

        create_camper_profile(db, user)

        db.commit()
    except IntegrityError as e:
        db.rollback()
        _raise_integrity_error(db, e, data.get("email"))
    except UserDataError:
        db.rollback()
        raise
    except Exception:
        db.rollback()
        logger.exception("Error en create_with_relations")
        raise

    logger.info("Usuario %s creado con su perfil de camper", user.id)
    return find_by_id(db, user.id)


def find_by_email(db: Session, email: str):
    return _with_relations(db).filter(User.email == email).first()


def find_by_id(db: Session, user_id: int):
    return _with_relations(db).filter(User.id == user_id).first()


def find_all(db: Session):
    return _with_relations(db).order_by(User.id).all()


def validate_password(user: User, password: str) -> bool:
    return verify_password(user.password, password)


def update(db: Session, user_id: int, data: dict):
    unknown = set(data) - UPDATABLE_FIELDS
    if unknown:
        raise UnknownUserField(unknown)

    user = db.get(User, user_id)
    if user is None:
        return None

    # None y cadenas vacías no modifican el campo
    values = {key: value for key, value in data.items() if value is not None and value != ""}
    try:
        if "email" in values and values["email"] != user.email:
            check_existing_email(db, values["email"])
        if "password" in values:
            values["password"] = hash_password(values["password"])
        if "city" in values:
            values["city_id"] = get_or_create_city(db, values.pop("city"))
        if "document_type_id" in values:
            check_document_type(db, values["document_type_id"])
        if "document_number" in values:
            values["document_number"] = encrypt_document(str(values["document_number"]))

        for field, value in values.items():
            setattr(user, field, value)

        if user.camper is not None and ("first_name" in values or "last_name" in values):
            user.camper.full_name = f"{user.first_name} {user.last_name}"

        db.commit()
    except IntegrityError as e:
        db.rollback()
        _raise_integrity_error(db, e, values.get("email"))
    except UserDataError:
        db.rollback()
        raise
    except Exception:
        db.rollback()
        logger.exception("Error en update del usuario %s", user_id)
        raise

    return find_by_id(db, user_id)


def delete(db: Session, user_id: int) -> bool:
    """Borra méritos asignados, CAMPER y USER. False si el usuario no existe."""
    if db.get(User, user_id) is None:
        return False

    try:
        camper_ids = select(Camper.id).where(Camper.user_id == user_id)
        db.execute(sql_delete(CamperMerit).where(CamperMerit.camper_id.in_(camper_ids)))
        db.execute(sql_delete(Camper).where(Camper.user_id == user_id))
        db.execute(sql_delete(User).where(User.id == user_id))
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Error al eliminar el usuario %s", user_id)
        raise

    logger.info("Usuario %s eliminado", user_id)
    return True
