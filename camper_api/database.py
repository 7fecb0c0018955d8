import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from camper_api.config import DATABASE_URL

logger = logging.getLogger(__name__)

DEFAULT_DOCUMENT_TYPES = {1: "Cédula de ciudadanía"}

# Catálogo inicial de méritos: (nombre, descripción)
DEFAULT_MERITS = (
    ("Liderazgo", "Guía a su equipo en los proyectos"),
    ("Autodidacta", "Aprende por su cuenta más allá del temario"),
    ("Resolución de problemas", "Encuentra soluciones a retos técnicos"),
    ("Compañerismo", "Ayuda a otros campers"),
)


def build_engine(url: str):
    # SQLite en memoria (tests) necesita una sola conexión compartida
    if url.startswith("sqlite"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(url, pool_pre_ping=True)


# Crear el engine de SQLAlchemy con la URL de la base de datos
engine = build_engine(DATABASE_URL)

# Configuración de la sesión para interactuar con la base de datos
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Declarative base para los modelos
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Crea las tablas que falten, el tipo de documento por defecto y el catálogo de méritos."""
    # Registrar los modelos en Base.metadata antes de crear las tablas
    from camper_api.models import camper, city, document_type, merit, user  # noqa: F401
    from camper_api.models.document_type import DocumentType
    from camper_api.models.merit import Merit

    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        for type_id, name in DEFAULT_DOCUMENT_TYPES.items():
            if db.get(DocumentType, type_id) is None:
                db.add(DocumentType(id=type_id, name=name))
        for name, description in DEFAULT_MERITS:
            if db.query(Merit.id).filter(Merit.name == name).first() is None:
                db.add(Merit(name=name, description=description))
        db.commit()
        logger.info("Base de datos inicializada")
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
