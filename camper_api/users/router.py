from datetime import datetime
from typing import List
import logging

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import ValidationError
from sqlalchemy.orm import Session

from camper_api.database import get_db
from camper_api.models.user import User
from camper_api.schemas.user import (
    REQUIRED_USER_FIELDS,
    CamperResponse,
    LoginRequest,
    RegisterRequest,
    TokenUserResponse,
    UserResponse,
)
from camper_api.services.encryption import decrypt_document
from camper_api.services.token import create_user_token
from camper_api.users import crud
from camper_api.users.crud import UserDataError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


def serialize_user(user: User) -> UserResponse:
    # Nunca se devuelve el hash de la contraseña
    return UserResponse(
        id=user.id,
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        role=user.role,
        document_type_id=user.document_type_id,
        document_number=decrypt_document(user.document_number),
        birth_date=user.birth_date,
        city_id=user.city_id,
        city_name=user.city.name if user.city else None,
        created_at=user.created_at,
        camper=CamperResponse.model_validate(user.camper) if user.camper else None,
    )


def _is_valid_date(value) -> bool:
    try:
        datetime.strptime(str(value), "%Y-%m-%d")
        return True
    except ValueError:
        return False


@router.post("", status_code=201, response_model=TokenUserResponse)
def create(payload: dict = Body(...), db: Session = Depends(get_db)):
    # Validar campos requeridos
    for field in REQUIRED_USER_FIELDS:
        if not payload.get(field):
            raise HTTPException(status_code=400, detail=f"El campo {field} es requerido")

    # Validar formato de fecha
    if not _is_valid_date(payload["birth_date"]):
        raise HTTPException(status_code=400, detail="Formato de fecha inválido. Use YYYY-MM-DD")

    try:
        request = RegisterRequest(**payload)
    except ValidationError as e:
        field = ".".join(str(part) for part in e.errors()[0]["loc"])
        raise HTTPException(status_code=400, detail=f"El campo {field} no es válido")

    try:
        user = crud.create_with_relations(db, request.model_dump())
    except UserDataError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Error en create: %s", e)
        raise HTTPException(status_code=400, detail="Error al crear el usuario")

    token = create_user_token(user, role="camper")
    return {"token": token, "token_type": "bearer", "user": serialize_user(user)}


@router.post("/login", response_model=TokenUserResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    try:
        user = crud.find_by_email(db, request.email)
        if not user or not crud.validate_password(user, request.password):
            raise HTTPException(status_code=401, detail="Credenciales inválidas")

        token = create_user_token(user)
        return {"token": token, "token_type": "bearer", "user": serialize_user(user)}
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Error en login: %s", e)
        raise HTTPException(status_code=500, detail="Error en el servidor")


@router.post("/logout")
def logout():
    # Los tokens no se guardan en el servidor, el cliente solo tiene que descartarlo
    return {"message": "Sesión cerrada exitosamente"}


@router.get("", response_model=List[UserResponse])
def get_all(db: Session = Depends(get_db)):
    try:
        return [serialize_user(user) for user in crud.find_all(db)]
    except Exception as e:
        logger.error("Error en get_all: %s", e)
        raise HTTPException(status_code=500, detail="Error al obtener usuarios")


@router.get("/{user_id}", response_model=UserResponse)
def get_by_id(user_id: int, db: Session = Depends(get_db)):
    try:
        user = crud.find_by_id(db, user_id)
        if not user:
            raise HTTPException(status_code=404, detail="Usuario no encontrado")
        return serialize_user(user)
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Error en get_by_id: %s", e)
        raise HTTPException(status_code=500, detail="Error al obtener el usuario")


@router.api_route("/{user_id}", methods=["PUT", "PATCH"], status_code=501)
def update(user_id: int):
    raise HTTPException(status_code=501, detail="Función no implementada")


@router.delete("/{user_id}")
def delete(user_id: int, db: Session = Depends(get_db)):
    try:
        deleted = crud.delete(db, user_id)
    except Exception as e:
        logger.error("Error en delete: %s", e)
        raise HTTPException(status_code=500, detail="Error al eliminar el usuario")

    if not deleted:
        raise HTTPException(status_code=404, detail="Usuario no encontrado")
    return {"message": "Usuario eliminado exitosamente"}
