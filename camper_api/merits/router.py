from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from camper_api.auth.dependencies import get_current_user
from camper_api.database import get_db
from camper_api.merits import crud
from camper_api.merits.crud import MeritDataError
from camper_api.merits.limits import get_merits_by_camper_limiter, assign_merit_to_camper_limiter
from camper_api.schemas.merit import AssignMeritRequest, CamperMeritsResponse, MeritSchema

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/merits", tags=["merits"])


# Rutas públicas
@router.get("", response_model=List[MeritSchema], dependencies=[Depends(get_merits_by_camper_limiter)])
def get_all(db: Session = Depends(get_db)):
    return crud.get_all(db)


@router.get("/{user_id}", response_model=CamperMeritsResponse, dependencies=[Depends(get_merits_by_camper_limiter)])
def get_by_user_id(user_id: int, db: Session = Depends(get_db)):
    camper = crud.get_camper_by_user_id(db, user_id)
    if camper is None:
        raise HTTPException(status_code=404, detail="Camper no encontrado")
    return {"camper_id": camper.id, "merits": camper.merits}


# Rutas protegidas: primero el token, luego el límite
@router.post(
    "/{camper_id}",
    status_code=201,
    response_model=CamperMeritsResponse,
    dependencies=[Depends(get_current_user), Depends(assign_merit_to_camper_limiter)],
)
def update_camper_merits(camper_id: int, request: AssignMeritRequest, db: Session = Depends(get_db)):
    try:
        camper = crud.assign_merit(db, camper_id, request.merit_id)
    except MeritDataError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"camper_id": camper.id, "merits": camper.merits}
