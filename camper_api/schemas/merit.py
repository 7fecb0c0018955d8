from pydantic import BaseModel
from typing import Optional


class MeritSchema(BaseModel):
    id: int
    name: str
    description: Optional[str]
    icon: Optional[str]

    class Config:
        from_attributes = True


class AssignMeritRequest(BaseModel):
    merit_id: int


class CamperMeritsResponse(BaseModel):
    camper_id: int
    merits: list[MeritSchema]
