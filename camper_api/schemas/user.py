from pydantic import BaseModel, constr
from datetime import date, datetime
from typing import Optional

REQUIRED_USER_FIELDS = (
    "first_name",
    "last_name",
    "email",
    "password",
    "birth_date",
    "document_number",
    "city",
)


class LoginRequest(BaseModel):
    email: str
    password: str


class RegisterRequest(BaseModel):
    first_name: constr(min_length=1)
    last_name: constr(min_length=1)
    email: constr(min_length=3)
    password: constr(min_length=1)
    birth_date: date
    document_number: constr(min_length=1)
    city: constr(min_length=1)
    document_type_id: int = 1

    class Config:
        coerce_numbers_to_str = True
        json_schema_extra = {
            "example": {
                "first_name": "Laura",
                "last_name": "Gómez",
                "email": "laura@example.com",
                "password": "s3cr3t-pass",
                "birth_date": "2001-03-14",
                "document_number": "1098765432",
                "city": "Bucaramanga",
            }
        }


class CamperResponse(BaseModel):
    id: int
    title: str
    description: str
    about: Optional[str]
    image: Optional[str]
    main_video_url: Optional[str]
    full_name: Optional[str]
    profile_picture: Optional[str]
    status: str

    class Config:
        from_attributes = True


class UserResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    role: str
    document_type_id: int
    document_number: str
    birth_date: date
    city_id: Optional[int]
    city_name: Optional[str]
    created_at: Optional[datetime]
    camper: Optional[CamperResponse]


class TokenUserResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserResponse
