from camper_api.database import Base, engine, init_db
from camper_api.merits.limits import get_merits_by_camper_limiter, assign_merit_to_camper_limiter

USER_PAYLOAD = {
    "first_name": "Laura",
    "last_name": "Gómez",
    "email": "laura@example.com",
    "password": "s3cr3t-pass",
    "birth_date": "2001-03-14",
    "document_number": "1098765432",
    "city": "Bucaramanga",
}


def user_payload(**overrides):
    payload = dict(USER_PAYLOAD)
    payload.update(overrides)
    return payload


def reset_database():
    # init_db registra los modelos en Base.metadata
    init_db()
    Base.metadata.drop_all(bind=engine)
    init_db()
    get_merits_by_camper_limiter.reset()
    assign_merit_to_camper_limiter.reset()
