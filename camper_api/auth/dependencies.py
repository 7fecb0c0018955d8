from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from camper_api.services.token import decode_access_token

# seguridad bearer para extraer token
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(creds: HTTPAuthorizationCredentials = Depends(bearer_scheme)) -> dict:
    """Payload del token bearer: {sub, id, email, role, exp}."""
    if creds is None:
        raise HTTPException(status_code=401, detail="Token requerido")
    return decode_access_token(creds.credentials)
