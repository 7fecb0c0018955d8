from argon2 import PasswordHasher
from argon2.exceptions import VerificationError, InvalidHashError

hasher = PasswordHasher()


def hash_password(password: str) -> str:
    # Cada hash lleva su propio salt aleatorio, nunca guardar la contraseña en claro
    return hasher.hash(password)


def verify_password(hashed: str, password: str) -> bool:
    # VerifyMismatchError hereda de VerificationError
    try:
        return hasher.verify(hashed, password)
    except (VerificationError, InvalidHashError):
        return False
