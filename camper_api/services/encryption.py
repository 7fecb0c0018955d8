from cryptography.fernet import Fernet

from camper_api.config import FERNET_KEY


def build_fernet(key):
    # El número de documento se guarda cifrado; sin clave la app no puede arrancar
    if not key:
        raise RuntimeError(
            "FERNET_KEY no está configurada. Genera una con "
            "python -c \"from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())\""
        )
    try:
        return Fernet(key)
    except ValueError as e:
        raise RuntimeError(f"FERNET_KEY no es una clave Fernet válida: {e}") from e


fernet = build_fernet(FERNET_KEY)


def encrypt_document(document_number: str) -> str:
    return fernet.encrypt(document_number.encode()).decode()


def decrypt_document(encrypted_document: str) -> str:
    return fernet.decrypt(encrypted_document.encode()).decode()
