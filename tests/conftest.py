import os

from cryptography.fernet import Fernet

# Tiene que ejecutarse antes de importar camper_api: config.py lee el entorno al importarse
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("FERNET_KEY", Fernet.generate_key().decode())
os.environ.setdefault("LOG_LEVEL", "WARNING")
