"""
Recibos application settings.
"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./data/recibos.db"

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # Local storage
    DATA_DIR: str = "./data"

    # Public origin used for verification / share links
    APP_BASE_URL: str = "http://localhost:3000"

    # Salt appended to the canonical receipt before hashing (empty = unsalted)
    HASH_SECRET: str = ""

    # Issuer identity (fixed per deployment)
    EMISSOR_NOME: str = "DUARTE URBANISMO LTDA"
    EMISSOR_CNPJ: str = "47.200.760/0001-06"
    EMPRESA_ENDERECO: str = "Rua Felipe Schmidt, 515 - Centro, Florianopolis/SC"
    EMPRESA_TELEFONE: str = "(48) 99999-0000"
    EMPRESA_EMAIL: str = "financeiro@duarteurbanismo.com.br"

    # PIX
    DEFAULT_PIX_KEY: str = "47.200.760/0001-06"
    PIX_MERCHANT_NAME: str = "DUARTE URBANISMO"
    PIX_MERCHANT_CITY: str = "Florianopolis"

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
