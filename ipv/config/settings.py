# ipv/config/settings.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List
import os

class Settings(BaseSettings):
    # App Info
    app_name: str = "IPV API"
    version: str = "1.0.0"
    debug: bool = False
    
    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./ipv.db")
    
    # Security
    secret_key: str = os.getenv("SECRET_KEY", "change-in-production")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 10080  # 1 semana
    allowed_origins: List[str] = ["*"]
    
    # Ventas
    confirmed_display_seconds: float = 1.5  # Tiempo visible de un pago confirmado
    bill_denominations: List[int] = [1000, 500, 200, 100, 50, 20, 10, 5, 1]
    
    # Modo invitado
    guest_cookie_name: str = "ipv_guest_id"
    guest_cookie_max_age: int = 60 * 60 * 24 * 30  # También es el tiempo máximo de inactividad
    guest_max_stores: int = 1000
    
    # Server
    host: str = "0.0.0.0"
    port: int = int(os.getenv("PORT", 8000))
    
    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")
    
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

settings = Settings()
