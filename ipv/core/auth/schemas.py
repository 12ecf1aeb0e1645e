from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

class UserLogin(BaseModel):
    """Schema para login de usuario"""
    email: str = Field(..., description="Email del usuario")
    password: str = Field(..., min_length=6, description="Contraseña del usuario")
    
    model_config = ConfigDict(json_schema_extra={
        "example": {
            "email": "usuario@ipv.app",
            "password": "usuario123"
        }
    })

class UserRegister(BaseModel):
    """Schema para registro de usuario"""
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$", description="Email del usuario")
    password: str = Field(..., min_length=6)

class UserResponse(BaseModel):
    """Schema para respuesta de usuario"""
    id: int
    email: str
    role: str
    is_active: bool
    created_at: Optional[datetime] = None
    
    model_config = ConfigDict(from_attributes=True)

class TokenResponse(BaseModel):
    """Schema para respuesta de token"""
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
