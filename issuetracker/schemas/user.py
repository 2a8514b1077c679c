from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class UserRegister(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None
    tenant_id: Optional[int] = 0

class UserLogin(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None

class UserCreate(BaseModel):
    tenant_id: Optional[int] = None
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None

class UserUpdate(BaseModel):
    tenant_id: Optional[int] = None
    username: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    password: Optional[str] = None

class UserOut(BaseModel):
    id: int
    tenant_id: int
    username: str
    email: str
    role: str
    created_at: datetime
    updated_at: Optional[datetime] = None

class UserBasic(BaseModel):
    id: int
    username: str
    role: str
