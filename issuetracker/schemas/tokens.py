from pydantic import BaseModel
from typing import Optional

class LoginResponse(BaseModel):
    status: str = "ok"
    userId: int
    username: str
    role: Optional[str] = None
    user_role: Optional[str] = None
    access_token: str
    token_type: str = "bearer"
