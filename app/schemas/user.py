from datetime import datetime
from pydantic import BaseModel


class UserOut(BaseModel):
    id: str
    email: str
    full_name: str
    created_at: datetime
    updated_at: datetime
