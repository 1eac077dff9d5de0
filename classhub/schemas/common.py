from typing import Optional

from pydantic import BaseModel


class MessageResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
