from typing import Optional

from pydantic import BaseModel


class AttachmentRead(BaseModel):
    id: int
    filename: str
    url: str
    content_type: Optional[str] = None
    size: Optional[int] = None

    class Config:
        from_attributes = True
