"""
Settings and maintenance Pydantic schemas.
"""

from pydantic import BaseModel


class LogoUploadResponse(BaseModel):
    message: str
    file_path: str


class MessageResponse(BaseModel):
    message: str
