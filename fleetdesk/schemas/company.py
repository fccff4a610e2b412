from pydantic import BaseModel, field_validator
from typing import Optional


class CompanyCreateRequest(BaseModel):
    code:       str
    short_name: str
    full_name:  str

    @field_validator("code", "short_name", "full_name")
    @classmethod
    def not_empty(cls, v):
        if not v.strip(): raise ValueError("Field cannot be empty")
        return v.strip()


class CompanyUpdateRequest(BaseModel):
    code:       Optional[str] = None
    short_name: Optional[str] = None
    full_name:  Optional[str] = None
