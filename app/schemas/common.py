"""
Shared schema building blocks: camelCase wire format and the response envelope
"""
from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import Generic, Optional, TypeVar

DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """Base model exchanged as camelCase JSON, populated from snake_case names"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class ApiResponse(BaseModel, Generic[DataT]):
    """Envelope wrapping every API response"""
    success: bool = True
    message: Optional[str] = None
    data: Optional[DataT] = None


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    pages: int
