from pydantic import BaseModel
from typing import Generic, List, TypeVar

T = TypeVar("T")

class DataResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T

class ListResponse(BaseModel, Generic[T]):
    success: bool = True
    count: int
    data: List[T]

class MessageResponse(BaseModel):
    success: bool = True
    message: str
