from typing import Any, List

from pydantic import BaseModel, Field


class ApiResponse(BaseModel):
    status_code: int = Field(default=200)
    data: Any = None
    message: str = Field(default="Success")
    success: bool = Field(default=True)

    @classmethod
    def ok(cls, data: Any = None, message: str = "Success", status_code: int = 200) -> "ApiResponse":
        return cls(status_code=status_code, data=data, message=message, success=status_code < 400)


class ApiErrorResponse(BaseModel):
    status_code: int
    message: str
    success: bool = Field(default=False)
    errors: List[Any] = Field(default_factory=list)
