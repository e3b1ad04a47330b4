#app/schemas/response.py
from pydantic import BaseModel, Field
from typing import Any, Optional

class ApiResponse(BaseModel):
    """
    ApiResponse — единый конверт ответа: сообщение + данные (объект, список или число).
    """
    message: str = Field(..., examples=["OK"], description="Текстовое сообщение")
    data: Optional[Any] = Field(None, description="Результат запроса или детали ошибки")
