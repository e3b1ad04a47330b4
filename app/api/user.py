#app/api/user.py
from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from app.schemas.user import UserCreate, UserRead, UserUpdate
from app.schemas.response import ApiResponse
from app.crud.user import (
    create_user,
    get_user,
    list_users,
    update_user,
    delete_user,
)
from app.crud.query import apply_select, parse_params
from app.database import get_db

router = APIRouter(prefix="/users", tags=["Users"])

def _serialize(user, select=None) -> dict:
    return apply_select(UserRead.model_validate(user).model_dump(mode="json"), select)

@router.get("", response_model=ApiResponse)
def list_all_users(request: Request, db: Session = Depends(get_db)):
    """
    Список пользователей: where, sort, select, skip, limit, count (значения в JSON).
    """
    params = parse_params(request.query_params)
    result = list_users(db, params)
    if params.get("count"):
        return ApiResponse(message="OK", data=result)
    return ApiResponse(message="OK", data=[_serialize(u, params.get("select")) for u in result])

@router.post("", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
def register_user(data: UserCreate, db: Session = Depends(get_db)):
    """
    Создать пользователя (email уникален).
    """
    user = create_user(db, data.model_dump())
    return ApiResponse(message="User created", data=_serialize(user))

@router.get("/{user_id}", response_model=ApiResponse)
def get_user_profile(user_id: int, request: Request, db: Session = Depends(get_db)):
    """
    Получить пользователя по ID (поддерживает select).
    """
    params = parse_params(request.query_params)
    user = get_user(db, user_id)
    return ApiResponse(message="OK", data=_serialize(user, params.get("select")))

@router.put("/{user_id}", response_model=ApiResponse)
def replace_user(user_id: int, data: UserUpdate, db: Session = Depends(get_db)):
    """
    Обновить пользователя; pending_tasks заменяется целиком.
    """
    user = update_user(db, user_id, data.model_dump(exclude_unset=True))
    return ApiResponse(message="OK", data=_serialize(user))

@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_user(user_id: int, db: Session = Depends(get_db)):
    """
    Удалить пользователя; его задачи становятся неназначенными.
    """
    delete_user(db, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
