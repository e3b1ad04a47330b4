#app/api/task.py
from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from app.schemas.task import TaskCreate, TaskRead, TaskUpdate
from app.schemas.response import ApiResponse
from app.crud.task import (
    create_task,
    get_task,
    list_tasks,
    update_task,
    delete_task,
)
from app.crud.query import apply_select, parse_params
from app.database import get_db

router = APIRouter(prefix="/tasks", tags=["Tasks"])

def _serialize(task, select=None) -> dict:
    return apply_select(TaskRead.model_validate(task).model_dump(mode="json"), select)

@router.get("", response_model=ApiResponse)
def list_all_tasks(request: Request, db: Session = Depends(get_db)):
    """
    Список задач: where, sort, select, skip, limit, count (значения в JSON).
    """
    params = parse_params(request.query_params)
    result = list_tasks(db, params)
    if params.get("count"):
        return ApiResponse(message="OK", data=result)
    return ApiResponse(message="OK", data=[_serialize(t, params.get("select")) for t in result])

@router.post("", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
def create_new_task(data: TaskCreate, db: Session = Depends(get_db)):
    """
    Создать задачу.
    """
    task = create_task(db, data.model_dump())
    return ApiResponse(message="Task created", data=_serialize(task))

@router.get("/{task_id}", response_model=ApiResponse)
def get_one_task(task_id: int, request: Request, db: Session = Depends(get_db)):
    """
    Получить задачу по ID (поддерживает select).
    """
    params = parse_params(request.query_params)
    task = get_task(db, task_id)
    return ApiResponse(message="OK", data=_serialize(task, params.get("select")))

@router.put("/{task_id}", response_model=ApiResponse)
def replace_task(task_id: int, data: TaskUpdate, db: Session = Depends(get_db)):
    """
    Обновить задачу вместе со ссылками на исполнителя.
    """
    task = update_task(db, task_id, data.model_dump(exclude_unset=True))
    return ApiResponse(message="OK", data=_serialize(task))

@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_task(task_id: int, db: Session = Depends(get_db)):
    """
    Удалить задачу (и убрать её из pending_tasks исполнителя).
    """
    delete_task(db, task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
