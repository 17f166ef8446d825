"""
Task Management Endpoints
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from app.crm.models import GlobalTask, RelatedObjectType
from app.crm.store import CrmStore, get_store

router = APIRouter()


class TaskCreate(BaseModel):
    """建立任務請求"""
    id: str = ""
    title: str
    due_date: str = ""
    assignee: str = ""
    related_object_type: str = RelatedObjectType.ACCOUNT.value
    related_object_id: Optional[str] = None
    description: Optional[str] = None


class TaskUpdate(BaseModel):
    title: Optional[str] = None
    due_date: Optional[str] = None
    assignee: Optional[str] = None
    related_object_type: Optional[str] = None
    related_object_id: Optional[str] = None
    description: Optional[str] = None


def _parse_related_type(value: str) -> RelatedObjectType:
    try:
        return RelatedObjectType(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid related object type: {value}")


@router.get("", response_model=List[Dict[str, Any]])
async def list_tasks(
    related_type: Optional[str] = None,
    related_id: Optional[str] = None,
    completed: Optional[bool] = None,
    store: CrmStore = Depends(get_store),
):
    """列出任務"""
    if related_type and related_id:
        tasks = store.get_tasks_by_related(_parse_related_type(related_type).value, related_id)
    else:
        tasks = store.get_tasks()
    if completed is not None:
        tasks = [t for t in tasks if t.is_completed == completed]
    return [t.to_dict() for t in tasks]


@router.post("", response_model=Dict[str, Any])
async def create_task(request: TaskCreate, store: CrmStore = Depends(get_store)):
    data = request.model_dump()
    data["related_object_type"] = _parse_related_type(request.related_object_type)
    task = store.add_task(GlobalTask(**data))
    return store.get_task_by_id(task.id).to_dict()


@router.get("/{task_id}", response_model=Dict[str, Any])
async def get_task(task_id: str, store: CrmStore = Depends(get_store)):
    task = store.get_task_by_id(task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task.to_dict()


@router.put("/{task_id}", response_model=Dict[str, Any])
async def update_task(task_id: str, request: TaskUpdate, store: CrmStore = Depends(get_store)):
    task = store.get_task_by_id(task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")

    updates = request.model_dump(exclude_unset=True)
    if "related_object_type" in updates:
        updates["related_object_type"] = _parse_related_type(updates["related_object_type"])
    for key, value in updates.items():
        setattr(task, key, value)

    store.update_task(task)
    return store.get_task_by_id(task_id).to_dict()


@router.post("/{task_id}/toggle", response_model=Dict[str, Any])
async def toggle_task(task_id: str, store: CrmStore = Depends(get_store)):
    """完成 / 重新開啟"""
    task = store.toggle_task_completion(task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return store.get_task_by_id(task_id).to_dict()


@router.delete("/{task_id}")
async def delete_task(task_id: str, store: CrmStore = Depends(get_store)):
    if not store.delete_task(task_id):
        raise HTTPException(status_code=404, detail="Task not found")
    return {"message": f"Task {task_id} deleted"}
