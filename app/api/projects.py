from fastapi import APIRouter, Depends, HTTPException

from ..db import get_session
from ..schemas import (
    ProjectCreate,
    ProjectRead,
    ProjectUpdate,
    TaskCreate,
    TaskRead,
    TaskUpdate,
)
from services import project_service, task_service

router = APIRouter(prefix="/projects", tags=["projects"])


def _project_read(project) -> ProjectRead:
    data = ProjectRead.model_validate(project)
    return data.model_copy(update={"progress": project_service.project_progress(project.id)})


def _get_project_or_404(project_id: int):
    project = project_service.get_project_by_id(project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.get("/", response_model=list[ProjectRead])
def read_projects(session=Depends(get_session)):
    return [_project_read(p) for p in project_service.get_all_projects()]


@router.post("/", response_model=ProjectRead)
def add_project(project_in: ProjectCreate, session=Depends(get_session)):
    try:
        project = project_service.add_project(**project_in.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _project_read(project)


@router.get("/{project_id}", response_model=ProjectRead)
def read_project(project_id: int, session=Depends(get_session)):
    return _project_read(_get_project_or_404(project_id))


@router.put("/{project_id}", response_model=ProjectRead)
def edit_project(project_id: int, project_in: ProjectUpdate, session=Depends(get_session)):
    project = _get_project_or_404(project_id)
    try:
        project = project_service.update_project(
            project, **project_in.model_dump(exclude_unset=True)
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _project_read(project)


@router.delete("/{project_id}")
def remove_project(project_id: int, session=Depends(get_session)):
    if not project_service.delete_project(project_id):
        raise HTTPException(status_code=404, detail="Project not found")
    return {"status": "deleted"}


@router.get("/{project_id}/tasks", response_model=list[TaskRead])
def read_tasks(project_id: int, session=Depends(get_session)):
    _get_project_or_404(project_id)
    return list(task_service.get_project_tasks(project_id))


@router.post("/{project_id}/tasks", response_model=TaskRead)
def add_task(project_id: int, task_in: TaskCreate, session=Depends(get_session)):
    _get_project_or_404(project_id)
    try:
        return task_service.add_task(project_id=project_id, **task_in.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{project_id}/tasks/{task_id}", response_model=TaskRead)
def edit_task(project_id: int, task_id: int, task_in: TaskUpdate, session=Depends(get_session)):
    task = task_service.get_task_by_id(task_id)
    if not task or task.project_id != project_id:
        raise HTTPException(status_code=404, detail="Task not found")
    return task_service.update_task(task, **task_in.model_dump(exclude_unset=True))


@router.post("/{project_id}/tasks/{task_id}/toggle", response_model=TaskRead)
def toggle_task(project_id: int, task_id: int, session=Depends(get_session)):
    task = task_service.get_task_by_id(task_id)
    if not task or task.project_id != project_id:
        raise HTTPException(status_code=404, detail="Task not found")
    return task_service.toggle_task(task)


@router.delete("/{project_id}/tasks/{task_id}")
def remove_task(project_id: int, task_id: int, session=Depends(get_session)):
    task = task_service.get_task_by_id(task_id)
    if not task or task.project_id != project_id:
        raise HTTPException(status_code=404, detail="Task not found")
    task_service.delete_task(task_id)
    return {"status": "deleted"}
