"""CRUD-операции для задач проектов."""

import logging

from peewee import Case, ModelSelect

from database.db import db
from database.models import Project, Task, TaskStatus

logger = logging.getLogger(__name__)

# Поля, допустимые для создания и обновления задач
TASK_ALLOWED_FIELDS = {"title", "status", "due_date", "project_id"}


def _clean_task_data(data: dict[str, object]) -> dict[str, object]:
    """Отфильтровать допустимые поля и убрать пустые значения."""
    clean: dict[str, object] = {}
    for key, value in data.items():
        if value in ("", None):
            continue
        if key in TASK_ALLOWED_FIELDS:
            clean[key] = value
        elif key == "project" and hasattr(value, "id"):
            clean["project_id"] = value.id
    if "status" in clean:
        clean["status"] = TaskStatus(clean["status"]).value
    return clean


def get_project_tasks(project_id: int) -> ModelSelect:
    """Задачи проекта: сначала невыполненные."""
    done_last = Case(None, ((Task.status == TaskStatus.DONE.value, 1),), 0)
    return (
        Task.select()
        .where(Task.project == project_id)
        .order_by(done_last, Task.id)
    )


def get_task_by_id(task_id: int) -> Task | None:
    return Task.get_or_none(Task.id == task_id)


def add_task(**kwargs) -> Task:
    """Создать задачу."""
    clean = _clean_task_data(kwargs)
    if not clean.get("title"):
        raise ValueError("Поле 'title' обязательно для задачи")
    project_id = clean.get("project_id")
    if project_id is None or Project.get_or_none(Project.id == project_id) is None:
        raise ValueError("Задача должна быть привязана к существующему проекту")

    try:
        with db.atomic():
            task = Task.create(**clean)
    except Exception as e:  # pragma: no cover - logging
        logger.error("❌ Ошибка при создании задачи: %s", e)
        raise

    logger.info("📝 Создана задача #%s: '%s'", task.id, task.title)
    return task


def update_task(task: Task, **fields) -> Task:
    """Изменить поля задачи."""
    clean = _clean_task_data(fields)
    for key, value in clean.items():
        setattr(task, key, value)
    task.save()
    logger.info("✏️ Обновлена задача #%s", task.id)
    return task


def toggle_task(task: Task) -> Task:
    """Переключить задачу между «сделано» и «к выполнению»."""
    new_status = TaskStatus.TODO if task.status == TaskStatus.DONE.value else TaskStatus.DONE
    return update_task(task, status=new_status)


def delete_task(task_id: int) -> bool:
    task = get_task_by_id(task_id)
    if task is None:
        logger.warning("❗ Задача с id=%s не найдена для удаления", task_id)
        return False
    task.delete_instance()
    logger.info("🗑 Задача #%s удалена", task_id)
    return True
