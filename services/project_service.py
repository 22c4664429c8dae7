"""Проекты клиентов."""

from __future__ import annotations

import logging
from datetime import date

from peewee import ModelSelect

from database.db import db
from database.models import Client, Project, ProjectStatus, Task, TaskStatus

logger = logging.getLogger(__name__)

PROJECT_ALLOWED_FIELDS = {
    "name",
    "description",
    "client_id",
    "status",
    "start_date",
    "end_date",
}


def _clean_project_data(data: dict[str, object]) -> dict[str, object]:
    clean: dict[str, object] = {}
    for key, value in data.items():
        if value in ("", None):
            continue
        if key in PROJECT_ALLOWED_FIELDS:
            clean[key] = value
        elif key == "client" and hasattr(value, "id"):
            clean["client_id"] = value.id
    if "status" in clean:
        clean["status"] = ProjectStatus(clean["status"]).value
    return clean


def _check_dates(start: date, end: date | None) -> None:
    if end is not None and end < start:
        raise ValueError("Дата окончания проекта раньше даты начала")


def get_all_projects() -> ModelSelect:
    return Project.select().order_by(Project.start_date.desc())


def get_project_by_id(project_id: int) -> Project | None:
    return Project.get_or_none(Project.id == project_id)


def get_projects_by_client(client_id: int) -> ModelSelect:
    return Project.select().where(Project.client == client_id)


def add_project(**kwargs) -> Project:
    """Создать проект клиента."""
    clean = _clean_project_data(kwargs)
    if not clean.get("name"):
        raise ValueError("Поле 'name' обязательно для проекта")
    client_id = clean.get("client_id")
    if client_id is None or Client.get_or_none(Client.id == client_id) is None:
        raise ValueError("Проект должен быть привязан к существующему клиенту")
    clean.setdefault("start_date", date.today())
    _check_dates(clean["start_date"], clean.get("end_date"))

    project = Project.create(**clean)
    logger.info("📁 Создан проект #%s: %s", project.id, project.name)
    return project


def update_project(project: Project, **kwargs) -> Project:
    updates = _clean_project_data(kwargs)
    if not updates:
        return project
    _check_dates(
        updates.get("start_date", project.start_date),
        updates.get("end_date", project.end_date),
    )
    for key, value in updates.items():
        setattr(project, key, value)
    project.save()
    logger.info("✏️ Обновлён проект #%s", project.id)
    return project


def delete_project(project_id: int) -> bool:
    """Удалить проект вместе с задачами."""
    project = get_project_by_id(project_id)
    if project is None:
        logger.warning("❗ Проект с id=%s не найден для удаления", project_id)
        return False
    with db.atomic():
        project.delete_instance(recursive=True)
    logger.info("🗑 Проект #%s удалён", project_id)
    return True


def project_progress(project_id: int) -> int:
    """Процент выполненных задач проекта (0, если задач нет)."""
    base = Task.select().where(Task.project == project_id)
    total = base.count()
    if total == 0:
        return 0
    done = base.where(Task.status == TaskStatus.DONE.value).count()
    return round(done / total * 100)
