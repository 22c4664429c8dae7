from datetime import date, datetime

import pytest

from database.models import Client, Task, TaskStatus
from services import project_service as ps
from services import task_service as ts


@pytest.fixture()
def client(in_memory_db):
    return Client.create(
        name="Mario",
        surname="Rossi",
        email="mario@example.com",
        start_date=datetime(2024, 1, 1),
        end_date=datetime(2024, 12, 31),
    )


def test_add_project_defaults(client):
    project = ps.add_project(name="Sito web", client=client)

    assert project.client_id == client.id
    assert project.status == "planning"
    assert project.start_date == date.today()


def test_add_project_requires_client(in_memory_db):
    with pytest.raises(ValueError):
        ps.add_project(name="Orfano", client_id=123)


def test_add_project_rejects_end_before_start(client):
    with pytest.raises(ValueError):
        ps.add_project(
            name="Sito",
            client_id=client.id,
            start_date=date(2024, 5, 1),
            end_date=date(2024, 4, 1),
        )


def test_update_project_rejects_end_before_start(client):
    project = ps.add_project(name="Sito", client_id=client.id, start_date=date(2024, 5, 1))

    with pytest.raises(ValueError):
        ps.update_project(project, end_date=date(2024, 1, 1))
    with pytest.raises(ValueError):
        ps.update_project(project, start_date=date(2024, 6, 1), end_date=date(2024, 5, 15))

    fresh = ps.get_project_by_id(project.id)
    assert fresh.start_date == date(2024, 5, 1)
    assert fresh.end_date is None

    ps.update_project(project, end_date=date(2024, 5, 31))
    assert ps.get_project_by_id(project.id).end_date == date(2024, 5, 31)


def test_project_progress_and_task_order(client):
    project = ps.add_project(name="Sito", client_id=client.id, status="active")
    assert ps.project_progress(project.id) == 0

    first = ts.add_task(project_id=project.id, title="Bozza")
    ts.add_task(project_id=project.id, title="Revisione")
    ts.add_task(project_id=project.id, title="Pubblicazione")

    ts.toggle_task(first)
    assert ts.get_task_by_id(first.id).status == TaskStatus.DONE.value
    assert ps.project_progress(project.id) == 33

    titles = [t.title for t in ts.get_project_tasks(project.id)]
    assert titles == ["Revisione", "Pubblicazione", "Bozza"]

    ts.toggle_task(ts.get_task_by_id(first.id))
    assert ts.get_task_by_id(first.id).status == TaskStatus.TODO.value


def test_add_task_requires_title_and_project(client):
    project = ps.add_project(name="Sito", client_id=client.id)
    with pytest.raises(ValueError):
        ts.add_task(project_id=project.id, title="")
    with pytest.raises(ValueError):
        ts.add_task(project_id=999, title="Nulla")


def test_update_and_delete(client):
    project = ps.add_project(name="Sito", client_id=client.id)
    task = ts.add_task(project=project, title="Bozza")

    ps.update_project(project, status="completed", name="Sito v2")
    ts.update_task(task, due_date=date(2024, 7, 1))

    assert ps.get_project_by_id(project.id).name == "Sito v2"
    assert ts.get_task_by_id(task.id).due_date == date(2024, 7, 1)
    assert list(ps.get_projects_by_client(client.id)) == [project]

    assert ps.delete_project(project.id)
    assert Task.select().count() == 0
    assert not ps.delete_project(project.id)
    assert not ts.delete_task(task.id)
