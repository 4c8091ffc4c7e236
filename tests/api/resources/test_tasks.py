from datetime import date, timedelta
from conftest import auth_header, create_user, login


async def setup_project(client, email="user@example.com"):
    token = (await login(client, email=email))["accessToken"]
    response = await client.post("/api/projects", json={"name": "Project"}, headers=auth_header(token))
    return token, response.json()["data"]["project"]


async def test_task_crud(client, test_user):
    token, project = await setup_project(client)

    response = await client.post("/api/tasks", json={
        "project_id": project["id"],
        "title": "Write docs",
        "description": "All of them",
        "due_date": date.today().isoformat()
    }, headers=auth_header(token))
    assert response.status_code == 201
    task = response.json()["data"]["task"]
    assert task["status"] == "pending"
    assert task["priority"] == "medium"
    assert task["project"] == {"id": project["id"], "name": "Project"}

    response = await client.put(f"/api/tasks/{task['id']}", json={"status": "done", "due_date": None},
                                headers=auth_header(token))
    assert response.status_code == 200
    assert response.json()["data"]["task"]["status"] == "done"
    assert response.json()["data"]["task"]["due_date"] is None

    response = await client.delete(f"/api/tasks/{task['id']}", headers=auth_header(token))
    assert response.status_code == 200
    response = await client.get(f"/api/tasks/{task['id']}", headers=auth_header(token))
    assert response.status_code == 404


async def test_list_tasks_filters(client, test_user):
    token, project = await setup_project(client)
    for title, priority in (("a", "low"), ("b", "urgent")):
        await client.post("/api/tasks", json={
            "project_id": project["id"], "title": title, "description": "d", "priority": priority
        }, headers=auth_header(token))

    response = await client.get("/api/tasks", params={"priority": "urgent"}, headers=auth_header(token))

    assert response.status_code == 200
    assert [t["title"] for t in response.json()["data"]["tasks"]] == ["b"]


async def test_list_tasks_rejects_unknown_status(client, test_user):
    token, _ = await setup_project(client)

    response = await client.get("/api/tasks", params={"status": "archived"}, headers=auth_header(token))

    assert response.status_code == 422
    assert "status" in response.json()["data"]["errors"]


async def test_create_task_in_missing_project(client, test_user):
    token, _ = await setup_project(client)

    response = await client.post("/api/tasks", json={"project_id": 9999, "title": "t", "description": "d"},
                                 headers=auth_header(token))

    assert response.status_code == 422
    assert "project_id" in response.json()["data"]["errors"]


async def test_create_task_in_other_users_project(client, session, test_user):
    create_user(session, email="intruder@example.com")
    _, project = await setup_project(client)
    intruder_token = (await login(client, email="intruder@example.com"))["accessToken"]

    response = await client.post("/api/tasks", json={"project_id": project["id"], "title": "t", "description": "d"},
                                 headers=auth_header(intruder_token))

    assert response.status_code == 403


async def test_due_date_in_the_past_rejected(client, test_user):
    token, project = await setup_project(client)
    yesterday = (date.today() - timedelta(days=1)).isoformat()

    response = await client.post("/api/tasks", json={
        "project_id": project["id"], "title": "t", "description": "d", "due_date": yesterday
    }, headers=auth_header(token))

    assert response.status_code == 422
    assert "due_date" in response.json()["data"]["errors"]


async def test_invalid_priority_rejected(client, test_user):
    token, project = await setup_project(client)

    response = await client.post("/api/tasks", json={
        "project_id": project["id"], "title": "t", "description": "d", "priority": "critical"
    }, headers=auth_header(token))

    assert response.status_code == 422
    assert "priority" in response.json()["data"]["errors"]
