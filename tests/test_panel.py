from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from boilerplate import BoilerplateProvider, Item, MenuItem

from tests.helpers import csrf_from, login


def test_anonymous_user_is_sent_to_login(client) -> None:
    response = client.get("/", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/login"

    page = client.get("/")
    assert page.status_code == 200
    assert 'name="password"' in page.text


def test_failed_login(client) -> None:
    response = login(client, password="wrong")
    assert response.status_code == 401
    assert "These credentials do not match our records." in response.text
    assert client.get("/", follow_redirects=False).status_code == 303


def test_dashboard_renders_composed_menu(admin_client) -> None:
    page = admin_client.get("/")
    assert page.status_code == 200
    html = page.text
    assert "Welcome, admin" in html
    assert 'data-key="users"' in html
    assert 'data-key="logs"' in html
    assert html.index('data-key="users"') < html.index('data-key="logs"')
    assert "card card-info card-outline" in html


def test_menu_follows_permissions(client, users) -> None:
    import asyncio
    asyncio.run(users.create_user("viewer", "viewer-pass", ["backend_user"]))

    assert login(client, "viewer", "viewer-pass").status_code == 200
    html = client.get("/").text
    assert 'data-key="users"' not in html
    assert 'data-key="logs"' not in html

    assert client.get("/users").status_code == 403
    assert client.get("/logs").status_code == 403


def test_user_without_backend_access_is_refused(client, users) -> None:
    import asyncio
    asyncio.run(users.create_user("guest", "guest-pass", []))

    login(client, "guest", "guest-pass")
    assert client.get("/").status_code == 403


def test_host_items_and_navbar_are_rendered(provider) -> None:
    provider.register()
    provider.menu_items.register([Item("reports", MenuItem(label="Reports", url="/reports"), order=1)])
    provider.navbar_items.register([Item("docs", {"label": "Docs", "url": "/docs", "icon": "book"})])
    app = FastAPI()
    provider.boot(app)
    client = TestClient(app)
    login(client)

    html = client.get("/").text
    assert html.index('data-key="reports"') < html.index('data-key="users"')
    assert 'href="/docs"' in html


def test_locale_switch(admin_client) -> None:
    html = admin_client.get("/?lang=fr").text
    assert "Utilisateurs" in html
    assert '<html lang="fr">' in html
    # stored in session
    assert "Utilisateurs" in admin_client.get("/").text


def test_accept_language_header(admin_client) -> None:
    html = admin_client.get("/", headers={"Accept-Language": "fr-FR,fr;q=0.9"}).text
    assert "Tableau de bord" in html


def test_users_list_and_api(admin_client) -> None:
    page = admin_client.get("/users")
    assert page.status_code == 200
    assert "<td>admin</td>" in page.text
    assert "boilerplateDatatablesLocale" in page.text

    data = admin_client.get("/api/users").json()
    assert data["success"] is True
    assert data["data"][0]["username"] == "admin"
    assert "password_hash" not in data["data"][0]
    assert data["meta"] == {"page": 1, "per_page": 25, "total": 1}

    empty_page = admin_client.get("/api/users?page=2&per_page=1").json()
    assert empty_page["data"] == []
    assert empty_page["meta"]["total"] == 1

    missing = admin_client.get("/api/users/nobody")
    assert missing.status_code == 404
    assert missing.json()["success"] is False


def test_create_user(admin_client) -> None:
    token = csrf_from(admin_client.get("/users/create").text)

    response = admin_client.post("/users/create", data={
        "csrf_token": token, "username": "jane", "password": "jane-pass", "role": "backend_user",
    })
    assert response.status_code == 200
    assert "User created" in response.text
    assert "<td>jane</td>" in response.text

    again = admin_client.post("/users/create", data={
        "csrf_token": token, "username": "jane", "password": "x",
    })
    assert "This user already exists" in again.text


def test_create_user_requires_csrf(admin_client) -> None:
    response = admin_client.post("/users/create", data={"username": "x", "password": "y"})
    assert response.status_code == 403


def test_readonly_provider_cannot_create(config) -> None:
    app = FastAPI()
    BoilerplateProvider(config=config).boot(app)
    client = TestClient(app)
    login(client)

    page = client.get("/users/create")
    assert "does not allow creating users" in page.text
    token = csrf_from(client.get("/login").text)
    response = client.post("/users/create", data={"csrf_token": token, "username": "x", "password": "y"})
    assert "does not allow creating users" in response.text


def test_logout(admin_client) -> None:
    admin_client.get("/logout")
    assert admin_client.get("/", follow_redirects=False).status_code == 303


def test_guards_on_host_routes(provider, users) -> None:
    import asyncio
    provider.register()
    app = FastAPI()

    @app.get("/reports", dependencies=[Depends(provider.middleware("role")("admin"))])
    async def reports():
        return {"ok": True}

    @app.get("/audit", dependencies=[Depends(provider.middleware("ability")(["auditor"], ["users_crud"]))])
    async def audit():
        return {"ok": True}

    provider.boot(app)
    asyncio.run(users.create_user("ed", "ed-pass", ["backend_user"]))
    client = TestClient(app)

    login(client)
    assert client.get("/reports").json() == {"ok": True}
    assert client.get("/audit").json() == {"ok": True}

    client.get("/logout")
    login(client, "ed", "ed-pass")
    assert client.get("/reports").status_code == 403
    assert client.get("/audit").status_code == 403


def test_prefixed_panel(config, users) -> None:
    app = FastAPI()
    BoilerplateProvider(config=config, user_provider=users,
                        overrides={"app": {"prefix": "/admin"}}).boot(app)
    client = TestClient(app)

    assert client.get("/admin/", follow_redirects=False).headers["location"] == "/admin/login"
    assert login(client, prefix="/admin").status_code == 200
    html = client.get("/admin/").text
    assert 'href="/admin/users"' in html
    assert client.get("/admin/assets/boilerplate/boilerplate.css").status_code == 200


EDITOR_ROLES = {
    "admin": ["*"],
    "backend_user": ["backend_access"],
    "editor": ["backend_access", "users_crud"],
}


def editor_client(config):
    import asyncio
    from boilerplate import MemoryUserProvider

    users = MemoryUserProvider(config)
    asyncio.run(users.create_user("ed", "ed-pass", ["editor"]))
    app = FastAPI()
    BoilerplateProvider(config=config, user_provider=users,
                        overrides={"roles": {"roles": EDITOR_ROLES}}).boot(app)
    client = TestClient(app)
    assert login(client, "ed", "ed-pass").status_code == 200
    return client


def test_user_manager_cannot_grant_roles_above_their_own(config) -> None:
    client = editor_client(config)
    assert client.get("/logs").status_code == 403

    page = client.get("/users/create").text
    assert 'value="backend_user"' in page
    assert 'value="editor"' in page
    assert 'value="admin"' not in page
    token = csrf_from(page)

    for role in ("admin", "nonsense"):
        response = client.post("/users/create", data={
            "csrf_token": token, "username": f"new-{role}", "password": "pw", "role": role,
        })
        assert "You are not allowed to assign this role" in response.text
        assert client.get(f"/api/users/new-{role}").status_code == 404

    response = client.post("/users/create", data={
        "csrf_token": token, "username": "helper", "password": "pw", "role": "backend_user",
    })
    assert "User created" in response.text
    assert client.get("/api/users/helper").json()["data"]["roles"] == ["backend_user"]


def test_admin_can_grant_admin_role(admin_client) -> None:
    page = admin_client.get("/users/create").text
    assert 'value="admin"' in page

    admin_client.post("/users/create", data={
        "csrf_token": csrf_from(page), "username": "root2", "password": "pw", "role": "admin",
    })
    assert admin_client.get("/api/users/root2").json()["data"]["roles"] == ["admin"]


def test_blank_username_is_rejected(admin_client) -> None:
    token = csrf_from(admin_client.get("/users/create").text)
    response = admin_client.post("/users/create", data={
        "csrf_token": token, "username": "   ", "password": "pw",
    })
    assert "The username cannot be empty" in response.text
    usernames = [u["username"] for u in admin_client.get("/api/users").json()["data"]]
    assert usernames == ["admin"]
