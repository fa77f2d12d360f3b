import re

ADMIN_PASSWORD = "s3cret-pass"


def login(client, username="admin", password=ADMIN_PASSWORD, prefix=""):
    return client.post(f"{prefix}/login", data={"username": username, "password": password})


def csrf_from(html: str) -> str:
    match = re.search(r'name="csrf_token" value="([0-9a-f]+)"', html)
    assert match, "csrf token not found in page"
    return match.group(1)
