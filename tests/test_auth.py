API = "/api/v1/auth"

def test_register_login_and_me(client):
    response = client.post(f"{API}/register", json={"email": "Nuevo@IPV.local", "password": "secreto123"})

    assert response.status_code == 201
    assert response.json()["user"]["email"] == "nuevo@ipv.local"
    assert response.json()["user"]["role"] == "user"

    login = client.post(f"{API}/login-json", json={"email": "nuevo@ipv.local", "password": "secreto123"})
    assert login.status_code == 200
    token = login.json()["access_token"]

    me = client.get(f"{API}/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["email"] == "nuevo@ipv.local"

def test_register_duplicate_email_conflicts(client, seller):
    response = client.post(f"{API}/register", json={"email": seller.email, "password": "secreto123"})
    assert response.status_code == 409

def test_form_login_and_wrong_password(client, seller):
    ok = client.post(f"{API}/login", data={"username": seller.email, "password": "secreto123"})
    assert ok.status_code == 200
    assert ok.json()["token_type"] == "bearer"

    bad = client.post(f"{API}/login", data={"username": seller.email, "password": "incorrecta"})
    assert bad.status_code == 401

def test_invalid_token_is_rejected(client):
    response = client.get(f"{API}/me", headers={"Authorization": "Bearer no-es-un-token"})
    assert response.status_code == 401

def test_login_ignores_email_case_and_spaces(client):
    client.post(f"{API}/register", json={"email": "Ana@Ipv.local", "password": "secreto123"})

    json_login = client.post(f"{API}/login-json", json={"email": "Ana@Ipv.local", "password": "secreto123"})
    form_login = client.post(f"{API}/login", data={"username": " ANA@ipv.local ", "password": "secreto123"})

    assert json_login.status_code == 200
    assert form_login.status_code == 200
