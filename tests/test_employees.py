from tests.helpers import login_headers, seed_org


def _names(r):
    return [e["display_name"] for e in r.json()]


def test_list_employees_requires_auth(db_session, client):
    assert client.get("/employees").status_code == 401


def test_hr_admin_sees_everyone(db_session, client):
    org = seed_org(db_session)
    r = client.get("/employees", headers=login_headers(db_session, org["hr_user"]))
    assert r.status_code == 200
    assert len(r.json()) == 6


def test_manager_sees_self_and_direct_reports(db_session, client):
    org = seed_org(db_session)
    r = client.get("/employees", headers=login_headers(db_session, org["mgr_user"]))
    assert _names(r) == ["Alice", "Bob", "Manager"]


def test_manager_team_scope(db_session, client):
    org = seed_org(db_session)
    r = client.get("/employees?scope=team", headers=login_headers(db_session, org["mgr_user"]))
    assert _names(r) == ["Alice", "Bob"]


def test_employee_sees_only_self(db_session, client):
    org = seed_org(db_session)
    r = client.get("/employees", headers=login_headers(db_session, org["alice_user"]))
    assert _names(r) == ["Alice"]


def test_inactive_report_drops_out_of_team(db_session, client):
    org = seed_org(db_session)
    org["bob"].is_active = False
    db_session.commit()

    r = client.get("/employees?scope=team", headers=login_headers(db_session, org["mgr_user"]))
    assert _names(r) == ["Alice"]


def test_get_employee_enforces_access(db_session, client):
    org = seed_org(db_session)
    headers = login_headers(db_session, org["mgr_user"])

    r = client.get(f"/employees/{org['alice'].id}", headers=headers)
    assert r.status_code == 200
    assert r.json()["manager_id"] == str(org["mgr"].id)

    r = client.get(f"/employees/{org['carol'].id}", headers=headers)
    assert r.status_code == 403
    assert r.json()["error_code"] == "PERMISSION_DENIED"


def test_get_employee_not_found(db_session, client):
    org = seed_org(db_session)
    r = client.get(
        "/employees/00000000-0000-0000-0000-000000000000",
        headers=login_headers(db_session, org["hr_user"]),
    )
    assert r.status_code == 404


def test_hr_admin_team_scope_lists_direct_reports(db_session, client):
    org = seed_org(db_session)
    r = client.get("/employees?scope=team", headers=login_headers(db_session, org["hr_user"]))
    assert _names(r) == ["Manager", "Other Manager"]


def test_unknown_scope_is_422(db_session, client):
    org = seed_org(db_session)
    r = client.get("/employees?scope=everyone", headers=login_headers(db_session, org["mgr_user"]))
    assert r.status_code == 422
