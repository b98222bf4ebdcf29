from tests.helpers import create_evaluation, create_user, login_headers, seed_org


def test_me_returns_identity(db_session, client):
    org = seed_org(db_session)
    r = client.get("/me", headers=login_headers(db_session, org["mgr_user"]))
    assert r.status_code == 200
    body = r.json()
    assert body["role"] == "manager"
    assert body["role_display_name"] == "Manager"
    assert body["employee_id"] == str(org["mgr"].id)
    assert set(body["direct_report_ids"]) == {str(org["alice"].id), str(org["bob"].id)}


def test_me_for_user_without_employee_record(db_session, client):
    user = create_user(db_session, "contractor@local.test", "employee")
    r = client.get("/me", headers=login_headers(db_session, user))
    assert r.status_code == 200
    assert r.json()["employee_id"] is None


def test_navigation_by_role(db_session, client):
    org = seed_org(db_session)

    r = client.get("/me/navigation", headers=login_headers(db_session, org["hr_user"]))
    assert r.status_code == 200
    titles = [i["title"] for i in r.json()["items"]]
    assert "Administration" in titles

    r = client.get("/me/navigation", headers=login_headers(db_session, org["alice_user"]))
    titles = [i["title"] for i in r.json()["items"]]
    assert titles == ["Dashboard", "My Evaluations"]


def test_my_evaluations_by_involvement(db_session, client):
    org = seed_org(db_session)
    about_alice = create_evaluation(db_session, org["alice"], org["mgr_user"])
    written_by_manager = create_evaluation(db_session, org["bob"], org["mgr_user"])

    r = client.get("/me/evaluations", headers=login_headers(db_session, org["alice_user"]))
    assert [e["id"] for e in r.json()] == [str(about_alice.id)]

    headers = login_headers(db_session, org["mgr_user"])
    r = client.get("/me/evaluations?role=evaluator", headers=headers)
    assert {e["id"] for e in r.json()} == {str(about_alice.id), str(written_by_manager.id)}

    r = client.get("/me/evaluations?role=subject", headers=headers)
    assert r.json() == []


def test_my_evaluations_never_lists_what_detail_refuses(db_session, client):
    org = seed_org(db_session)
    # written under the manager's own boss, so the stored manager is hr
    e = create_evaluation(db_session, org["mgr"], org["hr_user"])
    headers = login_headers(db_session, org["mgr_user"])

    assert client.get(f"/evaluations/{e.id}", headers=headers).status_code == 403

    for query in ("", "?role=subject"):
        r = client.get(f"/me/evaluations{query}", headers=headers)
        assert r.status_code == 200
        assert str(e.id) not in [row["id"] for row in r.json()]


def test_my_evaluations_rejects_unknown_filters(db_session, client):
    org = seed_org(db_session)
    headers = login_headers(db_session, org["alice_user"])

    assert client.get("/me/evaluations?role=bogus", headers=headers).status_code == 422
    assert client.get("/me/evaluations?status=archived", headers=headers).status_code == 422


def test_my_evaluations_status_filter(db_session, client):
    org = seed_org(db_session)
    create_evaluation(db_session, org["alice"], org["mgr_user"])
    submitted = create_evaluation(db_session, org["alice"], org["mgr_user"], status="submitted")

    r = client.get("/me/evaluations?status=submitted", headers=login_headers(db_session, org["alice_user"]))
    assert [row["id"] for row in r.json()] == [str(submitted.id)]
