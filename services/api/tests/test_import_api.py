from datetime import date

from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from tocr.api.routes import magazine_import as import_routes
from tocr.models.magazine import Magazine

CSV = (
    "magazine_name,issn,issue_number,publish_date,page_count,is_active\n"
    "電玩通,1234-5678,42,2024-01-15,120,是\n"
    "電玩通,1234-5678,42,2024-01-15,120,是\n"
    "電玩通,1234-5678,43,2024-02-15,,是\n"
    "遊戲世界,,100,2024-01-20,,\n"
).encode("utf-8")

PAYLOAD = {
    "magazines": [
        {
            "name": "電玩通",
            "issn": "1234-5678",
            "isActive": True,
            "issues": [
                {"issueNumber": "42", "publishDate": "2024-01-15", "pageCount": 120},
                {"issueNumber": "43", "publishDate": "2024-02-15"},
            ],
        },
        {"name": "遊戲世界", "issues": [{"issueNumber": "100", "publishDate": "2024-01-20"}]},
    ]
}


def _preview(client, headers, content=CSV):
    return client.post(
        "/v1/import/magazines-issues/preview",
        files={"file": ("magazines.csv", content, "text/csv")},
        headers=headers,
    )


def test_preview_returns_camel_case_parse_result(client, editor_headers):
    r = _preview(client, editor_headers)
    assert r.status_code == 200, r.text
    body = r.json()

    assert body["totalRows"] == 4
    assert body["errors"] == []
    assert body["warnings"][0]["row"] == 3
    first = body["magazines"][0]
    assert first["name"] == "電玩通"
    assert first["isActive"] is True
    assert [i["issueNumber"] for i in first["issues"]] == ["42", "43"]
    assert first["issues"][0]["pageCount"] == 120
    assert first["issues"][0]["publishDate"] == "2024-01-15"
    assert body["magazines"][1]["isActive"] is None


def test_preview_reports_fatal_parse_as_row_zero(client, editor_headers):
    r = _preview(client, editor_headers, content=b"\xff\xfe\xfa")
    assert r.status_code == 200
    body = r.json()
    assert body["magazines"] == []
    assert body["errors"][0]["row"] == 0


def test_import_creates_then_skips(client, editor_headers):
    r = client.post("/v1/import/magazines-issues", json=PAYLOAD, headers=editor_headers)
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["createdMagazines"] == 2
    assert body["createdIssues"] == 3
    assert body["details"][0]["magazineName"] == "電玩通"
    assert body["details"][0]["status"] == "created"
    assert body["details"][0]["issues"][0] == {"issueNumber": "42", "status": "created"}

    r = client.post("/v1/import/magazines-issues", json=PAYLOAD, headers=editor_headers)
    assert r.status_code == 201
    body = r.json()
    assert body["createdMagazines"] == 0
    assert body["skippedMagazines"] == 2
    assert body["createdIssues"] == 0
    assert body["skippedIssues"] == 3
    assert {d["status"] for d in body["details"]} == {"existed"}


def test_import_rejects_invalid_payload(client, editor_headers):
    bad = {"magazines": [{"name": "", "issues": [{"issueNumber": "1", "publishDate": "nope"}]}]}
    r = client.post("/v1/import/magazines-issues", json=bad, headers=editor_headers)
    assert r.status_code == 400
    body = r.json()
    assert body["error"] == "Validation failed"
    assert isinstance(body["details"], list)
    assert len(body["details"]) >= 2


def test_import_requires_magazines_list(client, editor_headers):
    r = client.post("/v1/import/magazines-issues", json={}, headers=editor_headers)
    assert r.status_code == 400
    assert r.json()["error"] == "Validation failed"


def test_import_storage_failure_is_500(client, editor_headers, monkeypatch):
    def boom(db, magazines):
        raise OperationalError("INSERT", {}, Exception("disk full"))

    monkeypatch.setattr(import_routes, "import_magazines", boom)
    r = client.post("/v1/import/magazines-issues", json=PAYLOAD, headers=editor_headers)
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to import magazines and issues"}


def test_import_requires_authentication(client):
    r = client.post("/v1/import/magazines-issues", json=PAYLOAD)
    assert r.status_code == 401

    r = _preview(client, {})
    assert r.status_code == 401


def test_import_requires_editor_role(client, viewer_headers):
    r = client.post("/v1/import/magazines-issues", json=PAYLOAD, headers=viewer_headers)
    assert r.status_code == 403

    r = _preview(client, viewer_headers)
    assert r.status_code == 403


def test_session_cookie_is_accepted(client, editor_headers):
    token = editor_headers["Authorization"].split(" ", 1)[1]
    client.cookies.set("tocr_session", token)
    try:
        r = _preview(client, {})
    finally:
        client.cookies.clear()
    assert r.status_code == 200


def test_invalid_token_is_rejected(client):
    r = _preview(client, {"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_previewed_unpadded_dates_import(client, db_session, editor_headers):
    csv_bytes = b"magazine_name,issue_number,publish_date,founded_date\nA,1,2024/1/5,1990/5/1\n"
    preview = _preview(client, editor_headers, content=csv_bytes).json()
    assert preview["errors"] == []

    r = client.post(
        "/v1/import/magazines-issues",
        json={"magazines": preview["magazines"]},
        headers=editor_headers,
    )
    assert r.status_code == 201, r.text

    mag = db_session.execute(select(Magazine).where(Magazine.name == "A")).scalar_one()
    assert mag.founded_date == date(1990, 5, 1)
    assert mag.issues[0].publish_date == date(2024, 1, 5)


def test_blank_optional_strings_are_unset(client, db_session, editor_headers):
    payload = {
        "magazines": [
            {
                "name": "No ISSN one",
                "issn": "",
                "foundedDate": "",
                "publisher": "  ",
                "issues": [{"issueNumber": "1", "publishDate": "2024-01-01", "notes": ""}],
            },
            {
                "name": "No ISSN two",
                "issn": " ",
                "issues": [{"issueNumber": "1", "publishDate": "2024-01-01"}],
            },
        ]
    }
    r = client.post("/v1/import/magazines-issues", json=payload, headers=editor_headers)
    assert r.status_code == 201, r.text
    assert r.json()["createdMagazines"] == 2

    mags = db_session.execute(select(Magazine).order_by(Magazine.name)).scalars().all()
    assert [m.issn for m in mags] == [None, None]
    assert mags[0].founded_date is None
    assert mags[0].publisher is None
    assert mags[0].issues[0].notes is None


def test_non_object_body_is_400(client, editor_headers):
    r = client.post("/v1/import/magazines-issues", json=[PAYLOAD], headers=editor_headers)
    assert r.status_code == 400
    assert r.json()["error"] == "Validation failed"


def test_whitespace_only_required_values_are_400(client, editor_headers):
    bad = {
        "magazines": [
            {"name": " ", "issues": [{"issueNumber": "1", "publishDate": "2024-01-01"}]},
            {"name": "B", "issues": [{"issueNumber": "  ", "publishDate": "2024-01-01"}]},
        ]
    }
    r = client.post("/v1/import/magazines-issues", json=bad, headers=editor_headers)
    assert r.status_code == 400
    locs = [tuple(d["loc"]) for d in r.json()["details"]]
    assert ("magazines", 0, "name") in locs
    assert ("magazines", 1, "issues", 0, "issueNumber") in locs


def test_import_trims_identity_values(client, db_session, editor_headers):
    payload = {
        "magazines": [
            {"name": " Trimmed ", "issues": [{"issueNumber": " 7 ", "publishDate": "2024-01-01"}]}
        ]
    }
    r = client.post("/v1/import/magazines-issues", json=payload, headers=editor_headers)
    assert r.status_code == 201
    body = r.json()
    assert body["details"][0]["magazineName"] == "Trimmed"
    assert body["details"][0]["issues"][0]["issueNumber"] == "7"
