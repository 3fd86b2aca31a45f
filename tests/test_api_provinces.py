"""HTTP tests for the province endpoints and the session-held country selection."""

BASE = "/api/v1"


def _payload(**overrides):
    payload = {
        "province_code": "MB",
        "name": "Manitoba",
        "country_code": "CA",
        "sales_tax_code": "PST",
        "sales_tax": 0.07,
        "includes_federal_tax": False,
        "first_postal_letter": "R",
    }
    payload.update(overrides)
    return payload


def test_path_country_is_remembered_for_later_listings(client):
    response = client.get(f"{BASE}/provinces/country/CA")
    assert response.status_code == 200
    body = response.json()
    assert body["source"] == "path"
    assert body["country_name"] == "Canada"
    assert [p["name"] for p in body["provinces"]] == ["Alberta", "British Columbia", "Ontario", "Quebec"]

    remembered = client.get(f"{BASE}/provinces")
    assert remembered.status_code == 200
    assert remembered.json()["source"] == "session"
    assert remembered.json()["country_code"] == "CA"
    assert remembered.json()["country_name"] == "Canada"


def test_query_country_is_not_remembered(client):
    client.get(f"{BASE}/provinces/country/CA")

    response = client.get(f"{BASE}/provinces", params={"CountryCode": "US"})
    assert response.json()["source"] == "query"
    assert [p["province_code"] for p in response.json()["provinces"]] == ["AL", "MI", "NY"]

    assert client.get(f"{BASE}/provinces").json()["country_code"] == "CA"


def test_listing_without_country_redirects_with_message_once(client):
    response = client.get(f"{BASE}/provinces", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"].endswith(f"{BASE}/countries")

    index = client.get(f"{BASE}/countries").json()
    assert index["message"] == "Please select a country to view provinces"
    assert [c["name"] for c in index["countries"]] == ["Canada", "Mexico", "United States"]

    assert client.get(f"{BASE}/countries").json()["message"] is None


def test_unknown_path_country_is_not_found_and_not_remembered(client):
    response = client.get(f"{BASE}/provinces/country/ZZ")

    assert response.status_code == 404
    assert response.json()["error"]["type"] == "not_found"
    assert client.get(f"{BASE}/provinces", follow_redirects=False).status_code == 303


def test_get_province_includes_country(client):
    response = client.get(f"{BASE}/provinces/QC")

    assert response.status_code == 200
    assert response.json()["country"] == {"country_code": "CA", "name": "Canada"}
    assert response.json()["row_version"] == 1


def test_mutations_require_csrf_token(client):
    response = client.post(f"{BASE}/provinces", json=_payload())

    assert response.status_code == 403
    assert client.get(f"{BASE}/provinces/MB").status_code == 404


def test_create_province(client, csrf_headers):
    response = client.post(f"{BASE}/provinces", json=_payload(name="  Manitoba "), headers=csrf_headers)

    assert response.status_code == 201
    assert response.json()["name"] == "Manitoba"
    assert response.json()["country"]["name"] == "Canada"


def test_create_duplicate_reports_every_field(client, csrf_headers):
    response = client.post(
        f"{BASE}/provinces",
        json=_payload(province_code="ON", name="Quebec"),
        headers=csrf_headers,
    )

    assert response.status_code == 422
    error = response.json()["error"]
    assert error["type"] == "validation_failed"
    assert set(error["details"]["fields"]) == {"province_code", "name"}
    assert error["details"]["submitted"]["name"] == "Quebec"


def test_update_with_mismatched_code_is_not_found(client, csrf_headers):
    response = client.put(
        f"{BASE}/provinces/ON",
        json=_payload(province_code="QC", name="Ontario"),
        headers=csrf_headers,
    )

    assert response.status_code == 404
    assert client.get(f"{BASE}/provinces/ON").json()["row_version"] == 1


def test_update_then_stale_update_conflicts(client, csrf_headers):
    first = client.put(
        f"{BASE}/provinces/ON",
        json=_payload(province_code="ON", name="Ontario", sales_tax=0.14, row_version=1),
        headers=csrf_headers,
    )
    assert first.status_code == 200
    assert first.json()["row_version"] == 2

    stale = client.put(
        f"{BASE}/provinces/ON",
        json=_payload(province_code="ON", name="Ontario", sales_tax=0.15, row_version=1),
        headers=csrf_headers,
    )
    assert stale.status_code == 409
    assert stale.json()["error"]["type"] == "concurrency_conflict"
    assert client.get(f"{BASE}/provinces/ON").json()["sales_tax"] == 0.14


def test_confirm_then_delete(client, csrf_headers):
    confirm = client.get(f"{BASE}/provinces/AB/delete")
    assert confirm.status_code == 200
    assert confirm.json()["name"] == "Alberta"

    assert client.delete(f"{BASE}/provinces/AB", headers=csrf_headers).status_code == 204
    assert client.get(f"{BASE}/provinces/AB/delete").status_code == 404
    assert client.delete(f"{BASE}/provinces/AB", headers=csrf_headers).status_code == 404


def test_responses_carry_correlation_id(client):
    response = client.get(f"{BASE}/health", headers={"X-Correlation-ID": "abc-123"})

    assert response.headers["X-Correlation-ID"] == "abc-123"
    assert response.json()["message"] == "Healthy"


def test_reserved_province_code_is_rejected(client, csrf_headers):
    response = client.post(f"{BASE}/provinces", json=_payload(province_code="country"), headers=csrf_headers)

    assert response.status_code == 422
    assert response.json()["error"]["type"] == "validation_error"


def test_update_to_unknown_country_reports_country_field(client, csrf_headers):
    response = client.put(
        f"{BASE}/provinces/ON",
        json=_payload(province_code="ON", name="Ontario", country_code="ZZ"),
        headers=csrf_headers,
    )

    assert response.status_code == 422
    assert list(response.json()["error"]["details"]["fields"]) == ["country_code"]
    assert client.get(f"{BASE}/provinces/ON").json()["country"]["name"] == "Canada"
