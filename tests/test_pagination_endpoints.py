from __future__ import annotations


def test_breaks_endpoint_single_pass(client, uniform_payload):
    response = client.post(
        "/api/pagination/breaks",
        json={"lines": uniform_payload(10), "doc_size": 100},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["positions"] == [90]
    assert payload["total_height"] == 1000.0
    assert [page["position"] for page in payload["pages"]] == [0, 90]
    assert payload["soft_failure"] is None


def test_breaks_endpoint_is_stable_with_rendered_spacers(client, uniform_payload):
    lines = uniform_payload(30)
    for line in lines:
        line["top"] += 188.0 * sum(1 for spacer in (90, 180, 270) if line["start"] >= spacer)

    response = client.post(
        "/api/pagination/breaks",
        json={"lines": lines, "doc_size": 300, "ledger": [270, 90, 180]},
    )

    assert response.json()["positions"] == [90, 180, 270]


def test_breaks_endpoint_reports_soft_failure(client, uniform_payload):
    response = client.post(
        "/api/pagination/breaks",
        json={
            "lines": uniform_payload(30),
            "doc_size": 300,
            "unmeasurable": list(range(150, 200)),
        },
    )

    payload = response.json()
    assert payload["positions"] == [90]
    assert payload["soft_failure"] == "position_unmeasurable"


def test_settle_endpoint_converges(client, uniform_payload):
    response = client.post(
        "/api/pagination/settle",
        json={"lines": uniform_payload(28), "doc_size": 280},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["positions"] == [90, 180, 270]
    assert payload["page_count"] == 4
    assert payload["converged"] is True
    assert payload["outcomes"] == ["changed", "unchanged"]


def test_settle_endpoint_skips_hidden_container(client, uniform_payload):
    response = client.post(
        "/api/pagination/settle",
        json={
            "lines": uniform_payload(28),
            "doc_size": 280,
            "container_width": 0,
            "container_height": 0,
        },
    )

    payload = response.json()
    assert payload["positions"] == []
    assert payload["outcomes"] == ["skipped"]
    assert payload["converged"] is False


def test_settle_endpoint_fills_missing_container_height(client, uniform_payload):
    response = client.post(
        "/api/pagination/settle",
        json={"lines": uniform_payload(28), "doc_size": 280, "container_width": 0},
    )

    assert response.json()["outcomes"] == ["skipped"]


def test_invalid_layout_is_unprocessable(client):
    response = client.post(
        "/api/pagination/breaks",
        json={"lines": [{"start": 5, "top": 0, "height": 20}], "doc_size": 10},
    )

    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "bad_first_line"


def test_schema_validation_rejects_empty_lines(client):
    response = client.post("/api/pagination/breaks", json={"lines": [], "doc_size": 10})

    assert response.status_code == 422
