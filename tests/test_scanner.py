"""The background page check that feeds the API."""

from __future__ import annotations

import json

from linkcheck.services.scanner import RESULT_TTL, run_scan, store_error


def test_run_scan_stores_every_result(stub_server, fake_redis) -> None:
    page = f"{stub_server.base_url}/page"

    outcome = run_scan(fake_redis, "task-1", page, {"timeout": 5, "workers": 2})

    stored = [json.loads(item) for item in fake_redis.lrange("task-1", 0, -1)]
    assert outcome["status"] == "completed"
    assert (outcome["total"], outcome["valid"], outcome["invalid"]) == (3, 2, 1)
    assert {item["url"].rsplit("/", 1)[-1]: item["status"] for item in stored} == {
        "ok": "valid",
        "notfound": "invalid",
        "nohead": "valid",
    }
    assert all(item["source"] == page for item in stored)
    assert fake_redis.expiry["task-1"] == RESULT_TTL


def test_run_scan_records_fetch_failures(stub_server, fake_redis) -> None:
    page = f"{stub_server.base_url}/missing-page"

    outcome = run_scan(fake_redis, "task-2", page, {"timeout": 5})

    stored = [json.loads(item) for item in fake_redis.lrange("task-2", 0, -1)]
    assert outcome["status"] == "error"
    assert outcome["total"] == 0
    assert stored[0]["status"] == "error"
    assert "404" in stored[0]["error"]


def test_store_error_shape(fake_redis) -> None:
    store_error(fake_redis, "task-3", "https://example.com", "boom")

    assert json.loads(fake_redis.lrange("task-3", 0, -1)[0]) == {
        "url": "https://example.com",
        "status": "error",
        "error": "boom",
        "source": "https://example.com",
    }


def test_run_scan_only_dead_stores_broken_links(stub_server, fake_redis) -> None:
    page = f"{stub_server.base_url}/page"

    outcome = run_scan(fake_redis, "task-4", page, {"timeout": 5}, only_dead=True)

    stored = [json.loads(item) for item in fake_redis.lrange("task-4", 0, -1)]
    assert (outcome["total"], outcome["valid"], outcome["invalid"]) == (1, 0, 1)
    assert [item["url"] for item in stored] == [f"{stub_server.base_url}/notfound"]
