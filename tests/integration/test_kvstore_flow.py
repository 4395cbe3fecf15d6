"""
File: tests/integration/test_kvstore_flow.py
Fluxos ponta a ponta pela API HTTP com um Store real.
"""
import asyncio
import json

import httpx
import pytest
from prometheus_client import REGISTRY

from kvstore.api import create_api
from kvstore.models import RawValue
from kvstore.store import Store


def test_basic_flow(client):
    """Lista, grava, lê, remove e lê de novo."""
    response = client.get("/")
    assert response.status_code == 200
    assert response.text == "[]\n"

    response = client.put("/test", content=b"hello")
    assert response.status_code == 200

    response = client.get("/test")
    assert response.status_code == 200
    assert response.text == '"hello"\n'

    response = client.delete("/test")
    assert response.status_code == 200

    response = client.get("/test")
    assert response.status_code == 404


def test_json_round_trip(client):
    client.put("/k", content=b'{"a":1}')

    response = client.get("/k")

    assert response.status_code == 200
    assert json.loads(response.text) == {"a": 1}


def test_nested_json_round_trip(client):
    document = {"name": "x", "tags": ["a", "b"], "meta": {"n": 1.5, "ok": True, "none": None}}
    client.put("/doc", content=json.dumps(document).encode())

    assert client.get("/doc").json() == document


def test_raw_fallback_is_returned_as_json_string(client):
    client.put("/k", content=b"hello")

    assert client.get("/k").json() == "hello"


def test_json_string_body_is_stored_verbatim(client):
    """Corpo que é string JSON não é desembrulhado: as aspas são mantidas."""
    client.put("/k", content=b'"hello"')

    assert client.get("/k").json() == '"hello"'


def test_list_after_writes(client):
    for key in ("key1", "key2", "key3"):
        client.put(f"/{key}", content=b"v")

    response = client.get("/")

    assert sorted(response.json()) == ["key1", "key2", "key3"]


def test_overwrite_changes_representation(client, store):
    client.put("/k", content=b'{"a": 1}')
    client.put("/k", content=b"plain")

    assert store.get("k") == RawValue(text="plain")
    assert client.get("/k").json() == "plain"


def test_delete_missing_key_returns_404(client, store):
    response = client.delete("/not-found")

    assert response.status_code == 404
    assert store.list_keys() == []


def test_delete_existing_key_removes_it(client, store):
    store.set("test", RawValue(text="value"))

    response = client.delete("/test")

    assert response.status_code == 200
    assert store.get("test") is None


def test_uninitialized_store_returns_500(make_client):
    store = Store()
    store.data = None
    client = make_client(store)

    assert client.get("/").text == "error - getting all keys\n"
    assert client.get("/k").status_code == 500
    assert client.put("/k", content=b"v").text == "error - putting kv pair\n"
    assert client.put("/k", content=b"{}").text == "error - putting json kv pair\n"
    assert client.delete("/k").text == "error - getting key\n"


def test_server_keeps_serving_after_errors(make_client):
    """Uma requisição com erro não afeta a seguinte."""
    store = Store()
    client = make_client(store)
    store.data = None
    assert client.get("/k").status_code == 500

    store.data = {}
    assert client.put("/k", content=b"v").status_code == 200
    assert client.get("/k").json() == "v"


@pytest.mark.asyncio
async def test_concurrent_requests():
    """Muitas requisições simultâneas veem um store consistente."""
    store = Store()
    app = create_api(store)
    transport = httpx.ASGITransport(app=app)

    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        writes = [client.put(f"/key-{i}", content=f'{{"i": {i}}}'.encode()) for i in range(50)]
        reads = [client.get("/") for _ in range(20)]
        responses = await asyncio.gather(*writes, *reads)

        assert all(r.status_code == 200 for r in responses)

        keys = (await client.get("/")).json()
        assert len(keys) == 50

        response = await client.get("/key-7")
        assert response.json() == {"i": 7}


def test_float_overflow_body_is_stored_as_text(client, store):
    """Objeto com número fora do alcance do float é guardado como texto e continua legível."""
    body = b'{"a": 1e400}'

    response = client.put("/big", content=body)
    assert response.status_code == 200

    response = client.get("/big")
    assert response.status_code == 200
    assert response.json() == body.decode()
    assert store.get("big") == RawValue(text=body.decode())


def test_keys_gauge_follows_writes_and_deletes(client):
    """O gauge kvstore_keys acompanha o número de chaves."""
    client.put("/g1", content=b"v")
    client.put("/g2", content=b'{"a": 1}')
    assert REGISTRY.get_sample_value("kvstore_keys") == 2

    client.put("/g1", content=b"other")
    assert REGISTRY.get_sample_value("kvstore_keys") == 2

    client.delete("/g1")
    assert REGISTRY.get_sample_value("kvstore_keys") == 1

    client.delete("/missing")
    assert REGISTRY.get_sample_value("kvstore_keys") == 1
