"""
Configuração global para testes.
Contém fixtures compartilhadas entre testes unitários e de integração.
"""
import logging
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from kvstore.api import create_api
from kvstore.models import RawValue, Value
from kvstore.store import Store, StoreError

# Configurar logging para testes
logging.basicConfig(level=logging.INFO)


class FakeStore:
    """
    Store simulado que conta as chamadas recebidas e pode falhar sob demanda.
    """

    def __init__(self, empty: bool = False, should_error: bool = False,
                 get_should_error: bool = False, delete_should_error: bool = False):
        # Contadores
        self.get_calls = 0
        self.list_keys_calls = 0
        self.set_calls = 0
        self.delete_calls = 0

        # Argumentos recebidos
        self.get_key_arg: Optional[str] = None
        self.set_key_arg: Optional[str] = None
        self.set_value_arg: Optional[Value] = None
        self.delete_key_arg: Optional[str] = None

        # Opções
        self.empty = empty
        self.should_error = should_error
        self.get_should_error = get_should_error
        self.delete_should_error = delete_should_error

    def get(self, key: str) -> Optional[Value]:
        self.get_calls += 1
        self.get_key_arg = key

        if self.should_error or self.get_should_error:
            raise StoreError("error")

        if key == "not-found":
            return None

        return RawValue(text="hello")

    def list_keys(self) -> List[str]:
        self.list_keys_calls += 1

        if self.should_error:
            raise StoreError("error")

        if self.empty:
            return []

        return ["hello", "world"]

    def set(self, key: str, value: Value) -> None:
        self.set_calls += 1
        self.set_key_arg = key
        self.set_value_arg = value

        if self.should_error:
            raise StoreError("error")

    def delete(self, key: str) -> None:
        self.delete_calls += 1
        self.delete_key_arg = key

        if self.should_error or self.delete_should_error:
            raise StoreError("error")

    def __len__(self) -> int:
        return 0 if self.empty else 2


@pytest.fixture
def store():
    """Store real e vazio."""
    return Store()


@pytest.fixture
def fake_store():
    """Store simulado com comportamento padrão."""
    return FakeStore()


@pytest.fixture
def make_client():
    """Cria um TestClient para a API ligada ao store informado."""
    def _make(backend) -> TestClient:
        return TestClient(create_api(backend))
    return _make


@pytest.fixture
def client(store, make_client):
    """TestClient ligado a um Store real."""
    return make_client(store)


@pytest.fixture
def make_fake_store():
    """Fábrica de stores simulados com opções de falha."""
    return FakeStore
