"""
Shared fixtures: a fake PokéAPI served through httpx.MockTransport, and
fakes for the state machine's collaborators.
"""

import json

import httpx
import pytest

from pokedex_tui.dto import PokemonDetail
from pokedex_tui.entities import Roster
from pokedex_tui.repositories import MemoryStore
from pokedex_tui.services import CachedFetchGateway, PokeApiClient

BASE_URL = "https://pokeapi.co/api/v2"
SPRITE_BASE = "https://raw.githubusercontent.com/PokeAPI/sprites/master/sprites/pokemon"


def named(name: str, kind: str, ident: int = 1) -> dict:
    return {"name": name, "url": f"{BASE_URL}/{kind}/{ident}/"}


def pokemon_payload(
    pokemon_id: int,
    name: str,
    types: tuple[str, ...] = ("normal",),
    moves: tuple[str, ...] = (),
    sprite: str | None = None,
) -> dict:
    return {
        "id": pokemon_id,
        "name": name,
        "height": 4,
        "weight": 60,
        "types": [{"slot": i + 1, "type": named(t, "type")} for i, t in enumerate(types)],
        "stats": [{"base_stat": 35, "stat": named("hp", "stat")}],
        "abilities": [{"ability": named("static", "ability", 9), "is_hidden": False}],
        "moves": [{"move": named(m, "move")} for m in moves],
        "sprites": {"front_default": sprite},
    }


def listing_payload(entries: list[tuple[int, str]]) -> dict:
    return {
        "count": len(entries),
        "results": [
            {"name": name, "url": f"{BASE_URL}/pokemon/{pid}/"} for pid, name in entries
        ],
    }


def type_payload(name: str, type_id: int = 1) -> dict:
    return {
        "id": type_id,
        "name": name,
        "damage_relations": {
            "double_damage_to": [],
            "half_damage_to": [],
            "no_damage_to": [],
            "double_damage_from": [],
            "half_damage_from": [],
            "no_damage_from": [],
        },
    }


def move_payload(name: str, power: int | None, move_id: int = 1, move_type: str = "normal") -> dict:
    return {
        "id": move_id,
        "name": name,
        "power": power,
        "accuracy": 100,
        "pp": 35,
        "type": named(move_type, "type"),
        "damage_class": named("physical", "move-damage-class", 2),
    }


class FakePokeApi:
    """Routes URLs to canned responses and records every request."""

    def __init__(self) -> None:
        self.routes: dict[str, tuple[int, bytes]] = {}
        self.requests: list[str] = []

    def add_json(self, url: str, payload: dict, status: int = 200) -> None:
        self.routes[url] = (status, json.dumps(payload).encode())

    def add_bytes(self, url: str, body: bytes, status: int = 200) -> None:
        self.routes[url] = (status, body)

    def add_pokemon(self, payload: dict) -> None:
        self.add_json(f"{BASE_URL}/pokemon/{payload['id']}", payload)

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)
        if url not in self.routes:
            return httpx.Response(404, content=b"Not Found")
        status, body = self.routes[url]
        return httpx.Response(status, content=body)

    def count(self, url: str) -> int:
        return self.requests.count(url)


def unreachable(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("network unreachable", request=request)


def make_client(handler, store=None) -> PokeApiClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    gateway = CachedFetchGateway(store=store if store is not None else MemoryStore(), client=http)
    return PokeApiClient(gateway=gateway, base_url=BASE_URL)


class RecordingLauncher:
    """LoaderLauncher that only records what was asked of it."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def start_catalog(self) -> None:
        self.calls.append(("catalog",))

    def start_detail(self, pokemon_id: int) -> None:
        self.calls.append(("detail", pokemon_id))

    def start_type_table(self) -> None:
        self.calls.append(("types",))

    def start_moves(self, detail: PokemonDetail) -> None:
        self.calls.append(("moves", detail.id))


class InMemoryRosterStore:
    def __init__(self, roster: Roster | None = None) -> None:
        self.roster = roster or Roster.default()
        self.saves = 0

    def load(self) -> Roster:
        return self.roster

    def save(self, roster: Roster) -> None:
        self.roster = roster
        self.saves += 1


@pytest.fixture
def api():
    """A fresh fake PokéAPI."""
    return FakePokeApi()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def client(api, store):
    """PokeApiClient wired to the fake API and an in-memory store."""
    return make_client(api.handler, store)


@pytest.fixture
def launcher():
    return RecordingLauncher()


@pytest.fixture
def roster_store():
    return InMemoryRosterStore()
