"""Shared test fixtures for cypherbolt."""

from __future__ import annotations

from pathlib import Path

import pytest

from cypherbolt.config import Config
from cypherbolt.core.compiler import Statement
from cypherbolt.core.relationships import RelationshipRepository
from cypherbolt.events.bus import EventBus
from cypherbolt.models.edge import Relationship
from cypherbolt.models.values import Structure
from cypherbolt.transport.base import Record, Transport


class FakeTransport(Transport):
    """Records every statement and answers with queued result rows."""

    def __init__(self) -> None:
        self.statements: list[Statement] = []
        self.results: list[list[Record]] = []

    def queue(self, *rows: Record) -> None:
        self.results.append(list(rows))

    async def run(self, statement: Statement) -> list[Record]:
        self.statements.append(statement)
        if self.results:
            return self.results.pop(0)
        return []


def node_struct(node_id: int, *labels: str, **properties) -> Structure:
    return Structure(signature=78, fields=[node_id, list(labels), properties])


def rel_struct(rel_id: int, from_id: int, to_id: int, label: str, **properties) -> Structure:
    return Structure(signature=82, fields=[rel_id, from_id, to_id, label, properties])


@pytest.fixture
def config(tmp_path: Path) -> Config:
    return Config(config_path=tmp_path / "config.yaml")


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def repo(transport: FakeTransport, bus: EventBus, config: Config) -> RelationshipRepository:
    return RelationshipRepository(transport, bus, config)


@pytest.fixture
def likes() -> Relationship:
    return Relationship.from_ids(10, 20, "LIKES", properties={"since": 2020})
