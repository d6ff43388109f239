from datetime import UTC, datetime

import pytest

from src.adapters.clock import FixedClock
from src.adapters.ids import SequentialIdGenerator
from src.domain.entities import Block, Document
from src.rules.loader import load_default_rules
from src.shell.context import EditorContext
from src.shell.hooks.change_hooks import RecordingHooks


@pytest.fixture
def rules():
    """Rules shipped with the package."""
    return load_default_rules()


@pytest.fixture
def ids():
    return SequentialIdGenerator()


@pytest.fixture
def clock():
    return FixedClock(datetime(2025, 1, 1, tzinfo=UTC))


@pytest.fixture
def hooks():
    return RecordingHooks()


@pytest.fixture
def seeded_document():
    """
    Page with two sections and a layout subtree:

    hero-1
    cards-1 (3 items)
    container-1
      text-1
      grid-1
        image-1
    links-1
    """
    return Document(
        blocks=[
            Block(id="hero-1", type="hero", settings={"headline": "Hello"}),
            Block(
                id="cards-1",
                type="cards",
                settings={
                    "title": "Features",
                    "columns": 3,
                    "items": [
                        {"id": "item-1", "title": "One"},
                        {"id": "item-2", "title": "Two"},
                        {"id": "item-3", "title": "Three"},
                    ],
                },
                styles={"backgroundColor": "#ffffff", "gap": "24px"},
            ),
            Block(
                id="container-1",
                type="container",
                children=[
                    Block(id="text-1", type="text", settings={"content": "Body"}),
                    Block(
                        id="grid-1",
                        type="grid",
                        children=[Block(id="image-1", type="image", settings={"src": "a.png"})],
                    ),
                ],
            ),
            Block(
                id="links-1",
                type="links",
                settings={"links": [{"id": "link-1", "label": "Docs", "url": "/docs"}]},
            ),
        ]
    )


@pytest.fixture
def ctx(seeded_document, rules, clock, ids, hooks):
    """Editing session over the seeded document with deterministic ids and time."""
    return EditorContext.create(
        document=seeded_document, rules=rules, clock=clock, ids=ids, hooks=hooks
    )


@pytest.fixture
def tree(ctx):
    return ctx.tree
