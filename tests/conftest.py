"""Pytest configuration and shared fixtures.

No sys.path hacks - tests import from the installed driftsafe package.
"""

from pathlib import Path

import pytest

from driftsafe.kernel.descriptor import FieldDescriptor, FieldType, ModelDescriptor
from driftsafe.kernel.projection import Projector, ViewField


FIXTURES = Path(__file__).resolve().parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture
def quote_descriptor() -> ModelDescriptor:
    """Quote model: every field optional for decoding."""
    return ModelDescriptor(
        name="Quote",
        fields=[
            FieldDescriptor(name="id", kind="number"),
            FieldDescriptor(name="author", kind="string"),
            FieldDescriptor(name="quote", kind="string"),
        ],
    )


@pytest.fixture
def article_descriptor() -> ModelDescriptor:
    author = ModelDescriptor(
        name="Author",
        fields=[
            FieldDescriptor(name="name", kind="string", required=True),
            FieldDescriptor(name="email", kind="string"),
        ],
    )
    return ModelDescriptor(
        name="Article",
        fields=[
            FieldDescriptor(name="id", kind="number", required=True),
            FieldDescriptor(name="title", kind="string", required=True),
            FieldDescriptor(name="published", kind="bool", default=False),
            FieldDescriptor(name="subtitle", kind="string", nullable=True),
            FieldDescriptor(name="tags", kind=FieldType.array_of("string"), default=[]),
            FieldDescriptor(name="author", kind=FieldType.object_of(author)),
        ],
    )


class QuoteView:
    """Plain view type used by projector tests."""

    def __init__(self, id, author, quote):
        self.id = id
        self.author = author
        self.quote = quote.strip()

    def __eq__(self, other):
        return (self.id, self.author, self.quote) == (other.id, other.author, other.quote)


@pytest.fixture
def quote_projector() -> Projector:
    return Projector(
        fields=[
            ViewField("id", required=False),
            ViewField("author", non_empty=True),
            ViewField("quote", non_empty=True),
        ],
        build=QuoteView,
    )
