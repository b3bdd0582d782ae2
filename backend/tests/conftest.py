"""Test configuration and fixtures for the document engine."""

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from docengine.infrastructure.content.base import BlockType
from docengine.infrastructure.database.session import Base, async_session
from docengine.infrastructure.logging import configure_testing_logging, mark_logging_configured
from docengine.interfaces.main import app
from docengine.modules.access.models import AccessGrant
from docengine.modules.block.models import Block
from docengine.modules.document.models import Document
from docengine.modules.page.models import Page

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

configure_testing_logging()
mark_logging_configured()


def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest_asyncio.fixture(scope="function")
async def test_db_engine():
    """Create an in-memory SQLite engine with all tables."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine.sync_engine, "connect", _enable_foreign_keys)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def session_factory(test_db_engine):
    return async_sessionmaker(test_db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory):
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(session_factory):
    """Test client whose requests each get their own session on the test engine."""
    app.dependency_overrides = {}

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[async_session] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides = {}


@pytest_asyncio.fixture(scope="function")
async def api_client(client: AsyncClient):
    """Client rooted at the versioned api, sharing the overridden database."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test/api/v1") as ac:
        yield ac


async def _add(db_session: AsyncSession, instance):
    db_session.add(instance)
    await db_session.commit()
    return instance


@pytest_asyncio.fixture
async def test_document(db_session: AsyncSession) -> dict:
    """Create an unpublished, free knowledge base."""
    document = await _add(db_session, Document(title="Field Guide", description="Everything about birds"))
    return {"id": document.id, "title": document.title, "price_cents": document.price_cents}


@pytest_asyncio.fixture
async def test_pages(db_session: AsyncSession, test_document: dict) -> list[dict]:
    """Three root pages and one child under the first root.

    Layout: Intro (0) > [Details (0)], Usage (1), FAQ (2)
    """
    intro = await _add(db_session, Page(document_id=test_document["id"], title="Intro", sort_order=0))
    usage = await _add(db_session, Page(document_id=test_document["id"], title="Usage", sort_order=1))
    faq = await _add(db_session, Page(document_id=test_document["id"], title="FAQ", sort_order=2))
    details = await _add(
        db_session, Page(document_id=test_document["id"], title="Details", parent_page_id=intro.id, sort_order=0)
    )
    return [
        {"id": page.id, "title": page.title, "parent_page_id": page.parent_page_id, "sort_order": page.sort_order}
        for page in (intro, usage, faq, details)
    ]


@pytest_asyncio.fixture
async def test_blocks(db_session: AsyncSession, test_pages: list[dict]) -> list[dict]:
    """The numbered-list scenario on the first page."""
    page_id = test_pages[0]["id"]
    contents = [
        (BlockType.BULLET_LIST, "a"),
        (BlockType.NUMBERED_LIST, "x"),
        (BlockType.NUMBERED_LIST, "y"),
        (BlockType.TEXT, "note"),
        (BlockType.NUMBERED_LIST, "z"),
    ]
    blocks = []
    for position, (block_type, content) in enumerate(contents):
        block = await _add(
            db_session, Block(page_id=page_id, type=block_type.value, content=content, sort_order=position)
        )
        blocks.append({"id": block.id, "type": block.type, "content": block.content, "sort_order": position})
    return blocks


@pytest_asyncio.fixture
async def published_document(db_session: AsyncSession, test_document: dict, test_blocks: list[dict]) -> dict:
    """The test document, published and free."""
    document = await db_session.get(Document, test_document["id"])
    document.is_published = True
    await db_session.commit()
    return {**test_document, "is_published": True}


@pytest_asyncio.fixture
async def paid_document(db_session: AsyncSession, published_document: dict) -> dict:
    """The published document with a price and one active access grant."""
    document = await db_session.get(Document, published_document["id"])
    document.price_cents = 1500
    await _add(db_session, AccessGrant(document_id=document.id, token="valid-token"))
    await _add(db_session, AccessGrant(document_id=document.id, token="revoked-token", revoked=True))
    return {**published_document, "price_cents": 1500, "token": "valid-token", "revoked_token": "revoked-token"}
