"""Pytest configuration and fixtures."""

import os

# Keep the application's own engine off disk during tests
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import uuid
from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from backend.app.db.base import Base, get_db
from backend.app.main import app
from backend.app.services.metrics import MetricsCollector


def _memory_engine():
    return create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )


@pytest.fixture(scope="function")
async def test_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Create a test database session.

    Each test gets a fresh database with all tables created.
    """
    engine = _memory_engine()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def metrics_collector() -> MetricsCollector:
    """Fresh collector installed on the app (the lifespan does not run under ASGITransport)."""
    collector = MetricsCollector(max_samples=100, p95_threshold_ms=5000, p99_threshold_ms=8000)
    app.state.metrics = collector
    return collector


@pytest.fixture(scope="function")
async def test_client_with_db(metrics_collector) -> AsyncGenerator[AsyncClient, None]:
    """
    Create test client with in-memory database.

    This fixture creates a fresh test database for each test and
    overrides the app's database dependency.
    """
    test_engine = _memory_engine()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    TestSessionLocal = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async def override_get_db():
        async with TestSessionLocal() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
    await test_engine.dispose()


@pytest.fixture
async def registered_user(test_client_with_db: AsyncClient) -> dict:
    """Sign up a user and return its record."""
    response = await test_client_with_db.post(
        "/api/auth/signup",
        json={
            "email": f"user-{uuid.uuid4().hex[:8]}@example.com",
            "password": "correct-horse",
            "name": "テストユーザー",
        },
    )
    assert response.status_code == 201
    return response.json()["user"]


@pytest.fixture
async def ideation_session(test_client_with_db: AsyncClient, registered_user: dict) -> dict:
    """Create a session owned by the registered user."""
    response = await test_client_with_db.post("/api/sessions/", json={"user_id": registered_user["id"]})
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def business_idea() -> dict:
    """A well-formed ideator idea (camelCase wire format)."""
    return {
        "id": "idea-001",
        "title": "スマートオフィス予約",
        "description": (
            "丸の内エリアのオフィスビルに入居する企業向けに、会議室とワークスペースを"
            "横断的に予約できるプラットフォームを提供し、稼働率と従業員体験を向上させる。"
            "空き状況をリアルタイムに可視化し、テナント間のシェアリングも可能にする。"
        ),
        "targetCustomers": ["大企業の総務部門", "スタートアップ"],
        "customerPains": ["会議室が足りない", "空き状況が分からない"],
        "valueProposition": "ビル全体のスペースを一元管理し、遊休スペースを収益化できる",
        "revenueModel": "月額サブスクリプションと予約手数料による収益",
        "estimatedRevenue": 500_000_000,
        "implementationDifficulty": "medium",
        "marketOpportunity": "ハイブリッドワークの定着でフレキシブルな空間需要が拡大している",
    }


@pytest.fixture
def report_request_payload() -> dict:
    """Analyst output for report generation, without a session id."""
    return {
        "businessIdea": {
            "id": "idea-001",
            "title": "スマートオフィス予約",
            "description": "オフィスビル横断の会議室・ワークスペース予約サービス",
            "targetMarket": "丸の内エリアの入居企業",
            "valueProposition": "遊休スペースの収益化と従業員体験の向上",
            "revenueModel": "月額サブスクリプション、予約手数料",
            "pricing": "月額50,000円から",
            "estimatedRevenue": 100_000_000,
            "implementationDifficulty": "medium",
            "customerSegments": ["大企業", "スタートアップ"],
            "differentiators": ["ビル横断の在庫", "入居企業向け特典"],
            "channels": ["直販", "ビル管理会社経由"],
        },
        "marketAnalysis": {
            "tam": 5_000_000_000,
            "pam": 2_000_000_000,
            "sam": 500_000_000,
            "growthRate": 25,
            "competitors": ["A社", "B社"],
            "trends": ["ハイブリッドワーク"],
            "competitiveAdvantage": "自社保有ビルのネットワーク",
        },
        "strategicAlignment": {
            "synergyScore": 85,
            "breakdown": {"realEstate": 90, "customerBase": 80, "brandValue": 85},
            "opportunities": ["テナント満足度の向上"],
            "risks": ["既存予約システムとの競合"],
            "recommendations": ["丸の内の3棟でパイロット"],
            "strategicFit": "高い戦略的適合性",
        },
        "personnel": [{"role": "エンジニア", "count": 3}, {"role": "営業", "count": 2}],
    }
