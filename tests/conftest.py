"""Pytest configuration and shared fixtures."""

import os


# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("LAUNCH_TOKEN_SECRET", "test-launch-secret-0123456789abcdef")
os.environ.setdefault("ENVIRONMENT", "test")

from collections.abc import AsyncGenerator, Awaitable, Callable  # noqa: E402
from dataclasses import dataclass  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncConnection,
    AsyncSession,
    async_sessionmaker,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.core.database import (  # noqa: E402
    Base,
    build_engine,
    get_db,
    get_session_factory,
)
from app.core.permissions.models import PermissionSet, Role  # noqa: E402
from app.main import create_app  # noqa: E402
from app.modules import load_models  # noqa: E402
from app.modules.embedding.models import LocationMapping, UserMapping  # noqa: E402
from app.modules.prompts.models import Prompt  # noqa: E402
from app.modules.technicians.models import Technician  # noqa: E402
from app.modules.tenants.models import Tenant  # noqa: E402
from tests.factories.prompt import PromptCreateFactory  # noqa: E402
from tests.factories.tenant import TenantFactory  # noqa: E402


# Import all models to ensure they're registered with Base.metadata
load_models()

TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture(scope="function")
async def engine():
    """Create an in-memory, savepoint-capable test engine."""
    engine = build_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def connection(engine) -> AsyncGenerator[AsyncConnection, None]:
    """Provide a connection whose transaction is rolled back afterwards.

    Each test runs in its own transaction that is rolled back
    after the test completes, ensuring test isolation.
    """
    async with engine.connect() as conn:
        await conn.begin()
        yield conn
        await conn.rollback()


@pytest.fixture
def session_factory(connection: AsyncConnection) -> async_sessionmaker[AsyncSession]:
    """Sessions that join the test transaction through savepoints.

    Their commits only release a savepoint, so everything they write is
    visible to `db` and still rolled back with the test.
    """
    return async_sessionmaker(
        bind=connection,
        expire_on_commit=False,
        autoflush=False,
        join_transaction_mode="create_savepoint",
    )


@pytest.fixture
async def db(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Provide a transactional database session for tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def app(db: AsyncSession, session_factory: async_sessionmaker[AsyncSession]):
    """Create test application instance."""
    application = create_app()

    # Override database dependency
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    application.dependency_overrides[get_db] = override_get_db
    application.dependency_overrides[get_session_factory] = lambda: session_factory

    yield application

    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
def anyio_backend() -> str:
    """Specify the async backend for anyio."""
    return "asyncio"


# ============================================================
# Tenant, Technician and Launch Fixtures
# ============================================================


@dataclass
class Launch:
    """Everything needed to launch the dashboard as one user."""

    tenant: Tenant
    technician: Technician
    location_mapping: LocationMapping
    user_mapping: UserMapping

    @property
    def params(self) -> dict[str, str]:
        """Query parameters the host would send."""
        return {
            "location": self.location_mapping.external_location_id,
            "user": self.user_mapping.external_user_id,
        }


async def _persist(db: AsyncSession, obj):
    db.add(obj)
    await db.flush()
    await db.refresh(obj)
    return obj


@pytest.fixture
def make_tenant(db: AsyncSession) -> Callable[..., Awaitable[Tenant]]:
    """Factory fixture for persisted tenants."""

    async def make(**overrides) -> Tenant:
        data = TenantFactory.build(**overrides)
        return await _persist(db, Tenant(**data.model_dump()))

    return make


@pytest.fixture
async def tenant(make_tenant) -> Tenant:
    """Create a test tenant."""
    return await make_tenant(name="Acme Plumbing")


@pytest.fixture
async def other_tenant(make_tenant) -> Tenant:
    """Create a second, unrelated tenant."""
    return await make_tenant(name="Globex Heating")


@pytest.fixture
def make_location(db: AsyncSession) -> Callable[..., Awaitable[LocationMapping]]:
    """Factory fixture for persisted location mappings."""

    async def make(
        tenant: Tenant, external_id: str | None = None, **overrides
    ) -> LocationMapping:
        mapping = LocationMapping(
            tenant=tenant,
            external_location_id=external_id or f"LOC-{uuid4().hex[:12]}",
            location_name=overrides.pop("location_name", "Main Street"),
            **overrides,
        )
        return await _persist(db, mapping)

    return make


@pytest.fixture
def make_launch(db: AsyncSession, make_location) -> Callable[..., Awaitable[Launch]]:
    """Factory fixture creating a technician mapped to a launchable user.

    Keyword overrides:
        role: Role of the user mapping
        location: Reuse an existing location mapping
        name: Technician display name
        external_user_id: External user identifier
        permissions: Explicit capability set
        user_active / technician_active: Activation flags
    """

    async def make(
        tenant: Tenant,
        *,
        role: Role = Role.TECHNICIAN,
        location: LocationMapping | None = None,
        name: str | None = None,
        external_user_id: str | None = None,
        permissions: PermissionSet | None = None,
        user_active: bool = True,
        technician_active: bool = True,
    ) -> Launch:
        location = location or await make_location(tenant)
        technician = await _persist(
            db,
            Technician(
                tenant=tenant,
                name=name or f"Tech {uuid4().hex[:4]}",
                crm_code=f"CRM-{uuid4().hex[:8]}",
                is_active=technician_active,
            ),
        )
        mapping = UserMapping(
            external_user_id=external_user_id or f"USR-{uuid4().hex[:12]}",
            technician=technician,
            location_mapping=location,
            role=role,
            is_active=user_active,
        )
        mapping.grant(permissions or PermissionSet())
        mapping = await _persist(db, mapping)
        return Launch(
            tenant=tenant,
            technician=technician,
            location_mapping=location,
            user_mapping=mapping,
        )

    return make


@pytest.fixture
async def technician_launch(make_launch, tenant: Tenant) -> Launch:
    """A plain technician in the test tenant."""
    return await make_launch(tenant, name="Terry Tech")


@pytest.fixture
async def manager_launch(make_launch, tenant: Tenant, technician_launch) -> Launch:
    """A manager sharing the technician's location."""
    return await make_launch(
        tenant,
        role=Role.MANAGER,
        location=technician_launch.location_mapping,
        name="Morgan Manager",
    )


@pytest.fixture
async def admin_launch(make_launch, tenant: Tenant, technician_launch) -> Launch:
    """An admin sharing the technician's location."""
    return await make_launch(
        tenant,
        role=Role.ADMIN,
        location=technician_launch.location_mapping,
        name="Alex Admin",
        permissions=PermissionSet(
            can_approve_responses=True,
            can_publish_responses=True,
            can_view_all_reviews=True,
            can_manage_configurations=True,
        ),
    )


@pytest.fixture
async def other_tenant_launch(make_launch, other_tenant: Tenant) -> Launch:
    """A technician in a different tenant."""
    return await make_launch(other_tenant, name="Olive Outsider")


# ============================================================
# Prompt Fixtures
# ============================================================


@pytest.fixture
def make_prompt(db: AsyncSession) -> Callable[..., Awaitable[Prompt]]:
    """Factory fixture for persisted prompts.

    Pass `owner` to create a personal prompt; omit it for a system prompt.
    """

    async def make(
        tenant: Tenant, owner: Technician | None = None, **overrides
    ) -> Prompt:
        data = PromptCreateFactory.build(**overrides)
        prompt = Prompt(
            tenant_id=tenant.id,
            name=data.name,
            purpose=data.purpose,
            content=data.content,
            description=data.description,
            version=1,
            created_by=owner.name if owner else "System",
            owner_technician_id=owner.id if owner else None,
        )
        return await _persist(db, prompt)

    return make
