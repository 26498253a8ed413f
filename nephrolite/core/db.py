from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from .config import settings
from .base import Base

engine = create_async_engine(settings.POSTGRES_DSN, pool_pre_ping=True)
SessionLocal = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

async def get_session():
    async with SessionLocal() as session:
        yield session

def import_models():
    # every mapped class must be registered on Base.metadata before create_all
    from nephrolite.modules.patients import models as _patients  # noqa: F401
    from nephrolite.modules.visits import models as _visits  # noqa: F401
    from nephrolite.modules.dialysis import models as _dialysis  # noqa: F401
    from nephrolite.modules.investigations import models as _investigations  # noqa: F401
    from nephrolite.modules.interventions import models as _interventions  # noqa: F401
    from nephrolite.modules.appointments import models as _appointments  # noqa: F401
    from nephrolite.modules.users import models as _users  # noqa: F401
    from nephrolite.modules.templates import models as _templates  # noqa: F401
    from nephrolite.modules.audit import models as _audit  # noqa: F401
    from nephrolite.modules.backups import models as _backups  # noqa: F401

async def init_models():
    ## In dev-only "create_all" mode the app owns the schema; otherwise, migrations own it.
    if settings.DB_MANAGE.lower() == "create_all":
        import_models()
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
