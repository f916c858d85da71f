from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware
from timing_asgi import TimingMiddleware, TimingClient  # type: ignore
from timing_asgi.integrations import StarletteScopeToName  # type: ignore

from grocery.core import config
from grocery.core.database.engine import AsyncSessionLocal, init_db
from grocery.core.handlers import register_exception_handlers
from grocery.core.limiter import limiter
from grocery.features.permissions.dependencies import load_role_table, seed_default_roles
from grocery.features.stores.routes import router as store_router
from grocery.features.users.routes import auth_router, employee_router, manager_router
from grocery.utils import get_logger


log = get_logger(__name__)
log.info("Starting %s", config.APP_NAME)
app = FastAPI(
    title="Grocery Store API",
    description="Store hierarchy with subtree-scoped staff management",
    version="0.1.0",
    docs_url="/docs" if config.ENABLE_DOCS else None,
    redoc_url="/redoc" if config.ENABLE_DOCS else None,
    openapi_url="/openapi.json" if config.ENABLE_DOCS else None
)
app.state.limiter = limiter
app.state.role_table = None
register_exception_handlers(app)


class LogTimings(TimingClient):
    def timing(self, metric_name, timing, tags):
        route = metric_name.removeprefix("grocery.grocery.features.")
        log.debug("%s took %.1f ms %s", route, timing * 1000, tags)


app.add_middleware(TimingMiddleware, client=LogTimings(), metric_namer=StarletteScopeToName("grocery", app))

if config.ENABLE_DOCS:
    log.warning("Docs enabled")
if config.ALLOW_ORIGIN:
    log.warning("CORS allowed for %s", config.ALLOW_ORIGIN)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[config.ALLOW_ORIGIN],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )


@app.on_event("startup")
async def startup():
    """Create tables, seed missing default roles and build the role table."""
    await init_db()
    async with AsyncSessionLocal() as session:
        await seed_default_roles(session)
        await session.commit()
        app.state.role_table = await load_role_table(session)
    log.info("Ready")


@app.get("/")
async def root():
    return {
        "success": True,
        "message": "The app is ready",
        "version": app.version,
        "docs": app.docs_url,
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


app.include_router(auth_router)
app.include_router(employee_router, prefix="/employee")
app.include_router(manager_router, prefix="/manager")
app.include_router(store_router, prefix="/stores")
