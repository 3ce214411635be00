"""
PortfolioHub Backend - FastAPI Application

Accounts, username reservation and portfolio content for public portfolio pages.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from portfoliohub.config import get_settings
from portfoliohub.database.connections import close_connections, get_mongo_client
from portfoliohub.database.registry import create_indexes, sync_registry
from portfoliohub.routers import auth, health, profile, usernames

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("portfoliohub")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
    - Initialize database connections
    - Sync database registry
    - Create indexes

    Shutdown:
    - Close all database connections
    """
    logger.info("Starting up PortfolioHub Backend...")

    try:
        client = await get_mongo_client()
        await sync_registry(client)
        await create_indexes(client)
        logger.info("Database registry synced and indexes created")
    except Exception as e:
        logger.warning("Database initialization warning: %s", e)

    yield

    logger.info("Shutting down PortfolioHub Backend...")
    await close_connections()
    logger.info("Database connections closed")


app = FastAPI(
    title="PortfolioHub API",
    description="""
## PortfolioHub API

Build a portfolio and publish it at `/portfolio/{username}`.

### Features
- **Registration**: email + password, or Google sign-in followed by a username choice
- **Usernames**: globally unique, case-insensitive, 3-20 letters/digits/underscores
- **Portfolio**: seeded with placeholder content, edited through `PUT /profile`
- **Public pages**: portfolio lookup by username

### Authentication
Protected endpoints take the session token as a query parameter:
```
GET /profile?token=your_session_token
```

Obtain a token via `POST /auth/register`, `POST /auth/login` or `POST /auth/federated`.
Call `GET /auth/session` on every load: `next_step` tells whether the
account still needs a username (`complete-profile`) or is ready (`dashboard`).
    """,
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(usernames.router)
app.include_router(profile.router)


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": "PortfolioHub API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }
