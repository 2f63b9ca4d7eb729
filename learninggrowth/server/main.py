"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request logging), registers the exception handlers and includes all API
routers. It serves as the root of the web server.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from learninggrowth.chain import contract_registry
from learninggrowth.chain.contract_registry import RegisteredContractConfig
from learninggrowth.chain.errors import ChainClientError
from learninggrowth.chain.provider_factory import close_providers
from learninggrowth.core.config import settings
from learninggrowth.core.logging_config import get_logger, setup_logging
from learninggrowth.core.monitoring import initialize_logfire
from learninggrowth.services import class_scheduler, learning_points_token

from .api import classes, contracts, health, learning_points
from .core import constant
from .exception_handlers import setup_exception_handlers
from .middleware import RequestLoggingMiddleware

logger = get_logger(__name__)


def register_configured_contracts() -> None:
    """
    Register the configured contracts in the contract registry.

    A contract without an address, or whose ABI cannot be loaded, is skipped
    with a warning; the service functions still accept explicit addresses.
    """
    candidates = (
        (class_scheduler.CONTRACT_NAME, settings.class_scheduler_address, class_scheduler.get_class_scheduler_abi),
        (
            learning_points_token.CONTRACT_NAME,
            settings.learning_points_token_address,
            learning_points_token.get_learning_points_abi,
        ),
    )
    for name, address, load_abi in candidates:
        if not address:
            logger.warning(f"{name} address is not configured; the contract is not registered")
            continue
        try:
            config = RegisteredContractConfig(
                name=name,
                address=address,
                abi=load_abi(),
                chain_id=settings.chain_id,
                rpc_url=settings.rpc_url,
            )
        except ChainClientError as e:
            logger.warning(f"Could not register {name}: {e}")
            continue
        contract_registry.update_contract(config)
        logger.info(f"Registered contract {name} at {address}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Handles startup and shutdown events for the FastAPI application.
    """
    # Startup
    logger.info("Starting up LearningGrowth API...")
    if not settings.rpc_url:
        logger.warning("BLOCKCHAIN_RPC_URL is not set; contract calls will fail until it is configured")
    register_configured_contracts()

    yield

    # Shutdown
    logger.info("Shutting down LearningGrowth API...")
    await close_providers()


def create_app() -> FastAPI:
    """Build the FastAPI application with middleware, handlers and routers."""
    app = FastAPI(
        title=constant.PROJECT_NAME,
        description="""
        LearningGrowth API

        REST access to the ClassScheduler and LearningPointsToken smart contracts:
        schedule classes, manage enrollments and attendance, distribute rewards and
        move learning points.
        """,
        version=constant.VERSION,
        openapi_url=f"{constant.API_PREFIX}/openapi.json",
        docs_url=f"{constant.API_PREFIX}/docs",
        redoc_url=f"{constant.API_PREFIX}/redoc",
        lifespan=lifespan,
    )

    cors = settings.cors
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors.origins,
        allow_credentials=cors.allow_credentials,
        allow_methods=cors.allow_methods,
        allow_headers=cors.allow_headers,
    )
    app.add_middleware(RequestLoggingMiddleware)

    setup_exception_handlers(app)
    initialize_logfire(app)

    app.include_router(health.router, tags=["health"])
    app.include_router(contracts.router, prefix=f"{constant.API_PREFIX}/contracts", tags=["contracts"])
    app.include_router(classes.router, prefix=f"{constant.API_PREFIX}/classes", tags=["classes"])
    app.include_router(
        learning_points.router, prefix=f"{constant.API_PREFIX}/learning-points", tags=["learning-points"]
    )
    return app


# Initialize logging
setup_logging()

app = create_app()
