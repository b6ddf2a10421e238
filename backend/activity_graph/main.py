import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from activity_graph import config
from activity_graph.api.errors import register_error_handlers
from activity_graph.api.routes import router

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

app = FastAPI(
    title="Activity Dependency Graph",
    version="0.1.0",
)

# Middleware FIRST
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Routes AFTER middleware
app.include_router(router)
