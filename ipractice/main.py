import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from ipractice.core import config
from ipractice.core.error_handlers import register_exception_handlers
from ipractice.database import Base, engine, ensure_schema
from ipractice.models import client, psychologist  # noqa: F401  registers tables on Base.metadata
from ipractice.routes import client_routes, psychologist_routes

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
)

logger = logging.getLogger(__name__)

app = FastAPI(title='iPractice API')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

register_exception_handlers(app)


@app.on_event('startup')
def initialize_database() -> None:
    config.validate_runtime_config()
    try:
        Base.metadata.create_all(bind=engine)
        ensure_schema()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')


@app.get('/')
def root():
    return {'status': 'iPractice API Running'}


app.include_router(psychologist_routes.router, prefix='/Psychologist')
app.include_router(client_routes.router, prefix='/Client')
