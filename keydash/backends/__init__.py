from structlog import get_logger

from keydash.settings import KeydashSettings, BackendType
from .base import KeydashBackend
from .in_memory import InMemKeydashBackend
from .sql import SQLKeydashBackend

logger = get_logger(__name__)


def init_backend(settings: KeydashSettings) -> KeydashBackend:
    if settings.backend == BackendType.in_memory:
        logger.info("Creating in memory backend")
        return InMemKeydashBackend(settings)
    elif settings.backend == BackendType.sql:
        logger.info("Creating SQL backend")
        return SQLKeydashBackend(settings)
    else:
        raise ValueError("Cannot initialize backend")
