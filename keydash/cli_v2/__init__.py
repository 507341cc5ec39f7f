import typer
import uvicorn
from structlog import get_logger

from keydash.exceptions import KeydashException
from .common import get_context
from .admins import app as admins_app
from .tokens import app as tokens_app
from .resellers import app as resellers_app
from .keys import app as keys_app

logger = get_logger(__name__)

app = typer.Typer()
app.add_typer(admins_app, name="admins")
app.add_typer(tokens_app, name="tokens")
app.add_typer(resellers_app, name="resellers")
app.add_typer(keys_app, name="keys")


@app.command("public-api")
def public_api(
    host: str = typer.Option("0.0.0.0", "--host", "-h"),
    port: int = typer.Option(7999, "--port", "-p"),
    reload: bool = False,
    update_database: bool = False,
):
    if update_database:
        initialize_database()

    uvicorn.run(
        "keydash.public_api.main:app",
        host=host,
        port=port,
        log_level="info",
        reload=reload,
        forwarded_allow_ips="*",
        proxy_headers=True,
    )


@app.command("initialize-database")
def initialize_database():
    g = get_context()
    try:
        g.backend.initialize()
    except KeydashException as e:
        logger.error("Failed to initialize database", error=e.message)
        raise typer.Exit(1)
    logger.info("Database initialized", backend=g.settings.backend.value)
