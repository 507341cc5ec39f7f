import typer
from structlog import get_logger

from keydash.core.admins import create_admin
from .common import get_context, print_results, OutputFormat

app = typer.Typer()
logger = get_logger(__name__)


@app.command("create")
def create_admin_(
    username: str,
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
):
    g = get_context()
    admin = create_admin(g, username, password)
    print_results(admin, format_=OutputFormat.json, fields=["id", "username"])


@app.command("list")
def list_admins_(format_: OutputFormat = typer.Option(OutputFormat.tabulate, "--format")):
    g = get_context()
    print_results(list(g.backend.admins.all()), format_=format_, fields=["id", "username"])
