from typing import Optional
import typer
from structlog import get_logger

from keydash.core.credits import add_credits
from keydash.core.resellers import list_resellers, get_reseller, delete_reseller
from keydash.datatypes import ResellerPublic
from .common import get_context, print_results, OutputFormat

app = typer.Typer()
logger = get_logger(__name__)


@app.command("list")
def list_resellers_(
    format_: OutputFormat = typer.Option(OutputFormat.tabulate, "--format"),
    fields: Optional[str] = None,
):
    g = get_context()
    resellers = [ResellerPublic.from_in_db(r) for r in list_resellers(g)]
    print_results(resellers, format_=format_, fields=fields)


@app.command("add-credits")
def add_credits_(reseller_id: int, amount: int = typer.Argument(..., min=1)):
    g = get_context()
    reseller = add_credits(g, reseller_id, amount)
    print_results(ResellerPublic.from_in_db(reseller), fields=["id", "username", "credits"])


@app.command("delete")
def delete_reseller_(reseller_id: int, force: bool = typer.Option(False, "--force", "-f")):
    g = get_context()
    reseller = get_reseller(g, reseller_id)
    if not force:
        typer.confirm(
            f"Delete reseller {reseller.username} (id={reseller.id}) together with all of its keys?", abort=True
        )
    delete_reseller(g, reseller_id)
    logger.info("Reseller deleted from cli", reseller_id=reseller_id)
