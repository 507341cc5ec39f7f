from typing import Optional
import typer

from keydash.core.keys import list_keys_for_reseller, list_all_keys
from keydash.core.verification import check_key_status
from .common import get_context, print_results, OutputFormat

app = typer.Typer()


@app.command("list")
def list_keys_(
    reseller_id: Optional[int] = typer.Option(None, "--reseller-id"),
    format_: OutputFormat = typer.Option(OutputFormat.tabulate, "--format"),
    fields: Optional[str] = None,
):
    g = get_context()
    keys = list_keys_for_reseller(g, reseller_id) if reseller_id is not None else list_all_keys(g)
    print_results(keys, format_=format_, fields=fields)


@app.command("status")
def key_status_(key: str):
    g = get_context()
    report = check_key_status(g, key)
    print_results(report.model_dump(exclude_none=True, mode="json"))
