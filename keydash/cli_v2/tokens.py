from typing import Optional
import typer

from keydash.core.referral_tokens import issue_referral_tokens, list_referral_tokens
from .common import get_context, print_results, OutputFormat

app = typer.Typer()


@app.command("issue")
def issue_tokens_(
    count: int = typer.Option(1, "--count", "-n", min=1, max=1000),
    format_: OutputFormat = typer.Option(OutputFormat.tabulate, "--format"),
):
    g = get_context()
    tokens = issue_referral_tokens(g, count)
    print_results(tokens, format_=format_, fields=["id", "token"])


@app.command("list")
def list_tokens_(
    unused_only: bool = False,
    format_: OutputFormat = typer.Option(OutputFormat.tabulate, "--format"),
    fields: Optional[str] = None,
):
    g = get_context()
    tokens = [t for t in list_referral_tokens(g) if not (unused_only and t.used)]
    print_results(tokens, format_=format_, fields=fields)
