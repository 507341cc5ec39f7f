import json
from enum import Enum
from typing import Any, Iterable, List, Optional, Union
from fastapi.encoders import jsonable_encoder
from tabulate import tabulate
from keydash.settings import load_settings
from keydash.logging import initialize_logging
from keydash.core.context import init_context_from_settings, KeydashContext
from keydash.core.admins import ensure_default_admin


class OutputFormat(str, Enum):
    json = "json"
    tabulate = "tabulate"


def get_context() -> KeydashContext:
    settings = load_settings()
    initialize_logging(settings)
    g = init_context_from_settings(settings)
    ensure_default_admin(g)
    return g


def _split_fields(fields: Optional[Union[str, List[str]]]) -> Optional[List[str]]:
    if isinstance(fields, str):
        return [f.strip() for f in fields.split(",") if f.strip()]
    return fields


def print_results(
    results: Union[Any, Iterable[Any]],
    format_: OutputFormat = OutputFormat.json,
    fields: Optional[Union[str, List[str]]] = None,
):
    rows = jsonable_encoder(results, by_alias=False)
    single = isinstance(rows, dict)
    if single:
        rows = [rows]

    field_list = _split_fields(fields)
    if field_list:
        rows = [{f: row.get(f) for f in field_list} for row in rows]

    if format_ == OutputFormat.tabulate:
        print(tabulate(rows, headers="keys", tablefmt="psql"))
    else:
        print(json.dumps(rows[0] if single else rows, indent=2))
