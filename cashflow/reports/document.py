"""
Printable HTML rendering of month and year reports.

The HTML is the source a platform print service turns into a PDF; this
module only produces the text. Templates ship inside the package and are
autoescaped, so notes and category names cannot inject markup.
"""

from functools import lru_cache
from typing import Callable

from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape

from cashflow.reports.snapshot import MonthReport, YearReport


@lru_cache()
def _environment() -> Environment:
    return Environment(
        loader=PackageLoader("cashflow.reports", "templates"),
        autoescape=select_autoescape(["html"]),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render_month_document(report: MonthReport, money: Callable) -> str:
    template = _environment().get_template("month_report.html")
    return template.render(report=report, money=money)


def render_year_document(report: YearReport, money: Callable) -> str:
    template = _environment().get_template("year_report.html")
    return template.render(report=report, money=money)
