"""Capital-gains tax summary report generator."""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from stocktax.engines.calculator import CalculationRun

TEMPLATE_DIR = Path(__file__).parent / "templates"


class TaxSummaryGenerator:
    """Generates a human-readable summary of a calculation run."""

    def __init__(self) -> None:
        self.env = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            keep_trailing_newline=True,
        )

    def render(self, run: CalculationRun) -> str:
        """Render the fiscal-year summary with its sales and warnings."""
        template = self.env.get_template("tax_summary.txt")
        return template.render(
            summary=run.summary,
            sales=run.sales_in_year(),
            warnings=run.warnings,
            open_lots=run.open_lots,
            percent=f"{(run.summary.flat_rate * 100).normalize():f}",
        )
