"""Report generation for stocktax."""

from stocktax.reports.tax_summary import TaxSummaryGenerator

__all__ = ["TaxSummaryGenerator"]
