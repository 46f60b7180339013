"""stocktax: capital-gains tax for foreign equity trades."""

__version__ = "0.1.0"
