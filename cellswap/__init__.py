"""CellSwap: rule-driven text substitution across spreadsheet workbooks."""

__version__ = "0.1.0"
