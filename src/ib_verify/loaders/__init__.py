"""Test data loaders."""

from .csv_loader import CsvDataLoader

__all__ = ["CsvDataLoader"]
