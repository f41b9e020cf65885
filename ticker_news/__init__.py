"""Scrape per-symbol news listings and publish the freely readable articles."""

__version__ = "0.1.0"
