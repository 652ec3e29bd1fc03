"""Content planning calendar: month/year grids over a content type and event store."""

__version__ = "0.1.0"
