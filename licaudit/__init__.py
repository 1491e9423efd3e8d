"""licaudit: concurrent license-result collection and CSV audit reports."""

__version__ = "0.1.0"
