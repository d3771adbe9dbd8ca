"""vesselscan — canonicalization engine for scanned vessel registration documents."""

__version__ = "0.1.0"
