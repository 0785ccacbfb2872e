"""deploygate - CI merge gate for Salesforce check-only deploys and PMD reports."""

__version__ = "0.1.0"
