"""Report file ingestion."""
