"""Upload ingestion: multipart parsing, validation and the per-request pipeline."""
