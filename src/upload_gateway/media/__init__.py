"""Media stages of the upload pipeline: storage, records, jobs and temp files."""
