"""Media upload gateway.

Streams multipart uploads into object storage, records one metadata row per
stored file and hands each record to the ``process-media`` job queue.
"""
