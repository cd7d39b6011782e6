"""Create the upload gateway tables (files, media_jobs)."""

from upload_gateway.config import load_config
from upload_gateway.infrastructure.queue import SqlJobQueue


def main() -> None:
    config = load_config()
    SqlJobQueue(config.engine)
    print(f"Database initialized at {config.database_url}.")


if __name__ == "__main__":
    main()
