"""Command-line entry point for the Scouty wallet scanner."""

import uvicorn

from scouty.config import get_server_config


def main():
    """Run the API server."""
    server_config = get_server_config()
    uvicorn.run(
        "scouty.app:create_application",
        factory=True,
        host=server_config.host,
        port=server_config.port,
        log_level=server_config.log_level.lower(),
        reload=server_config.debug,
    )


if __name__ == "__main__":
    main()
