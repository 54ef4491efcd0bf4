import uvicorn

from .config import load_config


def main():
    config = load_config()
    uvicorn.run(
        "assistant_admin.app:create_app",
        factory=True,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
