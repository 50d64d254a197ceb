import uvicorn

from product_catalog.config import get_config


if __name__ == "__main__":
    config = get_config()
    uvicorn.run(
        "product_catalog.main:app",
        host=config.server.host,
        port=config.server.port,
        log_level=config.logging.level.lower(),
    )
