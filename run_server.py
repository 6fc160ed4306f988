import os

import uvicorn

from utils.logging_utils import get_tagged_logger, setup_logging

logger = get_tagged_logger(__name__, tag="server")


if __name__ == "__main__":
    setup_logging(level=os.getenv("LOG_LEVEL", "INFO"), job_name="weather_agent_api")
    port = int(os.getenv("PORT", 8000))
    logger.info("Starting weather agent API on port %d", port)

    uvicorn.run(
        "weather_agent.main:app",
        host="0.0.0.0",
        port=port,
        reload=False,
    )
