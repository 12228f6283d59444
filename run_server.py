"""
Pool Authority API Server Runner
Run this as the web process: python run_server.py
"""

import logging
import sys

import uvicorn

from pool_authority.config import Settings
from pool_authority.main import configure_logging

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    logger.info(f"🚀 Starting Pool Authority API on port {settings.port}...")
    try:
        uvicorn.run(
            "pool_authority.main:create_app",
            factory=True,
            host="0.0.0.0",
            port=settings.port,
            log_level=settings.log_level.lower(),
        )
    except KeyboardInterrupt:
        logger.info("👋 Server stopped by user")
    except Exception as e:
        logger.error(f"❌ Server crashed: {e}")
        sys.exit(1)
