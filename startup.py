import logging
import os
import sys
import traceback

import uvicorn

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)

# Add the src directory to Python path
current_dir = os.path.dirname(os.path.abspath(__file__))
src_path = os.path.join(current_dir, 'src')
sys.path.insert(0, src_path)

logger.info("=" * 60)
logger.info("DocDesk Backend Startup")
logger.info("=" * 60)
logger.info(f"Python version: {sys.version.split()[0]}")
logger.info(f"Source path: {src_path}")

logger.info("Environment Configuration:")
logger.info(f"  PORT: {os.environ.get('PORT', '8000')}")
logger.info(f"  APP_ENV: {os.environ.get('APP_ENV', 'not set')}")
logger.info(f"  MONGO_URI: {'set' if os.environ.get('MONGO_URI') else 'not set'}")
logger.info(f"  MONGO_DB_NAME: {os.environ.get('MONGO_DB_NAME', 'not set')}")

if __name__ == "__main__":
    try:
        from docdesk.core.config import get_settings
        settings = get_settings()
        port = int(os.environ.get("PORT", settings.port))
        host = os.environ.get("HOST", settings.host)

        logger.info("Step 1: Importing docdesk.app...")
        try:
            from docdesk.app import app  # noqa: F401
        except Exception as import_error:
            logger.error(f"Failed to import docdesk.app: {import_error}")
            logger.error(traceback.format_exc())
            sys.exit(1)

        logger.info(f"Step 2: Starting uvicorn server on {host}:{port}...")
        uvicorn.run(
            "docdesk.app:app",
            host=host,
            port=port,
            workers=1,
            log_level=settings.logging.level.lower(),
            access_log=True,
            timeout_keep_alive=75,
            timeout_graceful_shutdown=30,
        )
    except KeyboardInterrupt:
        logger.info("Shutting down due to keyboard interrupt")
        sys.exit(0)
    except Exception as e:
        logger.error(f"CRITICAL: Failed to start application: {type(e).__name__}: {e}")
        logger.error(traceback.format_exc())
        logger.error("Verify MONGO_URI and the LOG_/CORS_ settings, then retry.")
        sys.exit(1)
