__version__ = "0.1.0"
__license__ = "MIT"

from loguru import logger

# silent unless the application asks for it: logger.enable("bnquery")
logger.disable("bnquery")

