import logging
import os
from datetime import datetime

from config import DEBUG_MODE, LOGS_DIR

class Logger:
    def __init__(self, log_dir="logs", debug=False):
        self.log_dir = log_dir
        os.makedirs(self.log_dir, exist_ok=True)
        self.log_file = os.path.join(self.log_dir, f"threads_{datetime.now().strftime('%Y-%m-%d_%H-%M-%S')}.log")

        logging.basicConfig(
            level=logging.DEBUG if debug else logging.INFO,
            format='%(asctime)s - %(levelname)s - %(message)s',
            handlers=[
                logging.FileHandler(self.log_file, encoding='utf-8'),
                logging.StreamHandler()
            ]
        )
        self._logger = logging.getLogger("threads")

    def log(self, message):
        self._logger.info(message)

    def error(self, message, *args, **kwargs):
        self._logger.error(message, *args, **kwargs)

    def warn(self, message):
        self._logger.warning(message)

    def debug(self, message, *args, **kwargs):
        self._logger.debug(message, *args, **kwargs)

# Initialize a global logger instance
logger = Logger(log_dir=LOGS_DIR, debug=DEBUG_MODE)
