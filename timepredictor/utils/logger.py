import os
import sys
import logging

from timepredictor.config import config

logging_str = "[%(asctime)s] {%(pathname)s:%(lineno)d} %(levelname)s - %(message)s"
logging_dir = str(config.LOGS_DIR)
loging_path = os.path.join(logging_dir, "timepredictor.log")
if not os.path.exists(logging_dir):
    os.makedirs(logging_dir)

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format=logging_str,
    handlers=[
        logging.FileHandler(loging_path),
        logging.StreamHandler(sys.stdout)
    ]
)

logging = logging.getLogger('timepredictor')
