"""Run the qrguard gateway: python -m qrguard"""

import uvicorn

from qrguard.config import load_config

config = load_config()
uvicorn.run(
    "qrguard.app:create_app",
    host=config.host,
    port=config.port,
    log_level=config.log_level,
    factory=True,
)
