import logging

# Mute chatty client libraries; run progress goes to the per-run audit log
for logger_name in ["httpx", "httpcore", "openai", "openai._base_client"]:
    logging.getLogger(logger_name).setLevel(logging.WARNING)

logging.getLogger("urllib3").setLevel(logging.WARNING)
logging.getLogger("multipart").setLevel(logging.WARNING)
logging.getLogger("python_multipart").setLevel(logging.WARNING)
logging.getLogger("redis").setLevel(logging.WARNING)
