# src/educloud/console/__main__.py
# python -m educloud.console
import os

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "educloud.console:create_app",
        factory=True,
        host=os.getenv("CONSOLE_HOST", "127.0.0.1"),
        port=int(os.getenv("CONSOLE_PORT", "8000")),
        reload=False,  # sessions live in-process; one worker only
        log_level="info",
    )
