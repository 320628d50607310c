#!/usr/bin/env python
"""Serve the webhook receiver with uvicorn."""
import os

import uvicorn

from supplier_webhooks.core.config import get_settings

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8000))
    settings = get_settings()

    print(f"Starting supplier webhook receiver on port {port} ({settings.ENVIRONMENT})")

    uvicorn.run(
        "supplier_webhooks.main:app",
        host="0.0.0.0",
        port=port,
        log_level=settings.LOG_LEVEL.lower(),
        reload=settings.DEBUG,
    )
