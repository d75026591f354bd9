#!/usr/bin/env python3
"""
Development server runner
"""

import os

import uvicorn

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8000))
    host = os.environ.get("HOST", "0.0.0.0")

    uvicorn.run(
        "eduquest.main:app",
        host=host,
        port=port,
        reload=os.environ.get("ENVIRONMENT") == "development",
        log_level="info",
        access_log=True,
    )
