"""Run the inventory API under uvicorn.

    python run_server.py            # 127.0.0.1:8000
    HOST=0.0.0.0 PORT=9000 python run_server.py
"""
import os
import signal
import sys

import uvicorn

from csinventory.core.config import settings


def handle_signal(sig, frame):
    print(f"\nReceived signal {sig}, shutting down (in-memory ledger will be lost)...")
    sys.exit(0)


signal.signal(signal.SIGINT, handle_signal)
signal.signal(signal.SIGTERM, handle_signal)

if __name__ == "__main__":
    print("=" * 50)
    print("  Controlled Substance Inventory API")
    print("=" * 50)
    uvicorn.run(
        "csinventory.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        log_level=settings.LOG_LEVEL.lower(),
    )
