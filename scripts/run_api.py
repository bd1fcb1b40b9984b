#!/usr/bin/env python3
"""Run the Comic Book Generator API with uvicorn.

Usage:
    python scripts/run_api.py
    python scripts/run_api.py --port 9000 --no-reload
"""

import argparse
import os
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import uvicorn


def main():
    parser = argparse.ArgumentParser(description="Run the comic API server")
    parser.add_argument("--host", default=os.getenv("COMIC_API_HOST", "0.0.0.0"))
    parser.add_argument("--port", type=int, default=int(os.getenv("COMIC_API_PORT", "8000")))
    parser.add_argument(
        "--no-reload",
        action="store_true",
        help="Disable auto-reload (reload keeps jobs in memory only until the next edit)",
    )
    args = parser.parse_args()

    uvicorn.run(
        "comicbook.api.main:app",
        host=args.host,
        port=args.port,
        reload=not args.no_reload,
    )


if __name__ == "__main__":
    main()
