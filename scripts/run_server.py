#!/usr/bin/env python3
"""
Start the action history API.
"""

import argparse
import os
import sys

import uvicorn


def main() -> None:
    repo_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    sys.path.insert(0, repo_root)

    parser = argparse.ArgumentParser(description="Run the action history API")
    parser.add_argument("--host", default=os.getenv("HISTORY_HOST", "0.0.0.0"))
    parser.add_argument("--port", type=int, default=int(os.getenv("HISTORY_PORT", "8000")))
    args = parser.parse_args()

    uvicorn.run("action_history.api.main:app", host=args.host, port=args.port, log_level="info")


if __name__ == "__main__":
    main()
