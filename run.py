#!/usr/bin/env python3
"""Convenience runner for the gules command line.

Usage:
    python run.py cache stats
    python run.py activities SESSION_ID --last 5
"""
import logging
import sys

from gules.main import main

if __name__ == "__main__":
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s %(name)s: %(message)s")
    sys.exit(main())
