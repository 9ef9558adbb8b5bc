#!/usr/bin/env python3
"""
Allow running the CLI as a module: python -m tempgram_automation

This enables the following usage:
    python -m tempgram_automation [OPTIONS] COMMAND

Which is equivalent to:
    tempgram-automation [OPTIONS] COMMAND
"""

from tempgram_automation.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
