"""Entry point for python -m assesspo."""

import asyncio

from assesspo.cli import main

if __name__ == "__main__":
    asyncio.run(main())
