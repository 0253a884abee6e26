"""
Command-line entry point for OpenALaw.

    python -m openalaw                         # initialize, run the example task, print status
    python -m openalaw "Click at 100, 200"     # run a specific task
    python -m openalaw --status-json           # status as JSON instead of a dict repr
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from typing import List, Optional

from openalaw.core import AGENT_ID
from openalaw.orchestrator import CombinedResult, OpenALaw

EXAMPLE_TASK = "Analyze this input"


async def run(task: str, status_json: bool = False) -> None:
    print(f"Starting OpenALaw ({AGENT_ID})...")
    print("The Future of Free-Will AI on Android")

    agent = OpenALaw.create()
    await agent.initialize()

    print(f"\nProcessing task: {task}")
    result = await agent.process_task(task)
    if isinstance(result, CombinedResult):
        print("Result:", json.dumps(result.to_dict(), indent=2, default=str))
    else:
        print("Result:", result)

    status = agent.get_status()
    if status_json:
        print(json.dumps(status, indent=2, default=str))
    else:
        print(status)

    print("\nOpenALaw system ready for tasks!")


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        description="OpenALaw — Android automation agent scaffold",
    )
    parser.add_argument("task", nargs="?", default=EXAMPLE_TASK, help="Task to process (natural language)")
    parser.add_argument("--status-json", action="store_true", help="Print status as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")

    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.INFO
    for name in ("openalaw.core", "openalaw.bridge", "openalaw.orchestrator", "openalaw.routing"):
        logging.getLogger(name).setLevel(level)

    asyncio.run(run(args.task, status_json=args.status_json))


if __name__ == "__main__":
    main()
