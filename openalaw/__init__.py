"""
OpenALaw Agent Scaffold

Android automation agent for ARM devices.
Core Agent (routing + queue) + Android Core Bridge (device stubs) + Orchestrator.

Usage:
    from openalaw.orchestrator import OpenALaw

    agent = OpenALaw.create()
    await agent.initialize()
    result = await agent.process_task("Tap the button at 540, 960")
"""

__version__ = "1.0.0"
