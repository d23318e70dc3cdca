"""Engine module.

Entry points for starting and draining research runs.
"""
from deep_research_agent.engine.orchestrator import RunHandle, run_research, start_research

__all__ = ["RunHandle", "run_research", "start_research"]
