"""
Deep research engine.
Exports the entry points of the iterative research orchestration engine.
"""

__all__ = ["start_research", "run_research", "RunHandle", "ResearchParams"]


def __getattr__(name: str):
    """
    Lazy import of components to avoid importing heavy dependencies
    when only config or other modules are needed.

    Args:
        name: Name of the attribute to import

    Returns:
        The requested attribute from the engine or models module

    Raises:
        AttributeError: If the attribute doesn't exist
    """
    if name in __all__:
        if name == "ResearchParams":
            from .models import ResearchParams
            return ResearchParams
        from . import engine
        return getattr(engine, name)

    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
