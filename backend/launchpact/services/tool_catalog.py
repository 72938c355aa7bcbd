"""Static phase-to-tools catalog for the execution planner."""

from launchpact.models.schemas import Tool

TOOLS_BY_PHASE: dict[str, tuple[Tool, ...]] = {
    "Research": (
        Tool(
            name="Perplexity AI",
            url="https://perplexity.ai",
            description="AI research",
            category="Research",
        ),
    ),
    "Design": (
        Tool(name="Figma", url="https://figma.com", description="Design tool", category="Design"),
    ),
    "Development": (
        Tool(
            name="Cursor",
            url="https://cursor.sh",
            description="AI code editor",
            category="Development",
        ),
    ),
}


def recommend_tools(task_phase: str) -> list[Tool]:
    """Tools for a task phase; unknown phases get an empty list."""
    return [tool.model_copy() for tool in TOOLS_BY_PHASE.get((task_phase or "").strip(), ())]
