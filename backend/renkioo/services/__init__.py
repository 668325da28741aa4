from .llm_service import plan_interactive_outline, generate_segment
from .story_graph import build_story_graph, next_choice_point
from .story_engine import create_session, advance

__all__ = [
    "plan_interactive_outline",
    "generate_segment",
    "build_story_graph",
    "next_choice_point",
    "create_session",
    "advance",
]
