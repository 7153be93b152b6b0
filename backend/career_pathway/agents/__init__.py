"""LangGraph agent definitions for the career pathway engine.

Modules:
    state: State schema for the interview turn graph
    interview_graph: The per-turn graph (commit, advance, extract, advise,
        finalize)
"""

from career_pathway.agents.interview_graph import (
    create_interview_graph,
    get_interview_graph,
    reset_interview_graph,
    run_interview_turn,
)
from career_pathway.agents.state import InterviewTurnState

__all__ = [
    "InterviewTurnState",
    "create_interview_graph",
    "get_interview_graph",
    "reset_interview_graph",
    "run_interview_turn",
]
