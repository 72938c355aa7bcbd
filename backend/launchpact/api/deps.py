"""Dependency injection for API routes."""

import logging
from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from slowapi import Limiter
from slowapi.util import get_remote_address

from launchpact.llm import FallbackOrchestrator, create_orchestrator_from_settings
from launchpact.services.co_founder_chat import CoFounderChat
from launchpact.services.launch_planner import LaunchPlanner
from launchpact.utils.errors import ConfigurationError, service_unavailable

logger = logging.getLogger(__name__)

# In-memory store, fine for a single instance
limiter = Limiter(key_func=get_remote_address)


@lru_cache
def _shared_orchestrator() -> FallbackOrchestrator:
    return create_orchestrator_from_settings()


def get_orchestrator() -> FallbackOrchestrator:
    """Return the process-wide orchestrator.

    Raises a 503 when no gateway API key is configured.
    """
    try:
        return _shared_orchestrator()
    except ConfigurationError as e:
        logger.error(f"[LLM] AI generation is disabled | reason={e.message}")
        raise service_unavailable("AI service not configured") from e


Orchestrator = Annotated[FallbackOrchestrator, Depends(get_orchestrator)]


def get_launch_planner(orchestrator: Orchestrator) -> LaunchPlanner:
    return LaunchPlanner(orchestrator)


def get_chat(orchestrator: Orchestrator) -> CoFounderChat:
    return CoFounderChat(orchestrator)


Planner = Annotated[LaunchPlanner, Depends(get_launch_planner)]
Chat = Annotated[CoFounderChat, Depends(get_chat)]
