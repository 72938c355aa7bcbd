"""Prompt templates for the generation endpoints.

The JSON-only instruction is added by GenerationRequest.create for
structured requests, so templates here only describe the task and shape.
"""

import json
from typing import Any

DEFAULT_PRODUCT = "the startup"
DEFAULT_FRONTEND = "modern web technologies"

BLUEPRINT_SYSTEM = """You are LaunchPact AI, a senior Co-Founder AI. You create detailed product blueprints in JSON format.

CRITICAL RULES:
1. The JSON must match the exact structure provided
2. All string fields must be non-empty
3. Arrays must have at least 1 item
4. Numbers must be valid (score: 0-100)"""

BLUEPRINT_SHAPE = """{
  "productName": "string",
  "tagline": "string",
  "ideaSummary": "string",
  "problemStatement": "string",
  "usp": "string",
  "painPoints": ["string"],
  "domainSuggestions": ["string"],
  "marketAnalysis": {"targetAudience": "string", "marketGap": "string", "potentialSize": "string"},
  "viability": {"score": 75, "saturationAnalysis": "string", "pivotSuggestion": "string"},
  "competitors": [{"name": "string", "strength": "string", "weakness": "string"}],
  "monetizationStrategy": ["string"],
  "risksAndAssumptions": ["string"],
  "mvpFeatures": [{"title": "string", "description": "string", "priority": "High"}],
  "techStack": {"frontend": "string", "backend": "string", "database": "string", "deployment": "string", "extras": ["string"]},
  "roadmap": [{"name": "string", "timeline": "string", "keyDeliverables": ["string"]}],
  "maintenanceStrategy": "string"
}"""

CHAT_PERSONA = """You are PromptNovaX (PNX), an AI Product Architect and Co-Founder.
You are strategic, friendly and conversational. Reply in the user's language
(English, Roman Urdu, Hindi or Hinglish) and never ask them to switch.

When the user asks for blueprint changes, first discuss what you would change
and why, then ask whether to apply it to their live blueprint. Only include an
"updates" object once the user has confirmed."""

CO_FOUNDER_MODE = """MODE: CO-FOUNDER (HARD MODE).
Be brutally honest, critical and opinionated, but still supportive. Spot the
risks the user missed."""

ARCHITECT_MODE = """MODE: PRODUCT ARCHITECT.
Be helpful, structured and inspiring. Focus on engineering excellence and
user experience."""

CHAT_RESPONSE_RULES = """RESPONSE RULES:
Respond with this structure:
{"text": "your conversational reply (2-4 sentences)", "suggestions": ["..."], "updates": {...}}
"updates" holds only the blueprint fields being modified and is omitted
unless the user confirmed the change."""


def _text(source: Any, key: str, default: str) -> str:
    # Blueprints come from the client; nested values may have any shape
    value = _value(source, key)
    if isinstance(value, (str, int, float)) and str(value).strip():
        return str(value).strip()
    return default


def _value(source: Any, key: str) -> Any:
    return source.get(key) if isinstance(source, dict) else None


def blueprint_messages(raw_idea: str) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": BLUEPRINT_SYSTEM},
        {
            "role": "user",
            "content": (
                f'Create a detailed product blueprint for this startup idea: "{raw_idea}"\n\n'
                "Be analytical, realistic, and specific. If the idea is generic, "
                "provide a unique angle.\n\n"
                f"Return JSON with this exact structure:\n{BLUEPRINT_SHAPE}"
            ),
        },
    ]


def execution_plan_messages(blueprint: dict[str, Any]) -> list[dict[str, str]]:
    product = _text(blueprint, "productName", DEFAULT_PRODUCT)
    frontend = _text(_value(blueprint, "techStack"), "frontend", DEFAULT_FRONTEND)
    return [
        {
            "role": "system",
            "content": "You are PNX Action Engine. You produce execution checklists.",
        },
        {
            "role": "user",
            "content": (
                f"Create a 10-step MVP Execution Checklist for: {product} using {frontend}.\n\n"
                'Format: {"tasks": [{"id": "1", "phase": "Planning", "task": "Define requirements", '
                '"timeEstimate": "2 days", "outcome": "Clear requirements doc", "isCompleted": false}]}'
            ),
        },
    ]


def timeline_messages(blueprint: dict[str, Any], months: int) -> list[dict[str, str]]:
    product = _text(blueprint, "productName", DEFAULT_PRODUCT)
    return [
        {"role": "system", "content": "You are LaunchPact AI Timeline Analyst."},
        {
            "role": "user",
            "content": (
                f'User wants to launch "{product}" in {months} months. Is this feasible?\n\n'
                f'Format: {{"targetMonths": {months}, "feasible": true, '
                '"cutsRequired": ["feature1"], "riskFactor": "Medium", '
                '"adjustedRoadmapSuggestion": "string"}'
            ),
        },
    ]


def guided_step_messages(
    step: str, blueprint: dict[str, Any], selections: dict[str, Any]
) -> list[dict[str, str]]:
    product = _text(blueprint, "productName", "Startup")
    return [
        {"role": "system", "content": "You are LaunchPact AI Guide."},
        {
            "role": "user",
            "content": (
                f'Step: {step}. Project: "{product}". '
                f"Selections: {json.dumps(selections)}. Explain WHY.\n\n"
                'Format: {"advice": "string", "suggestions": ["option1", "option2"]}'
            ),
        },
    ]


def daily_tasks_messages(
    execution_plan: list[dict[str, Any]], target_months: int
) -> list[dict[str, str]]:
    return [
        {
            "role": "system",
            "content": (
                "You are LaunchPact AI Task Engine. Break plans into granular daily "
                "micro-tasks."
            ),
        },
        {
            "role": "user",
            "content": (
                f"Create 3 hyper-specific tasks per day for {target_months} months.\n"
                "Start from day 1 with exactly 3 tasks per day. Day 1 covers foundation, "
                "environment setup and market depth only.\n"
                'Format: {"dailyTasks": [{"id", "title", "description", "phase", '
                '"estimatedTime", "subTasks": [{"id", "title", "isCompleted"}], '
                '"aiGuidancePrompt", "isCompleted": false, "xpReward", "dayNumber": 1}]}\n\n'
                f"Plan Context: {json.dumps(execution_plan[:8])}"
            ),
        },
    ]


def chat_messages(
    history: list[dict[str, str]],
    new_message: str,
    context: str,
    co_founder_mode: bool,
) -> list[dict[str, str]]:
    mode = CO_FOUNDER_MODE if co_founder_mode else ARCHITECT_MODE
    system = f"{CHAT_PERSONA}\n\n{mode}\n"
    if context:
        system += f"\nProject Context: {context}\n"
    system += f"\n{CHAT_RESPONSE_RULES}"

    turns = [{"role": "system", "content": system}]
    for entry in history:
        turns.append(
            {
                "role": "user" if entry.get("role") == "user" else "assistant",
                "content": entry.get("text") or entry.get("content") or "",
            }
        )
    turns.append({"role": "user", "content": new_message})
    return turns


def enhance_prompt_messages(raw_input: str) -> list[dict[str, str]]:
    return [
        {
            "role": "user",
            "content": (
                f'You are LaunchPact AI. Rewrite this raw idea into a professional prompt: "{raw_input}". '
                "Max 3 sentences. Output ONLY the enhanced prompt, no explanations, no markdown."
            ),
        }
    ]
