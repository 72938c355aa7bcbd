"""Statically authored rescue artifacts.

Schema-valid placeholder objects returned when generation fails for a
step whose output feeds the rest of the workflow. They are versioned with
the code and never derived from a failed response, so the same inputs
always produce byte-identical results.
"""

from launchpact.models.llm_outputs import (
    Blueprint,
    DailyTaskSet,
    ExecutionPlan,
    GuidedAdvice,
    TimelineAssessment,
)

RESCUE_CATALOG_VERSION = "2025.06.1"

_EXECUTION_PLAN = (
    ("1", "Strategy", "Define Core UVP & Audience", "2 days", "Startup foundation document"),
    ("2", "Research", "Analyze Top 3 Market Players", "3 days", "Competitive analysis spreadsheet"),
    ("3", "Design", "Draft Primary UI Architecture", "4 days", "Low-fidelity user flow diagram"),
    ("4", "Environment", "Setup Development Sandbox", "1 day", "Working local workspace"),
    ("5", "Brand", "Identity & Visual Direction", "2 days", "Style guide approved"),
    ("6", "Build", "Implementation of Landing Component", "5 days", "CVP deployment ready"),
    ("7", "Intel", "AI Assistant Contextualization", "3 days", "Smart prompt engineering"),
    ("8", "Market", "Acquire Beta Feedback Group", "4 days", "10 initial beta users"),
    ("9", "Launch", "Production Environment Push", "2 days", "Live site access"),
    ("10", "Growth", "Iterate Based on Real Usage", "Long-term", "Phase 2 roadmap"),
)

_FIRST_DAY_TASKS = (
    (
        "r1",
        "Establish Mission Foundation",
        "Define the absolute niche you are targeting and why existing solutions fail them.",
        "Deep Research",
        "s1",
        "Niche narrow-down",
    ),
    (
        "r2",
        "Infrastructure Setup",
        "Initialize your project repository and core development stack configuration.",
        "Setup",
        "s2",
        "Repo initialization",
    ),
    (
        "r3",
        "Competitive Deep-Dive",
        "Identify one major competitor and list 3 specific feature gaps you will fill.",
        "Intelligence",
        "s3",
        "Gap analysis",
    ),
)


def rescue_execution_plan() -> ExecutionPlan:
    """Generic ten-step MVP checklist."""
    return ExecutionPlan(
        tasks=[
            {
                "id": task_id,
                "phase": phase,
                "task": task,
                "timeEstimate": estimate,
                "outcome": outcome,
                "isCompleted": False,
            }
            for task_id, phase, task, estimate, outcome in _EXECUTION_PLAN
        ]
    )


def rescue_daily_tasks() -> DailyTaskSet:
    """Three foundation tasks for day one."""
    return DailyTaskSet(
        daily_tasks=[
            {
                "id": task_id,
                "title": title,
                "description": description,
                "phase": phase,
                "dayNumber": 1,
                "isCompleted": False,
                "xpReward": 100,
                "subTasks": [{"id": sub_id, "title": sub_title, "isCompleted": False}],
            }
            for task_id, title, description, phase, sub_id, sub_title in _FIRST_DAY_TASKS
        ]
    )


def rescue_blueprint(raw_idea: str) -> Blueprint:
    """Template blueprint seeded only with the user's own idea text."""
    idea = (raw_idea or "").strip() or "Your Idea"
    return Blueprint(
        product_name=f"{idea[:30]} Platform",
        tagline="Transforming ideas into reality",
        idea_summary=idea,
        problem_statement="Users face challenges that need better solutions.",
        usp="Unique value proposition based on your idea.",
        pain_points=["User friction", "Inefficient processes"],
        domain_suggestions=["example.com"],
        market_analysis={
            "targetAudience": "Target users",
            "marketGap": "Market opportunity",
            "potentialSize": "Growing market",
        },
        viability={
            "score": 70,
            "saturationAnalysis": "Moderate competition",
            "pivotSuggestion": "Focus on core value proposition",
        },
        competitors=[
            {"name": "Existing Solution", "strength": "Market presence", "weakness": "Limited features"}
        ],
        monetization_strategy=["Subscription", "Freemium"],
        risks_and_assumptions=["Market adoption", "Technical feasibility"],
        mvp_features=[
            {"title": "Core Feature", "description": "Essential functionality", "priority": "High"}
        ],
        tech_stack={
            "frontend": "React",
            "backend": "Node.js",
            "database": "PostgreSQL",
            "deployment": "Cloud",
            "extras": [],
        },
        roadmap=[{"name": "MVP", "timeline": "3 months", "keyDeliverables": ["Core features"]}],
        maintenance_strategy="Regular updates and monitoring.",
        sources=[],
    )


def rescue_timeline(months: int) -> TimelineAssessment:
    """Rule-of-thumb feasibility for a target launch window."""
    if months < 3:
        risk = "High"
    elif months < 6:
        risk = "Moderate"
    else:
        risk = "Low"
    return TimelineAssessment(
        target_months=months,
        feasible=months >= 2,
        cuts_required=["Deep secondary integrations", "Advanced analytics"],
        risk_factor=risk,
        adjusted_roadmap_suggestion=(
            "Streamline the initial UI and focus on core task automation to meet "
            "the timeline. Prioritize MVP features over nice-to-haves."
        ),
    )


def rescue_guided_advice(step: str) -> GuidedAdvice:
    """Topic-keyed advice for a guided builder step."""
    topic = (step or "").lower()
    if "tech" in topic or "stack" in topic:
        return GuidedAdvice(
            advice=(
                "For technical decisions, start with the most proven, well-documented "
                "stack. Don't over-engineer - choose what works and iterate."
            ),
            suggestions=["Choose proven stack", "Document decisions", "Keep it simple"],
        )
    if "market" in topic or "audience" in topic:
        return GuidedAdvice(
            advice=(
                "Define your target audience narrowly first. It's better to serve 100 "
                "people perfectly than 10,000 poorly. Focus on their core pain point."
            ),
            suggestions=["Narrow audience", "Identify core pain", "Validate need"],
        )
    return GuidedAdvice(
        advice=(
            "Focus on the simplest version of this step first. Ensure your core niche "
            "is clearly defined before adding complexity."
        ),
        suggestions=["Focus on core value", "Validate with 1 user", "Continue to next step"],
    )
