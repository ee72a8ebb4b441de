"""Local question set used whenever the remote catalog is empty or unreachable."""

from __future__ import annotations

from sprint_quiz.constants.quiz_constants import TARGET_INCORRECT_ANSWER_COUNT
from sprint_quiz.core.models import Question
from sprint_quiz.core.shuffler import Shuffler

LOCAL_QUESTIONS: tuple[Question, ...] = (
    Question(
        id="1",
        prompt="What was the Big Announcement at Sitecore Symposium this year?",
        correct_answer="SitecoreAI",
        incorrect_answers=("XM Cloud", "OrderCloud", "Content Hub"),
        competency="Platform",
    ),
    Question(
        id="2",
        prompt="What is the core concept behind the newly announced SitecoreAI?",
        correct_answer=(
            "A next-gen AI-first composable SaaS platform unifying content, data, "
            "personalization, and search"
        ),
        incorrect_answers=(
            "A traditional CMS with AI features",
            "A headless CMS solution",
            "A commerce-only platform",
        ),
        competency="Platform",
    ),
    Question(
        id="3",
        prompt="Which workspace is central to building AI workflows in SitecoreAI?",
        correct_answer="Agentic Studio",
        incorrect_answers=("Content Studio", "Experience Editor", "Marketing Control Panel"),
        competency="AI",
    ),
    Question(
        id="4",
        prompt="How many pre-built AI agents did Sitecore say would ship with Agentic Studio at launch?",
        correct_answer="20",
        incorrect_answers=("10", "30", "50"),
        competency="AI",
    ),
    Question(
        id="5",
        prompt=(
            "What major change does SitecoreAI bring to the licensing model, "
            "according to Symposium 2025?"
        ),
        correct_answer="One metric licensing with full access, no extra cost for AI agents",
        incorrect_answers=("Per-user licensing model", "Usage-based pricing", "Fixed annual fee"),
        competency="Platform",
    ),
    Question(
        id="6",
        prompt="What is SitecoreAI Pathway?",
        correct_answer=(
            "A content-migration tool using generative AI to migrate from XP or XM to SitecoreAI"
        ),
        incorrect_answers=(
            "A new authentication system",
            "A deployment pipeline",
            "A content modeling tool",
        ),
        competency="Migration",
    ),
    Question(
        id="7",
        prompt="Which of these Sitecore XP versions ends mainstream support at the end of this year?",
        correct_answer="10.3",
        incorrect_answers=("10.1", "10.2", "10.4"),
        competency="Migration",
    ),
    Question(
        id="8",
        prompt="What is the Sitecore AI Innovation Lab highlighted on the Sitecore platform site?",
        correct_answer=(
            "A co-innovation program where customers experiment with emerging AI features "
            "before general release"
        ),
        incorrect_answers=(
            "A physical event venue for Symposium keynotes",
            "Sitecore's public GitHub repository of open-source code",
            "A marketing certification track for partners",
        ),
        competency="AI",
    ),
    Question(
        id="9",
        prompt="Which of these is not a component included in SitecoreAI's unified platform?",
        correct_answer="OrderCloud",
        incorrect_answers=("Content Hub", "Personalize", "Search"),
        competency="Platform",
    ),
    Question(
        id="10",
        prompt="Which of these is a dedicated program to help businesses transition from PAAS to SAAS?",
        correct_answer="Sitecore Accelerate",
        incorrect_answers=("Sitecore Migration", "Sitecore Upgrade", "Sitecore Transform"),
        competency="Migration",
    ),
    Question(
        id="11",
        prompt=(
            "At Symposium 2025, which new component of Sitecore Studio was not explicitly announced?"
        ),
        correct_answer="Data Studio, a new no-code analytics tool",
        incorrect_answers=("Content Studio", "Experience Studio", "Marketing Studio"),
        competency="AI",
    ),
    Question(
        id="12",
        prompt=(
            "What significant performance or usability enhancement was announced for XM Cloud "
            "in the 2025 release?"
        ),
        correct_answer="Support for Angular and .NET Core frameworks",
        incorrect_answers=(
            "Improved caching",
            "Better CDN integration",
            "Enhanced security features",
        ),
        competency="Development",
    ),
    Question(
        id="13",
        prompt=(
            "Which of these statements about migration to SitecoreAI is true as per the 2025 "
            "announcements?"
        ),
        correct_answer=(
            "XM Cloud customers get automatic, seamless upgrade to SitecoreAI with data and "
            "continuity preserved."
        ),
        incorrect_answers=(
            "Migration requires manual data export",
            "Only XP customers can migrate",
            "Migration is not available yet",
        ),
        competency="Migration",
    ),
    Question(
        id="14",
        prompt=(
            "What Sitecore API service gives you globally replicated, scalable access to your "
            "items, layout + media with headless development in mind?"
        ),
        correct_answer="Experience Edge",
        incorrect_answers=("Content API", "GraphQL API", "REST API"),
        competency="Development",
    ),
    Question(
        id="15",
        prompt="The new Content SDK allows what platforms to be targeted?",
        correct_answer="SitecoreAI/XM Cloud",
        incorrect_answers=("XP only", "XM only", "Commerce only"),
        competency="Development",
    ),
    Question(
        id="16",
        prompt=(
            "Which Sitecore solution delivers a fully managed, composable CMS in the cloud with "
            "auto-scaling and continuous updates?"
        ),
        correct_answer="Sitecore XM Cloud",
        incorrect_answers=("Sitecore XP", "Sitecore Commerce", "Sitecore Connect"),
        competency="Platform",
    ),
    Question(
        id="17",
        prompt=(
            "Sitecore Content Hub is primarily positioned as what type of solution on the "
            "Sitecore platform site?"
        ),
        correct_answer=(
            "A unified content operations platform spanning planning, production, and delivery"
        ),
        incorrect_answers=(
            "A legacy on-prem CMS",
            "A payment processing gateway",
            "A low-code automation builder",
        ),
        competency="Platform",
    ),
    Question(
        id="18",
        prompt=(
            "Which Sitecore product delivers API-first digital commerce with marketplace, "
            "product, and order management out of the box?"
        ),
        correct_answer="Sitecore OrderCloud",
        incorrect_answers=("Sitecore Personalize", "Sitecore Send", "Sitecore Search"),
        competency="Platform",
    ),
    Question(
        id="19",
        prompt=(
            "Sitecore Personalize and Sitecore CDP combine to offer which key capability "
            "according to the Sitecore platform overview?"
        ),
        correct_answer="Real-time customer data activation with AI-driven experimentation",
        incorrect_answers=(
            "Static customer segments refreshed nightly",
            "On-premise analytics dashboards only",
            "Batch email sending without personalization",
        ),
        competency="Personalization",
    ),
    Question(
        id="20",
        prompt=(
            "Which Sitecore service gives headless teams instant, global delivery of content, "
            "layouts, and media via API?"
        ),
        correct_answer="Sitecore Experience Edge",
        incorrect_answers=("Sitecore Cortex", "Sitecore Discover", "Sitecore Accelerate"),
        competency="Development",
    ),
    Question(
        id="21",
        prompt="Which of these are components of SitecoreAI's unified platform?",
        correct_answer=("Content Hub", "Personalize", "Search"),
        incorrect_answers=("OrderCloud",),
        is_multi_select=True,
        explanation="OrderCloud is the commerce product and is not part of the unified platform.",
        competency="Platform",
    ),
)

# Pool of common product terms used to pad distractors when seeding questions.
DISTRACTOR_TERMS: tuple[str, ...] = (
    "Sitecore XP",
    "Sitecore XM",
    "Sitecore Commerce",
    "Sitecore Content Hub",
    "Sitecore OrderCloud",
    "Sitecore Personalize",
    "Sitecore Search",
    "Sitecore Send",
    "Sitecore Connect",
    "Sitecore Discover",
    "Experience Editor",
    "Content Editor",
    "Marketing Control Panel",
    "Sitecore Forms",
    "Sitecore Analytics",
    "Sitecore Cortex",
    "Sitecore JSS",
    "Sitecore Headless",
    "Sitecore Horizon",
    "Sitecore SXA",
    "Sitecore MVC",
    "Sitecore Helix",
    "Sitecore Habitat",
    "Sitecore Docker",
    "Sitecore Kubernetes",
)


def local_questions() -> list[Question]:
    return list(LOCAL_QUESTIONS)


def pad_incorrect_answers(
    question: Question,
    count: int = TARGET_INCORRECT_ANSWER_COUNT,
    shuffler: Shuffler | None = None,
) -> tuple[str, ...]:
    """Return the question's distractors topped up to ``count`` from the term pool."""
    existing = list(question.incorrect_answers)
    missing = count - len(existing)
    if missing <= 0:
        return tuple(existing)
    used = {*question.correct_answers, *existing}
    available = [term for term in DISTRACTOR_TERMS if term not in used]
    picked = (shuffler or Shuffler()).shuffle(available)[:missing]
    return tuple(existing + picked)
