"""Deterministic, network-free prompt enhancement."""

import re


GOAL_MAX_CHARS = 140

_SENTENCE_END = re.compile(r"[.!?]")

LOCAL_TEMPLATE = """# Enhanced Prompt
**Goal:** {goal}

**Inputs:**
- Codebase context (selected text or relevant files)
- User notes and constraints

**Deliverables:**
- Concrete changes or files to modify
- Focused code snippets or commands

**Constraints:**
- Keep to the existing stack and naming
- No invented APIs or filenames

**Steps (High-Level Plan):**
1. Clarify unknowns with 1–3 precise questions if needed
2. Propose a minimal, testable plan
3. Produce the output artifacts concisely
"""

SECTION_HEADERS = (
    "**Goal:**",
    "**Inputs:**",
    "**Deliverables:**",
    "**Constraints:**",
    "**Steps (High-Level Plan):**",
)

# (pattern, label) checked in order; first match wins
DOMAIN_PATTERNS = [
    (re.compile(r"react|next\.js|jsx|tsx"), "frontend (React)"),
    (re.compile(r"node|express|typescript|javascript"), "JavaScript/TypeScript"),
    (re.compile(r"python|pandas|django|fastapi"), "Python"),
    (re.compile(r"go\b|golang"), "Go"),
    (re.compile(r"rust|cargo"), "Rust"),
    (re.compile(r"java\b|spring"), "Java"),
    (re.compile(r"sql|postgres|mysql|sqlite"), "Databases"),
    (re.compile(r"ml|ai|model|prompt|fine-?tune|embedding"), "ML/AI"),
    (re.compile(r"devops|docker|kubernetes|terraform"), "DevOps"),
]


def summarize_one_liner(text: str) -> str:
    """First sentence of the text, or its first 140 characters."""
    text = text.strip()
    match = _SENTENCE_END.search(text)
    piece = text[:match.end()] if match else text[:GOAL_MAX_CHARS]
    return piece.strip()


def infer_domain(text: str) -> str:
    """Guess the technical domain of a prompt from keywords."""
    lowered = text.lower()
    for pattern, label in DOMAIN_PATTERNS:
        if pattern.search(lowered):
            return label
    return "software"


class LocalEnhancer:
    """
    Template-based enhancer.

    Always available: it is the default provider and the fallback whenever
    the remote provider cannot be used.
    """

    name = "local"

    def enhance(self, text: str) -> str:
        """Render the structured prompt for ``text``."""
        return LOCAL_TEMPLATE.format(goal=summarize_one_liner(text))
