"""Rule-based content classification.

Each category has *strong* signals (near-unambiguous markers) and *weak*
signals (supporting evidence). A category is a candidate only when its strong
matches reach the threshold; candidates are ranked by ``strong * 3 + weak``
and ties keep the earlier rule. Nothing matching falls back to ``OTHER``.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

STRONG_WEIGHT = 3


class ContentCategory(str, enum.Enum):
    LEETCODE_PROBLEM = "LEETCODE_PROBLEM"
    DSA_CONCEPT = "DSA_CONCEPT"
    SYSTEM_DESIGN_PRACTICE = "SYSTEM_DESIGN_PRACTICE"
    SYSTEM_DESIGN_CONCEPT = "SYSTEM_DESIGN_CONCEPT"
    PROGRAMMING_LANGUAGE = "PROGRAMMING_LANGUAGE"
    BEHAVIORAL_QA = "BEHAVIORAL_QA"
    OTHER = "OTHER"


@dataclass(frozen=True)
class DetectionRule:
    category: ContentCategory
    strong: tuple[re.Pattern[str], ...]
    weak: tuple[re.Pattern[str], ...]
    threshold: int


def _compile(*patterns: str, flags: int = 0) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(p, flags) for p in patterns)


RULES: tuple[DetectionRule, ...] = (
    DetectionRule(
        ContentCategory.LEETCODE_PROBLEM,
        strong=(
            re.compile(r"leetcode", re.I),
            re.compile(r"\bInput\s*:"),
            re.compile(r"\bOutput\s*:"),
            re.compile(r"\bConstraints?\s*:", re.I),
            re.compile(r"\bExample\s+\d+\s*:"),
            re.compile(r"#\d{1,4}\b"),
            re.compile(r"\bneetcode\b", re.I),
        ),
        weak=(
            re.compile(r"\btime complexity\b", re.I),
            re.compile(r"\bspace complexity\b", re.I),
            re.compile(r"O\([^)]+\)"),
            re.compile(r"\bbrute\s*force\b", re.I),
            re.compile(r"\boptimal\b", re.I),
        ),
        threshold=2,
    ),
    DetectionRule(
        ContentCategory.DSA_CONCEPT,
        strong=_compile(
            r"\bdata\s+structure",
            r"\balgorithm\b",
            r"\bbinary\s+(tree|search)\b",
            r"\bhash\s*(map|table|set)\b",
            r"\blinked\s+list\b",
            r"\b(BFS|DFS|dijkstra|topological)\b",
            r"\bheap\b",
            r"\btrie\b",
            r"\bstack\b",
            r"\bqueue\b",
            r"\bgraph\b",
            r"\bsorting\b",
            r"\bdynamic\s+programming\b",
            r"\bsliding\s+window\b",
            r"\btwo\s+pointer",
            r"\bmonotonic\b",
            flags=re.I,
        ),
        weak=(
            re.compile(r"O\([^)]+\)"),
            re.compile(r"\btime complexity\b", re.I),
            re.compile(r"\bspace complexity\b", re.I),
            re.compile(r"\brecursion\b", re.I),
            re.compile(r"\bamortized\b", re.I),
        ),
        threshold=2,
    ),
    DetectionRule(
        ContentCategory.SYSTEM_DESIGN_PRACTICE,
        strong=_compile(
            r"\bdesign\s+(a|an|the)\s+\w",
            r"\bdesign\s+(youtube|twitter|instagram|uber|whatsapp|facebook|netflix"
            r"|tiktok|slack|discord|reddit|url\s+shortener|pastebin|rate\s+limiter"
            r"|chat|notification|search\s+engine|google\s+drive|dropbox|payment|booking)",
            r"\bhow\s+would\s+you\s+design\b",
            flags=re.I,
        ),
        weak=_compile(
            r"\bscalability\b",
            r"\bload\s+balancer\b",
            r"\bdatabase\s+(schema|design)\b",
            r"\bAPI\s+design\b",
            r"\bmicroservice",
            r"\bcaching\b",
            flags=re.I,
        ),
        threshold=1,
    ),
    DetectionRule(
        ContentCategory.SYSTEM_DESIGN_CONCEPT,
        strong=(
            re.compile(r"\bsystem\s+design\b", re.I),
            re.compile(r"\bscalability\b", re.I),
            re.compile(r"\bdistributed\s+(system|computing)\b", re.I),
            re.compile(r"\bCAP\s+theorem\b", re.I),
            re.compile(r"\bload\s+balanc", re.I),
            re.compile(r"\bconsistent\s+hashing\b", re.I),
            re.compile(r"\bsharding\b", re.I),
            re.compile(r"\breplication\b", re.I),
            re.compile(r"\bmessage\s+queue\b", re.I),
            re.compile(r"\bCDN\b"),
            re.compile(r"\bmicroservice", re.I),
            re.compile(r"\bevent[\s-]driven\b", re.I),
            re.compile(r"\bCQRS\b", re.I),
        ),
        weak=_compile(
            r"\bthroughput\b",
            r"\blatency\b",
            r"\bavailability\b",
            r"\bpartition\s+tolerance\b",
            r"\bcaching\b",
            r"\bRedis\b",
            r"\bKafka\b",
            flags=re.I,
        ),
        threshold=2,
    ),
    DetectionRule(
        ContentCategory.PROGRAMMING_LANGUAGE,
        strong=(
            re.compile(r"\bdef\s+\w+\s*\("),
            re.compile(r"\bfunc\s+\w+\s*\("),
            re.compile(r"\bfn\s+\w+\s*\("),
            re.compile(r"\bgoroutine", re.I),
            re.compile(r"\bchannel\b.*\bgo\b", re.I),
            re.compile(r"\bpython\b", re.I),
            re.compile(r"\bgolang\b|\bgo\s+language\b", re.I),
            re.compile(r"\brust\b", re.I),
            re.compile(r"\btypescript\b", re.I),
            re.compile(r"\bjavascript\b", re.I),
            re.compile(r"\bjava\b", re.I),
            re.compile(r"\bswift\b", re.I),
            re.compile(r"\bkotlin\b", re.I),
            re.compile(r"\bdecorator\b", re.I),
            re.compile(r"\bgenerator\b", re.I),
            re.compile(r"\basync\s+await\b", re.I),
            re.compile(r"\btype\s+hint", re.I),
            re.compile(r"\bgenerics?\b", re.I),
            re.compile(r"\bclosure\b", re.I),
            re.compile(r"\bprotocol\b", re.I),
            re.compile(r"\btrait\b", re.I),
            re.compile(r"\binterface\b", re.I),
        ),
        weak=_compile(
            r"\bsyntax\b",
            r"\bcompiler\b",
            r"\binterpreter\b",
            r"\bruntime\b",
            r"\bmemory\s+management\b",
            flags=re.I,
        ),
        threshold=2,
    ),
    DetectionRule(
        ContentCategory.BEHAVIORAL_QA,
        strong=(
            re.compile(r"tell\s+me\s+about\s+a\s+time", re.I),
            re.compile(r"\bSTAR\b"),
            re.compile(r"\bbehavioral\b", re.I),
            re.compile(r"\bsituation\b.*\btask\b.*\baction\b.*\bresult\b", re.I | re.S),
            re.compile(r"\bleadership\b", re.I),
            re.compile(r"\bconflict\s+resolution\b", re.I),
            re.compile(r"\bteamwork\b", re.I),
            re.compile(r"describe\s+a\s+(situation|time|challenge)", re.I),
            re.compile(r"\bwhat\s+would\s+you\s+do\s+if\b", re.I),
            re.compile(r"\bgive\s+me\s+an\s+example\b", re.I),
        ),
        weak=_compile(
            r"\binterview\b",
            r"\bstrength",
            r"\bweakness",
            r"\bchallenge\b",
            r"\baccomplishment\b",
            flags=re.I,
        ),
        threshold=1,
    ),
)


def _count(text: str, patterns: tuple[re.Pattern[str], ...]) -> int:
    return sum(1 for p in patterns if p.search(text))


def score_categories(text: str) -> dict[ContentCategory, int]:
    """Score of every category whose strong matches clear its threshold."""
    scores: dict[ContentCategory, int] = {}
    for rule in RULES:
        strong = _count(text, rule.strong)
        if strong < rule.threshold:
            continue
        scores[rule.category] = strong * STRONG_WEIGHT + _count(text, rule.weak)
    return scores


def classify(text: str) -> ContentCategory:
    best = ContentCategory.OTHER
    best_score = 0
    for category, score in score_categories(text).items():
        if score > best_score:
            best, best_score = category, score
    return best


LABELS: dict[ContentCategory, str] = {
    ContentCategory.DSA_CONCEPT: "DSA Concept",
    ContentCategory.LEETCODE_PROBLEM: "LeetCode Problem",
    ContentCategory.SYSTEM_DESIGN_CONCEPT: "System Design Concept",
    ContentCategory.SYSTEM_DESIGN_PRACTICE: "System Design Practice",
    ContentCategory.PROGRAMMING_LANGUAGE: "Programming Language",
    ContentCategory.BEHAVIORAL_QA: "Behavioral Q&A",
    ContentCategory.OTHER: "General",
}


def category_label(category: ContentCategory) -> str:
    return LABELS[category]


PROMPT_ENHANCEMENTS: dict[ContentCategory, str] = {
    ContentCategory.LEETCODE_PROBLEM: """## Content Type Detected: LeetCode Problem

Create cards optimized for pattern recognition and problem-solving recall:
- **Front**: "[Problem Name] - 1-line description" format
- **Back**: Pattern name + 2-3 line approach outline (NO full code). Include time/space complexity.
- **Extra**: Recognition signals: what clues in the problem hint at this pattern? Include edge cases.
- **Code**: Only include a short pseudocode snippet if it clarifies the approach. Keep under 5 lines.
- **Tags**: Include the pattern name (e.g., "two-pointer", "sliding-window", "hash-map"), difficulty level, and topic.
- Prefer BASIC note type for LeetCode problems (pattern to approach mapping works best as Q&A).""",
    ContentCategory.DSA_CONCEPT: """## Content Type Detected: DSA Concept

Create cards optimized for data structure and algorithm mastery:
- **Front**: Clear definition prompt: "What is X?" or "When would you use X?"
- **Back**: Concise definition + key constraints (time/space complexity) + 1 tiny example
- **Extra**: Common pitfalls, when this approach fails, edge cases to watch for
- **Code**: Only if a short code snippet illustrates the concept better than words. Keep minimal.
- Focus on atomic concepts: one idea per card.
- Prefer BASIC for definitions and comparisons, CLOZE for memorizing specific complexities or properties.""",
    ContentCategory.SYSTEM_DESIGN_CONCEPT: """## Content Type Detected: System Design Concept

Create cards optimized for system design interview recall:
- **Front**: "What is X?" or "Why use X?" (concept-level question)
- **Back**: Structure as "Why / How / Tradeoffs" (3-5 bullets)
- **Extra**: Signals (when to use) and anti-signals (when NOT to use) in interviews
- Focus on tradeoffs and decision-making, not implementation details.
- Prefer BASIC note type for system design concepts.""",
    ContentCategory.SYSTEM_DESIGN_PRACTICE: """## Content Type Detected: System Design Practice (Case Study)

Create cards optimized for end-to-end system design recall:
- **Front**: "Design a [System]" or a specific design decision question
- **Back**: 3-5 bullet key decisions + core tradeoffs. Include the "why" behind each decision.
- **Extra**: Scale assumptions, bottleneck analysis, failure modes, and what makes this design unique
- Break large designs into multiple atomic cards (one per major decision or component).
- Prefer BASIC note type for design case studies.""",
    ContentCategory.PROGRAMMING_LANGUAGE: """## Content Type Detected: Programming Language Concept

Create cards optimized for language-specific knowledge retention:
- **Front**: Precise question about syntax, behavior, or concept: "What does X do in [Language]?" or "How does [Language] handle X?"
- **Back**: Clear, concise answer with a tiny code example if helpful
- **Extra**: Common gotchas, comparison with other languages, when to use vs. alternatives
- **Code**: Include short code snippets when they clarify behavior. Keep under 5 lines.
- Use CLOZE for syntax memorization (e.g., "In Python, {{c1::@staticmethod}} decorates a method that...")
- Use BASIC for conceptual understanding and comparisons.""",
    ContentCategory.BEHAVIORAL_QA: """## Content Type Detected: Behavioral Interview Q&A

Create cards optimized for behavioral interview storytelling:
- **Front**: The behavioral question in "Tell me about a time when..." format
- **Back**: STAR outline: Situation (1 line), Task (1 line), Action (2-3 lines), Result (1 line + metric)
- **Extra**: "What I'd do differently" reflection + 1-line lesson learned
- Keep stories concise but specific: include concrete numbers and outcomes.
- Always prefer BASIC note type for behavioral questions.
- Tags should include the competency being tested (e.g., "leadership", "conflict-resolution", "technical-decision").""",
    ContentCategory.OTHER: """## Content Type: General

Create well-structured, atomic flashcards following spaced repetition best practices:
- One idea per card
- Clear, unambiguous questions
- Concise answers
- Use Extra field only when it adds genuine value (pitfalls, mnemonics, context)
- Choose between BASIC and CLOZE based on what best suits the content.""",
}


def prompt_enhancement(category: ContentCategory) -> str:
    return PROMPT_ENHANCEMENTS.get(category, PROMPT_ENHANCEMENTS[ContentCategory.OTHER])
