"""Built-in card templates for interview-prep content."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field


class FieldHint(BaseModel):
    placeholder: str
    help_text: str
    label: Optional[str] = None


class CardTemplate(BaseModel):
    id: str
    name: str
    tags: list[str] = Field(default_factory=list)
    preferred_model: Literal["Basic", "Cloze"] = "Basic"
    fields: dict[str, FieldHint] = Field(default_factory=dict)


TEMPLATES: tuple[CardTemplate, ...] = (
    CardTemplate(
        id="DSA_CONCEPT",
        name="DSA Concept (HelloInterview)",
        tags=["dsa", "hellointerview", "concept"],
        fields={
            "Front": FieldHint(
                label="Question / Definition Prompt",
                placeholder="What is a monotonic stack?",
                help_text="Concise definition or question prompt",
            ),
            "Back": FieldHint(
                label="Key Idea + Constraints + Example",
                placeholder=(
                    "A stack where elements are always in sorted order...\n\n"
                    "Constraints: O(n) amortized\n\nExample: Next Greater Element"
                ),
                help_text="Key idea + constraints + 1 tiny example",
            ),
            "Extra": FieldHint(
                label="Pitfalls / When It Fails",
                placeholder=(
                    "Common pitfall: forgetting to handle equal elements\n"
                    "Fails when: random access needed"
                ),
                help_text="Common pitfalls / when the approach fails",
            ),
        },
    ),
    CardTemplate(
        id="SD_CONCEPT",
        name="System Design Concept (HelloInterview)",
        tags=["system-design", "hellointerview", "concept"],
        fields={
            "Front": FieldHint(
                label="Concept Prompt",
                placeholder="What is consistent hashing?",
                help_text="Concept question prompt",
            ),
            "Back": FieldHint(
                label="Why + How + Tradeoffs",
                placeholder=(
                    "- Why: distributes load evenly across nodes\n"
                    "- How: hash ring with virtual nodes\n"
                    "- Tradeoff: complexity vs. simple modulo"
                ),
                help_text="3-5 bullets: why + how + tradeoffs",
            ),
            "Extra": FieldHint(
                label="Signals / Anti-signals",
                placeholder=(
                    "Signals: distributed cache, dynamic cluster\n"
                    "Anti-signals: single-node system, fixed cluster size"
                ),
                help_text="When to use (signals) + when NOT to use (anti-signals)",
            ),
        },
    ),
    CardTemplate(
        id="LEETCODE_SR",
        name="LeetCode Problem SR (Pattern)",
        tags=["leetcode", "sr", "pattern"],
        fields={
            "Front": FieldHint(
                label="Problem - 1-Line Description",
                placeholder="Two Sum - Find two numbers that add to target",
                help_text="[Problem Name] - 1-line description",
            ),
            "Back": FieldHint(
                label="Pattern + Approach",
                placeholder=(
                    "Pattern: Hash Map\n1. Iterate array, check complement in map\n"
                    "2. Store num->index\n3. Return indices when found"
                ),
                help_text="Pattern name + 2-3 line approach (NO full code)",
            ),
            "Extra": FieldHint(
                label="Signals",
                placeholder='Signals: "find pair", "two numbers", unsorted array, O(n) expected',
                help_text="What about the problem points to this pattern",
            ),
        },
    ),
    CardTemplate(
        id="SD_CASE",
        name="System Design Case Study (HelloInterview)",
        tags=["system-design", "case-study", "hellointerview"],
        fields={
            "Front": FieldHint(
                label="Design Prompt",
                placeholder="Design a URL Shortener",
                help_text="Design <System>",
            ),
            "Back": FieldHint(
                label="Key Decisions + Tradeoffs",
                placeholder=(
                    "- base62 encoding for short URLs\n"
                    "- read-heavy, so a cache layer (Redis)\n"
                    "- 301 vs 302: 301 for SEO, 302 for analytics\n"
                    "- DB: NoSQL for high write throughput"
                ),
                help_text="3-5 bullet key decisions + core tradeoffs",
            ),
            "Extra": FieldHint(
                label="Scale + Bottlenecks + Failures",
                placeholder=(
                    "Scale: 100M URLs/day, 10:1 read/write\n"
                    "Bottleneck: DB writes at peak\n"
                    "Failure: cache stampede on popular URLs"
                ),
                help_text="Scale assumptions + bottlenecks + failure modes",
            ),
        },
    ),
    CardTemplate(
        id="BEHAVIORAL",
        name="Behavioral Story (HelloInterview)",
        tags=["behavioral", "star", "hellointerview"],
        fields={
            "Front": FieldHint(
                label="Behavioral Question",
                placeholder=(
                    "Tell me about a time when you had to make a difficult "
                    "technical decision under pressure."
                ),
                help_text='"Tell me about a time when ..."',
            ),
            "Back": FieldHint(
                label="STAR Outline + Metric",
                placeholder=(
                    "S: Legacy migration blocking launch\n"
                    "T: Choose between rewrite and adapter\n"
                    "A: Built adapter layer, ran parallel tests\n"
                    "R: Shipped on time, 40% fewer bugs in prod"
                ),
                help_text="STAR bullets (Situation/Task/Action/Result) + 1 metric",
            ),
            "Extra": FieldHint(
                label="Reflection + Lesson",
                placeholder=(
                    "What I'd do differently: start with a spike earlier\n"
                    "Lesson: pragmatic solutions beat perfect ones under time pressure"
                ),
                help_text='"What I\'d do differently" + "1-line lesson"',
            ),
        },
    ),
)

TEMPLATE_IDS: tuple[str, ...] = tuple(t.id for t in TEMPLATES)


def get_template(template_id: str) -> Optional[CardTemplate]:
    for template in TEMPLATES:
        if template.id == template_id:
            return template
    return None
