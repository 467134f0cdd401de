import re
from dataclasses import dataclass

from briefwriter.models import BriefSnapshot, OutlineItem, StudentContext, Tier

from .language import get_language_config, language_instructions


@dataclass(frozen=True)
class DepthProfile:
    grade_label: str
    min_words: int
    max_words: int
    command_verbs: str
    instruction: str

    @property
    def word_range(self) -> str:
        return f"{self.min_words}-{self.max_words} words"


DEPTH_PROFILES: dict[Tier, DepthProfile] = {
    Tier.PASS: DepthProfile(
        grade_label="PASS",
        min_words=200,
        max_words=350,
        command_verbs="describe, explain, identify, outline",
        instruction="EXPLAIN concepts clearly with examples from YOUR work.",
    ),
    Tier.MERIT: DepthProfile(
        grade_label="MERIT",
        min_words=300,
        max_words=450,
        command_verbs="analyse, compare, discuss, examine",
        instruction="ANALYSE and COMPARE different approaches YOU considered. JUSTIFY YOUR decisions with reasoning.",
    ),
    Tier.DISTINCTION: DepthProfile(
        grade_label="DISTINCTION",
        min_words=400,
        max_words=550,
        command_verbs="evaluate, critically assess, justify, recommend",
        instruction=(
            "EVALUATE strengths and limitations of YOUR approach. CRITICALLY ASSESS implications "
            "of YOUR choices. LINK YOUR practice to theory."
        ),
    ),
}

FRAME_WORDS = "120-180 words"
AIM_WORDS = "80-120 words"

WRITER_SYSTEM_PROMPT = """You are BTEC_ASSIGNMENT_WRITER, a controlled academic writing model.

You write ONLY ONE CONTENT BLOCK AT A TIME, strictly bound to a specific criterion or section.

You MUST write in FIRST PERSON from the student's perspective ("I designed...", "In my project, I...").
Never narrate the student's work in the third person.

You MUST NOT:
- Invent features, tools, or work that the student did NOT provide
- Repeat content already written
- Reference criteria not assigned to you
- Use bullet points, numbered lists, headings, or markdown
- Mention criterion codes explicitly in the text
- Pre-empt future criteria content

You MUST:
- Follow the locked brief snapshot
- Base all content on the student's provided inputs
- Maintain continuity with previously generated blocks
- Write in the requested language with a formal academic tone

OUTPUT RULES (STRICT):
- Output PLAIN TEXT ONLY
- No headings, references, tables, or images

FAILURE CONDITIONS:
If the criterion code does not exist in the brief snapshot, output:
ERROR: INVALID_CRITERION

If the task attempts to regenerate content already written, output:
ERROR: DUPLICATE_GENERATION"""


def _format_key(key: str) -> str:
    spaced = re.sub(r"(?<!^)([A-Z])", r" \1", key).replace("_", " ").strip()
    return spaced[:1].upper() + spaced[1:]


def build_student_context(student: StudentContext | None) -> str:
    if student is None:
        return ""

    parts = []
    if student.profile:
        lines = [f"{_format_key(k)}: {v}" for k, v in student.profile.items()]
        parts.append("STUDENT PROFILE (use for personalisation)\n" + "\n".join(lines))

    if student.inputs:
        lines = []
        for key, value in student.inputs.items():
            if isinstance(value, list):
                lines.append(f"{_format_key(key)}:\n" + "\n".join(f"  - {v}" for v in value))
            elif isinstance(value, bool):
                lines.append(f"{_format_key(key)}: {'Yes' if value else 'No'}")
            else:
                lines.append(f"{_format_key(key)}: {value}")
        parts.append(
            "STUDENT'S PROJECT/WORK DETAILS (base ALL content on this, do NOT invent additional details)\n"
            + "\n".join(lines)
        )

    return "\n\n".join(parts)


def _unit_header(snapshot: BriefSnapshot) -> str:
    return f"""UNIT: {snapshot.unit_name} ({snapshot.unit_code})
LEVEL: {snapshot.level}
VOCATIONAL SCENARIO: {snapshot.scenario}"""


def _aims_list(snapshot: BriefSnapshot) -> str:
    return "\n".join(f"- {aim.code}: {aim.title}" for aim in snapshot.learning_aims)


def _language_footer(snapshot: BriefSnapshot) -> str:
    return f"""LANGUAGE: {get_language_config(snapshot.language).name}
{language_instructions(snapshot.language)}"""


def build_introduction_prompt(snapshot: BriefSnapshot, variation_tag: str) -> str:
    return f"""Write an INTRODUCTION for a BTEC assignment in FIRST PERSON.

{_unit_header(snapshot)}

LEARNING AIMS:
{_aims_list(snapshot)}

{build_student_context(snapshot.student)}

STRICT REQUIREMENTS:
- Length: {FRAME_WORDS}
- Explain the unit topic and reference the vocational scenario
- Mention the learning aims at a high level
- NO criteria codes, NO bullet points, NO headings
- UNIQUE VARIATION: {variation_tag}

{_language_footer(snapshot)}

Write the introduction now. Output ONLY the introduction text."""


def build_learning_aim_prompt(
    snapshot: BriefSnapshot, item: OutlineItem, rolling_context: str, variation_tag: str
) -> str:
    return f"""Write a LEARNING AIM INTRODUCTION for a BTEC assignment in FIRST PERSON.

You are writing ONLY for:
{item.title}

{_unit_header(snapshot)}

{build_student_context(snapshot.student)}

PREVIOUS CONTENT:
{rolling_context or "This follows the introduction."}

STRICT REQUIREMENTS:
- Length: {AIM_WORDS} ONLY
- Explain what this learning aim is about and how YOUR project relates to it
- NO grading language (no "Pass", "Merit", "Distinction")
- NO criterion content yet, NO bullet points, NO headings
- UNIQUE VARIATION: {variation_tag}

{_language_footer(snapshot)}

Write the learning aim introduction now. Output ONLY the text."""


def build_criterion_prompt(
    snapshot: BriefSnapshot, item: OutlineItem, rolling_context: str, variation_tag: str
) -> str:
    depth = DEPTH_PROFILES[item.tier or Tier.PASS]
    return f"""Write content for a SPECIFIC CRITERION in a BTEC assignment in FIRST PERSON.

You are writing ONLY for:
Learning Aim: {item.aim_code}
Criterion: {item.criterion_code}
Criterion Description: {item.criterion_description}

{_unit_header(snapshot)}

GRADE LEVEL: {depth.grade_label}
COMMAND VERBS TO USE: {depth.command_verbs}
DEPTH REQUIREMENT: {depth.instruction} {depth.word_range}.

{build_student_context(snapshot.student)}

PREVIOUS CONTENT:
{rolling_context or "This follows the learning aim introduction."}

STRICT RULES:
- Write ONLY content that satisfies THIS criterion using YOUR project as evidence
- Do NOT mention other criteria or criterion codes
- NO bullet points, NO headings, NO markdown
- UNIQUE VARIATION: {variation_tag}

{_language_footer(snapshot)}

Write the criterion content now. Output ONLY the academic text."""


def build_conclusion_prompt(snapshot: BriefSnapshot, rolling_context: str, variation_tag: str) -> str:
    reflection = []
    if snapshot.student is not None:
        for key, label in (
            ("challengesFaced", "STUDENT'S CHALLENGES"),
            ("lessonsLearned", "STUDENT'S LESSONS LEARNED"),
            ("limitations", "STUDENT'S IDENTIFIED LIMITATIONS"),
        ):
            value = snapshot.student.get_input(key)
            if value:
                reflection.append(f"{label}:\n{value}")

    return f"""Write a CONCLUSION for a BTEC assignment in FIRST PERSON.

{_unit_header(snapshot)}
TARGET GRADE: {snapshot.target_grade.value}

LEARNING AIMS COVERED:
{_aims_list(snapshot)}

{chr(10).join(reflection)}

PREVIOUS CONTENT:
{rolling_context}

STRICT REQUIREMENTS:
- Length: {FRAME_WORDS}
- Summarise what YOU achieved and the skills demonstrated
- Reflect on challenges and lessons learned where provided
- NO new information, NO criteria codes, NO bullet points, NO headings
- UNIQUE VARIATION: {variation_tag}

{_language_footer(snapshot)}

Write the conclusion now. Output ONLY the conclusion text."""


def build_references_prompt(snapshot: BriefSnapshot, count: int) -> str:
    sources = "\n".join(f"- {s}" for s in snapshot.sources)
    return f"""Generate {count} academic REFERENCES for a BTEC assignment.

UNIT: {snapshot.unit_name}
TOPIC: {snapshot.scenario}
LEVEL: {snapshot.level}
{f"SUGGESTED SOURCES:{chr(10)}{sources}" if sources else ""}

REQUIREMENTS:
- Exactly {count} references
- Oxford referencing style
- Mix of textbooks, academic journals, and reputable websites
- Relevant to the unit topic, each UNIQUE and realistic

Output as JSON:
{{
  "references": [
    {{ "id": 1, "text": "Author, A. (Year) Title. Publisher." }},
    {{ "id": 2, "text": "Author, B. (Year) 'Article Title', Journal Name, Volume(Issue), pp. X-Y." }}
  ]
}}

Generate the references now. Output ONLY the JSON."""
