"""Prompt text sent to the analysis endpoint."""

from __future__ import annotations

# Guidance only; the model may name other distortions.
DISTORTION_EXAMPLES: tuple[str, ...] = (
    "Catastrophizing",
    "All-or-Nothing Thinking",
    "Overgeneralization",
    "Mind Reading",
    "Personalization",
)

ANALYSIS_KEYS: tuple[str, ...] = (
    "mood",
    "summary",
    "tip",
    "reflectionPrompt",
    "cognitiveDistortions",
)

_ANALYSIS_PROMPT = """\
Analyze the following journal entry from a user. Based on the text, provide:
1. 'mood': A concise, empathetic label for the user's emotional state \
(e.g., "Anxious but hopeful", "Reflectively calm", "Feeling overwhelmed").
2. 'summary': A single, empathetic sentence that summarizes the key events \
or feelings in the entry.
3. 'tip': A gentle, actionable piece of advice or a wellness tip related to the mood.
4. 'reflectionPrompt': A single, meaningful and open-ended journaling question \
for the user to consider for their next entry, based on the themes in this entry.
5. 'cognitiveDistortions': An array of any cognitive distortions found in the \
text. Common distortions include: {distortions}. For each distortion found, \
provide an object with 'name', 'explanation' (a brief definition), and \
'example' (a direct quote from the user's text that demonstrates it). \
If no distortions are found, return an empty array [].

Please return ONLY a valid JSON object with the keys {keys}. \
Do not include any other text, greetings, or explanations.

Journal Entry:
---
{text}
---
"""


def _join_examples(names: tuple[str, ...]) -> str:
    return ", ".join(names[:-1]) + f", and {names[-1]}"


def build_analysis_prompt(text: str) -> str:
    """Return the full analysis prompt with ``text`` embedded verbatim."""
    keys = ", ".join(f'"{k}"' for k in ANALYSIS_KEYS[:-1])
    keys += f', and "{ANALYSIS_KEYS[-1]}"'
    return _ANALYSIS_PROMPT.format(
        distortions=_join_examples(DISTORTION_EXAMPLES),
        keys=keys,
        text=text,
    )
