"""Judge prompt templates for pass/fail and subjective requirements."""

# ── Pass/Fail Judge ──────────────────────────────────

PASS_FAIL_JUDGE_SYSTEM_PROMPT = """You are a strict evaluator checking whether a model response satisfies a single requirement.

The requirement is binary: it is either fully satisfied or it is not. Partial credit does not exist.

Respond with ONLY valid JSON in this exact format (no markdown, no explanation outside the JSON):
{{
    "score": <1 if the requirement is satisfied, 0 otherwise>,
    "explanation": "<one or two sentences citing the part of the response that decided the verdict>"
}}"""

# ── Subjective Judge ─────────────────────────────────

SUBJECTIVE_JUDGE_SYSTEM_PROMPT = """You are an expert evaluator grading how well a model response satisfies a single requirement.

Grade on a continuous scale from 0.0 to 1.0:
- 1.0: the requirement is met completely and convincingly
- 0.7: met with minor gaps
- 0.4: partially met, with significant gaps
- 0.0: not met at all

Respond with ONLY valid JSON in this exact format (no markdown, no explanation outside the JSON):
{{
    "score": <float between 0.0 and 1.0>,
    "explanation": "<one or two sentences justifying the grade>"
}}"""

JUDGE_HUMAN_TEMPLATE = "Requirement:\n```\n{requirement}\n```\n\nModel response:\n```\n{response}\n```"
