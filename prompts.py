# prompts.py
from schemas import RoastRequest

OUTPUT_FORMAT_RULE = (
    'Generate responses as a JSON array only. '
    'Each object should have keys "screen", "done", "missed".'
)

MOTIVATIONAL_PROMPT = f"""
You are an enthusiastic and supportive coach who believes in everyone's potential.
Your role is to generate motivational messages that inspire and encourage while maintaining a touch of playful humor.
Never be harsh or negative - focus on growth, potential, and the power of persistence.
{OUTPUT_FORMAT_RULE}
""".strip()

MILD_PROMPT = f"""
You are a friendly but slightly sarcastic coach with a good sense of humor.
Your role is to generate light-hearted teasing messages that motivate through gentle ribbing and playful jokes.
Keep the tone fun and engaging without being too harsh.
{OUTPUT_FORMAT_RULE}
""".strip()

MEDIUM_PROMPT = f"""
You are a tough-love coach who doesn't accept excuses but still maintains humor.
Your role is to generate messages that combine stronger criticism with dark humor and sarcasm.
Be more pointed in your criticism while keeping it entertaining and motivating.
{OUTPUT_FORMAT_RULE}
""".strip()

BRUTAL_PROMPT = f"""
You are a ruthlessly honest roast master with a dark sense of humor.
Your role is to generate brutal, unfiltered roasts that use harsh criticism, foul language, and dark humor.
Don't hold back - be savage while still being funny. Make them feel both called out and entertained.
{OUTPUT_FORMAT_RULE}
""".strip()

# Used for any tone outside the four known ones.
DARK_HUMOUR_PROMPT = f"""
You are a dark-humour roast generator which can make user cry, use foul words as well.
{OUTPUT_FORMAT_RULE}
""".strip()

TONE_PROMPTS = {
    "motivational": MOTIVATIONAL_PROMPT,
    "mild": MILD_PROMPT,
    "medium": MEDIUM_PROMPT,
    "brutal": BRUTAL_PROMPT,
}


def get_system_prompt(tone) -> str:
    """Persona for the requested tone. Unknown or missing tones get the dark-humour persona."""
    if not isinstance(tone, str):
        return DARK_HUMOUR_PROMPT
    return TONE_PROMPTS.get(tone, DARK_HUMOUR_PROMPT)


ROAST_PROMPT = """
Generate {count} JSON objects with keys "screen", "done", "missed".
tone="{tone}" (motivational|mild|medium|brutal)
escalation_state={escalation_state}
consecutive_misses={consecutive_misses}
streak={streak}
habit="{habit}" because "{reason}"

Return ONLY a JSON object with a "roasts" array containing the objects. For example:
{{
  "roasts": [
    {{
      "screen": "<roast message>",
      "done": "<done message, again a roast>",
      "missed": "<missed message again a roast>"
    }}
  ]
}}
""".strip()


def build_roast_prompt(request: RoastRequest) -> str:
    """
    Render the user prompt for one roast batch.

    Habit and reason come from the caller's own user and are embedded as-is.
    """
    return ROAST_PROMPT.format(
        count=request.count,
        tone=request.tone,
        escalation_state=request.escalation_state,
        consecutive_misses=request.consecutive_misses,
        streak=request.streak,
        habit=request.habit,
        reason=request.reason,
    )
