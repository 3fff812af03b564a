# roast_client.py
import json
import logging
from typing import Any, Callable, Dict, List, Optional, Union

import openai
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from prompts import build_roast_prompt, get_system_prompt
from schemas import (
    DecodedPayload,
    DecodeFailure,
    GenerationResult,
    GenerationSuccess,
    RoastArray,
    RoastEnvelope,
    RoastMessage,
    RoastRequest,
    UpstreamFailure,
)

logger = logging.getLogger("roast_api.client")

ROAST_MODEL = "gpt-4o"
ROAST_MAX_TOKENS = 2000
ROAST_TEMPERATURE = 0.8


# ---------- Fallback pool ----------

_FALLBACK_ROASTS: Dict[str, List[RoastMessage]] = {
    "motivational": [
        RoastMessage(
            screen="You've got this! Time to make today count.",
            done="Amazing work! You're building something incredible.",
            missed="Tomorrow is a fresh start. Don't give up on yourself.",
        ),
        RoastMessage(
            screen="Your future self is counting on today's choices.",
            done="That's the spirit! Keep pushing forward.",
            missed="Setbacks are setups for comebacks. Keep going.",
        ),
    ],
    "mild": [
        RoastMessage(
            screen="Well, well... are we doing this today or what?",
            done="Look who decided to show up! Not bad.",
            missed="Seriously? We had ONE job today.",
        ),
        RoastMessage(
            screen="Time to put your money where your mouth is.",
            done="Finally! Was starting to worry about you.",
            missed="Another day, another creative excuse.",
        ),
    ],
    "medium": [
        RoastMessage(
            screen="Time to stop being a disappointment to yourself.",
            done="Wow, you actually did it. Color me shocked.",
            missed="Pathetic. Your excuses are getting weaker.",
        ),
        RoastMessage(
            screen="Let's see if you can actually follow through today.",
            done="Incredible! You managed basic human consistency.",
            missed="Another failed promise to yourself. Shocking.",
        ),
    ],
    "brutal": [
        RoastMessage(
            screen="Time to prove you're not completely useless.",
            done="Holy crap, you actually did something right for once.",
            missed="Absolutely pathetic. You're your own worst enemy.",
        ),
        RoastMessage(
            screen="Let's see how spectacularly you fail today.",
            done="Miracles do happen. You didn't screw up today.",
            missed="Congratulations, you've mastered the art of failure.",
        ),
    ],
}


def fallback_roasts(tone: Optional[str], count: int) -> List[RoastMessage]:
    """
    Canned roasts used when the LLM is unavailable.

    Unknown tones use the "mild" pool. The pool is cycled until `count`
    messages are produced, so the same (tone, count) always gives the same list.
    """
    pool = _FALLBACK_ROASTS.get(tone) if isinstance(tone, str) else None
    if not pool:
        pool = _FALLBACK_ROASTS["mild"]
    return [pool[i % len(pool)] for i in range(count)]


# ---------- Completion decoding ----------

def decode_roast_payload(content: Any) -> DecodedPayload:
    """
    Classify the raw completion text.

    Two shapes are accepted: a bare array, or an object with a "roasts" array.
    Everything else is a DecodeFailure.
    """
    if not isinstance(content, str):
        return DecodeFailure(reason=f"completion content is {type(content).__name__}, not text")

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        return DecodeFailure(reason=f"JSON parsing failed: {e}")

    if isinstance(data, list):
        return RoastArray(elements=data)
    if isinstance(data, dict) and isinstance(data.get("roasts"), list):
        return RoastEnvelope(roasts=data["roasts"])
    return DecodeFailure(reason="Invalid JSON structure")


def _as_text(value: Any) -> str:
    if not value:
        return ""
    return value if isinstance(value, str) else str(value)


def _to_roast_messages(items: List[Any]) -> Union[List[RoastMessage], DecodeFailure]:
    roasts = []
    for idx, item in enumerate(items):
        if not isinstance(item, dict):
            return DecodeFailure(reason=f"roast #{idx} is {type(item).__name__}, not an object")
        roasts.append(
            RoastMessage(
                screen=_as_text(item.get("screen")),
                done=_as_text(item.get("done")),
                missed=_as_text(item.get("missed")),
            )
        )
    return roasts


# ---------- LLM client ----------

def _chat_llm(api_key: str) -> BaseChatModel:
    """
    Chat model for roast batches.

    SDK retries are disabled: one request, one outbound call.
    """
    return ChatOpenAI(
        model=ROAST_MODEL,
        api_key=api_key,
        temperature=ROAST_TEMPERATURE,
        max_tokens=ROAST_MAX_TOKENS,
        max_retries=0,
    )


class RoastCompletionClient:
    """
    Generates roast batches through OpenAI, with the canned pool as fallback.

    `complete` reports what happened upstream as a GenerationResult;
    `generate` collapses any failure into fallback roasts, so the HTTP layer
    only ever receives a full list.
    """

    def __init__(
        self,
        api_key: Optional[str],
        llm_factory: Callable[[str], BaseChatModel] = _chat_llm,
    ):
        self.api_key = api_key
        self._llm_factory = llm_factory

    async def complete(self, request: RoastRequest) -> GenerationResult:
        if not self.api_key:
            logger.warning("OPENAI_API_KEY not configured; serving fallback roasts")
            return UpstreamFailure(reason="missing_api_key")

        messages = [
            SystemMessage(content=get_system_prompt(request.tone)),
            HumanMessage(content=build_roast_prompt(request)),
        ]

        try:
            llm = self._llm_factory(self.api_key).bind(response_format={"type": "json_object"})
            reply = await llm.ainvoke(messages)
        except openai.APIStatusError as e:
            logger.error(f"OpenAI API request failed: {e.status_code}")
            return UpstreamFailure(
                reason=f"OpenAI API request failed: {e.status_code}",
                status_code=e.status_code,
            )
        except openai.OpenAIError as e:
            logger.error(f"OpenAI API error: {e}")
            return UpstreamFailure(reason=f"OpenAI API error: {e}")
        except Exception as e:
            logger.exception(f"Roast completion crashed: {e}")
            return UpstreamFailure(reason=f"completion crashed: {type(e).__name__}")

        decoded = decode_roast_payload(reply.content)
        if isinstance(decoded, DecodeFailure):
            logger.error(f"Roast payload rejected: {decoded.reason}")
            return UpstreamFailure(reason=decoded.reason)

        items = decoded.elements if isinstance(decoded, RoastArray) else decoded.roasts
        roasts = _to_roast_messages(items)
        if isinstance(roasts, DecodeFailure):
            logger.error(f"Roast payload rejected: {roasts.reason}")
            return UpstreamFailure(reason=roasts.reason)

        # a short batch would leave screen slots empty
        if len(roasts) < request.count:
            logger.error(f"LLM returned {len(roasts)} roasts, {request.count} requested")
            return UpstreamFailure(reason=f"short batch: {len(roasts)}/{request.count}")

        return GenerationSuccess(roasts=roasts[: request.count])

    async def generate(self, request: RoastRequest) -> List[RoastMessage]:
        result = await self.complete(request)
        if isinstance(result, GenerationSuccess):
            return result.roasts

        logger.info(
            f"Falling back to canned roasts (tone={request.tone}, count={request.count}): {result.reason}"
        )
        return fallback_roasts(request.tone, request.count)
