from __future__ import annotations

import logging
from typing import Any, Dict, List

from django.conf import settings

from Contribute.models import Contributor
from Interview.agents.interviewer_prompts import (
    GREETING_TEMPLATE,
    INTERVIEWER_SYSTEM_PROMPT,
    PEER_LIST_PROMPT,
)
from Interview.models import Message
from Interview.utils import generate_response_with_groq


class ResponderError(Exception):
    """The interview reply path failed (store or model)."""


def _organization() -> str:
    return getattr(settings, "INTERVIEW_ORGANIZATION", "") or "the collective"


def build_system_prompt() -> str:
    peers = [p for p in getattr(settings, "INTERVIEW_PEER_NAMES", []) if p]
    peer_prompt = PEER_LIST_PROMPT.replace("<peer_names>", ", ".join(peers)) if peers else ""
    prompt = INTERVIEWER_SYSTEM_PROMPT.replace("<peer_prompt>\n", peer_prompt + "\n" if peer_prompt else "")
    return prompt.replace("<organization>", _organization())


def build_greeting(contributor: Contributor) -> str:
    return GREETING_TEMPLATE.replace("<name>", contributor.name).replace("<organization>", _organization())


def load_transcript(contributor_id) -> List[Dict[str, Any]]:
    return [
        {"role": m["role"], "content": m["content"]}
        for m in Message.objects.filter(contributor_id=contributor_id)
        .order_by("created_at", "id")
        .values("role", "content")
    ]


def respond_to_contributor(contributor_id, message: str) -> str:
    """
    One interview turn: read the stored transcript, store the user's message,
    ask the model for the next interviewer message, store and return it.
    Keeps no state of its own between calls.
    """
    try:
        history = load_transcript(contributor_id)
        Message.objects.create(contributor_id=contributor_id, role="user", content=message)
    except Exception as e:
        logging.exception("Interview transcript access failed for contributor %s", contributor_id)
        raise ResponderError(str(e)) from e

    messages = [{"role": "system", "content": build_system_prompt()}]
    messages.extend(history)
    messages.append({"role": "user", "content": message})

    try:
        reply, usage = generate_response_with_groq(
            messages,
            max_completion_tokens=settings.LLM_MAX_COMPLETION_TOKENS,
        )
    except Exception as e:
        logging.warning("Interview reply failed for contributor %s: %s", contributor_id, e)
        raise ResponderError(str(e)) from e

    logging.debug("Interview reply usage for contributor %s: %s", contributor_id, usage)

    try:
        Message.objects.create(contributor_id=contributor_id, role="assistant", content=reply)
    except Exception as e:
        logging.exception("Could not store interview reply for contributor %s", contributor_id)
        raise ResponderError(str(e)) from e
    return reply
