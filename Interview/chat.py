"""
Contributor-facing interview conversation: LOADING -> ACTIVE -> FINISHED.
"""
import logging
import threading
from enum import Enum
from typing import Dict, List

from django.utils.timezone import now

from Contribute.models import Contributor
from Interview.agents.interviewer_agent import ResponderError, build_greeting, respond_to_contributor
from Interview.agents.interviewer_prompts import APOLOGY_MESSAGE
from Interview.models import Message


class ChatState(str, Enum):
    LOADING = "loading"
    ACTIVE = "active"
    FINISHED = "finished"


class ChatError(Exception):
    pass


class ChatClosed(ChatError):
    pass


class TurnInProgress(ChatError):
    pass


class FinishRejected(ChatError):
    pass


_in_flight = set()
_in_flight_lock = threading.Lock()


def dedupe(turns: List[Dict[str, str]]) -> List[Dict[str, str]]:
    """Drop repeats of an earlier (role, content) pair, keeping first occurrence."""
    seen = set()
    out = []
    for turn in turns:
        key = (turn["role"], turn["content"])
        if key in seen:
            continue
        seen.add(key)
        out.append(turn)
    return out


class InterviewChat:
    def __init__(self, contributor: Contributor):
        self.contributor = contributor
        self.state = ChatState.LOADING
        self.messages: List[Dict[str, str]] = []

    def open(self) -> List[Dict[str, str]]:
        turns = list(
            Message.objects.filter(contributor=self.contributor)
            .order_by("created_at", "id")
            .values("role", "content")
        )
        if self.contributor.interview_completed:
            self.messages = dedupe(turns)
            self.state = ChatState.FINISHED
            return self.messages

        if not turns:
            greeting = {"role": "assistant", "content": build_greeting(self.contributor)}
            Message.objects.create(contributor=self.contributor, **greeting)
            turns = [greeting]

        self.messages = dedupe(turns)
        self.state = ChatState.ACTIVE
        return self.messages

    def send(self, text: str) -> Dict[str, str]:
        if self.state == ChatState.LOADING:
            self.open()
        if self.state == ChatState.FINISHED:
            raise ChatClosed("This interview has already been completed.")

        text = (text or "").strip()
        if not text:
            raise ChatError("Message is empty.")

        contributor_id = self.contributor.id
        with _in_flight_lock:
            if contributor_id in _in_flight:
                raise TurnInProgress("A reply is still on its way.")
            _in_flight.add(contributor_id)

        self.messages.append({"role": "user", "content": text})
        try:
            reply = {"role": "assistant", "content": respond_to_contributor(contributor_id, text)}
        except ResponderError:
            logging.warning("Showing apology to contributor %s after a failed reply", contributor_id)
            reply = {"role": "assistant", "content": APOLOGY_MESSAGE}
        finally:
            with _in_flight_lock:
                _in_flight.discard(contributor_id)
        self.messages.append(reply)
        return reply

    def finish(self, confirm: bool, evidence_text: str = "") -> None:
        if self.contributor.interview_completed:
            raise ChatClosed("This interview has already been completed.")
        if not self.contributor.allocation_prefs_submitted_at:
            raise FinishRejected("Please complete the allocation preferences step first.")
        if not confirm:
            raise FinishRejected(
                "Submitting is final: you won't be able to change your responses or allocation "
                "preferences afterwards. Resend with confirm=true to submit."
            )

        self.contributor.interview_completed = True
        self.contributor.interview_completed_at = now()
        self.contributor.evidence_text = evidence_text or ""
        self.contributor.save(update_fields=["interview_completed", "interview_completed_at", "evidence_text"])
        self.state = ChatState.FINISHED
