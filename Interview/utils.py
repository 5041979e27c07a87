import logging

from django.conf import settings
from groq import Groq


class LLMError(Exception):
    """The hosted model could not produce a reply."""


def get_groq_client():
    api_key = getattr(settings, "GROQ_API_KEY", None)
    if not api_key:
        raise LLMError("API key is missing. Please set the GROQ_API_KEY environment variable.")
    return Groq(api_key=api_key, timeout=settings.LLM_TIMEOUT_SECONDS, max_retries=0)


def generate_response_with_groq(messages, model=None, max_completion_tokens=None):
    """
    Single chat-completion call. Returns (content, usage dict). Any failure is
    raised as LLMError; callers decide what the user sees.
    """
    model = model or settings.GROQ_MODEL
    request_args = {
        "messages": messages,
        "model": model,
    }
    if max_completion_tokens:
        request_args["max_completion_tokens"] = max_completion_tokens

    client = get_groq_client()
    try:
        chat_completion = client.chat.completions.create(**request_args)
    except Exception as e:
        logging.warning(f"Groq call failed: {e}")
        raise LLMError(str(e)) from e

    response_content = chat_completion.choices[0].message.content
    if not response_content:
        raise LLMError("The model returned an empty reply.")
    usage = chat_completion.usage
    return response_content, usage.model_dump() if usage else None
