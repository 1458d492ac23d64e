"""
Chat-completion client for an OpenAI-compatible API
"""

import json
import logging
import re

import requests
from django.conf import settings

from AIAssistant.exceptions import LLMServiceError

logger = logging.getLogger(__name__)

CODE_FENCE_RE = re.compile(r'^```(?:json)?\s*|\s*```$', re.IGNORECASE)


def chat_completion(system_prompt, user_prompt, max_tokens=1000, temperature=0.3):
    """
    Send one system + user message pair and return the assistant's text.
    Raises LLMServiceError on missing configuration, transport errors,
    non-2xx answers and malformed bodies.
    """
    api_key = settings.OPENAI_API_KEY
    if not api_key:
        raise LLMServiceError("OpenAI API key not configured")

    payload = {
        "model": settings.OPENAI_MODEL,
        "messages": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
        "max_tokens": max_tokens,
        "temperature": temperature,
    }

    try:
        response = requests.post(
            settings.OPENAI_API_URL,
            json=payload,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            timeout=settings.OPENAI_TIMEOUT
        )
        response.raise_for_status()
        data = response.json()
        return data["choices"][0]["message"]["content"]
    except requests.exceptions.HTTPError as e:
        logger.error(f"OpenAI API error {e.response.status_code}: {e.response.text[:500]}")
        raise LLMServiceError(f"OpenAI API error: {e.response.status_code}") from e
    except requests.exceptions.RequestException as e:
        logger.error(f"OpenAI API request failed: {str(e)}")
        raise LLMServiceError(f"OpenAI API request failed: {str(e)}") from e
    except (ValueError, KeyError, IndexError, TypeError) as e:
        logger.error(f"Unexpected OpenAI API response: {str(e)}")
        raise LLMServiceError("Unexpected response from OpenAI API") from e


def parse_json_content(content):
    """JSON object from the model's answer (code fences tolerated), or None"""
    if not content:
        return None
    text = CODE_FENCE_RE.sub('', content.strip())
    try:
        parsed = json.loads(text)
    except ValueError:
        logger.warning(f"Could not parse model response as JSON: {content[:200]}")
        return None
    return parsed if isinstance(parsed, dict) else None
