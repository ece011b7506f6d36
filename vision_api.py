"""
Single request/response exchange with the OpenAI chat completions API.

The OpenAI SDK takes care of authentication and request encoding; this module
pins the request shape and translates every way the exchange can fail into
the errors defined in errors.py.
"""

import json
import logging

import openai
from openai import AsyncOpenAI

from config import API_SETTINGS, MODELS
from errors import ApiRequestError, EmptyResponseError, TransportError

logger = logging.getLogger(__name__)


def create_client(api_key, http_client=None, timeout=API_SETTINGS["timeout"], base_url=API_SETTINGS["base_url"]):
    """
    Create the async API client used for one batch.

    Args:
        api_key (str): Bearer credential
        http_client: Optional httpx.AsyncClient carrying a custom transport
        timeout (float): Per-request timeout in seconds
        base_url (str): API root

    Returns:
        AsyncOpenAI: Client with SDK retries disabled
    """
    return AsyncOpenAI(
        api_key=api_key,
        base_url=base_url,
        timeout=timeout,
        max_retries=0,
        http_client=http_client,
    )


def build_messages(encoded_image, prompt_spec):
    return [
        {
            "role": "user",
            "content": [
                {
                    "type": "text",
                    "text": prompt_spec.instruction_text
                },
                {
                    "type": "image_url",
                    "image_url": {
                        "url": f"data:image/jpeg;base64,{encoded_image}"
                    }
                }
            ]
        }
    ]


def extract_alt_text(payload):
    """
    Pull the first completion's text out of a decoded response envelope.

    Raises:
        EmptyResponseError: If the envelope has no usable completion
    """
    choices = payload.get("choices") if isinstance(payload, dict) else None
    if not choices:
        raise EmptyResponseError()

    message = choices[0].get("message") if isinstance(choices[0], dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str):
        raise EmptyResponseError()
    return content.strip()


async def request_alt_text(client, encoded_image, prompt_spec, model=MODELS["alt_text"]):
    """
    Ask the model to describe one encoded image.

    Args:
        client (AsyncOpenAI): Client from create_client()
        encoded_image (str): Base64 JPEG data
        prompt_spec (PromptSpec): Instruction and token budget
        model (str): Model name

    Returns:
        str: Trimmed alt text

    Raises:
        ApiRequestError: Non-200 status
        EmptyResponseError: Malformed or empty envelope
        TransportError: No HTTP response was received
    """
    try:
        raw = await client.chat.completions.with_raw_response.create(
            model=model,
            messages=build_messages(encoded_image, prompt_spec),
            max_tokens=prompt_spec.max_response_tokens
        )
    except openai.APIStatusError as e:
        logger.warning("API request failed with status %s", e.status_code)
        raise ApiRequestError(e.status_code, e.response.text)
    except openai.APIConnectionError as e:
        # Covers APITimeoutError as well
        logger.warning("API request did not complete: %s", e)
        raise TransportError(str(e.__cause__ or "") or str(e))

    response = raw.http_response
    if response.status_code != 200:
        raise ApiRequestError(response.status_code, response.text)

    try:
        payload = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise EmptyResponseError("API returned a response that is not JSON")

    return extract_alt_text(payload)
