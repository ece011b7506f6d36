"""Shared fixtures: in-memory images and a fake chat completions endpoint."""

import base64
import inspect
import json
from io import BytesIO

import httpx
import pytest
from PIL import Image

from alt_text_generator import AltTextGenerator
from credential_store import MemoryCredentialStore

API_KEY = "sk-test-key"

COLORS = {
    "red": (255, 0, 0),
    "green": (0, 255, 0),
    "blue": (0, 0, 255),
}


def make_image(color="red", size=(64, 48), fmt="PNG", mode="RGB"):
    """Solid-colour image encoded as bytes."""
    img = Image.new(mode, size, COLORS[color] if mode == "RGB" else COLORS[color] + (255,))
    output = BytesIO()
    img.save(output, format=fmt)
    return output.getvalue()


def completion(text, status_code=200):
    return httpx.Response(
        status_code,
        json={"choices": [{"index": 0, "message": {"role": "assistant", "content": text}}]},
    )


def image_color(payload):
    """Name of the dominant colour of the image inside a request payload."""
    url = payload["messages"][0]["content"][1]["image_url"]["url"]
    data = base64.b64decode(url.split(",", 1)[1])
    pixel = Image.open(BytesIO(data)).convert("RGB").getpixel((0, 0))
    channel = pixel.index(max(pixel))
    return ["red", "green", "blue"][channel]


class FakeApi:
    """
    Records every request and answers with `responder(payload)`.

    The responder may be sync or async and returns an httpx.Response;
    raising an httpx exception simulates a transport failure.
    """

    def __init__(self):
        self.requests = []
        self.payloads = []
        self.responder = lambda payload: completion("A description")

    async def handler(self, request):
        payload = json.loads(request.content)
        self.requests.append(request)
        self.payloads.append(payload)
        result = self.responder(payload)
        if inspect.isawaitable(result):
            result = await result
        return result

    @property
    def call_count(self):
        return len(self.requests)


@pytest.fixture
def fake_api():
    return FakeApi()


@pytest.fixture
def http_client(fake_api):
    return httpx.AsyncClient(transport=httpx.MockTransport(fake_api.handler))


@pytest.fixture
def credential_store():
    return MemoryCredentialStore({"OPENAI_API_KEY": API_KEY})


@pytest.fixture
def generator(credential_store, http_client):
    return AltTextGenerator(credential_store=credential_store, http_client=http_client)
