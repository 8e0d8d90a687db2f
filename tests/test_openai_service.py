import json
from types import SimpleNamespace

import httpx
import openai
import pytest

from plutoxbot.bot.models.result import ErrorKind
from plutoxbot.bot.services.openai_service import GenerationClient

IMAGE_URL = "https://openrouter.test/v1/images/generate"


class FakeCompletions:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error:
            raise self.error
        return self.response


def completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def make_client(completions=None, handler=None):
    openai_client = SimpleNamespace(chat=SimpleNamespace(completions=completions or FakeCompletions()))
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler or (lambda request: httpx.Response(200))))
    return GenerationClient(
        api_key="test-key",
        base_url="https://openrouter.test/api/v1",
        image_url=IMAGE_URL,
        chat_model="mistralai/mistral-nemo",
        image_model="openai/dall-e-mini",
        openai_client=openai_client,
        http_client=http_client,
    )


async def test_generate_text_returns_first_choice():
    completions = FakeCompletions(response=completion("  Hi there!  "))
    client = make_client(completions)
    messages = [{"role": "system", "content": "s"}, {"role": "user", "content": "hello"}]

    result = await client.generate_text(messages)

    assert result.ok and result.value == "Hi there!"
    assert completions.kwargs["model"] == "mistralai/mistral-nemo"
    assert completions.kwargs["messages"] == messages


async def test_generate_text_transport_error():
    error = openai.APIConnectionError(request=httpx.Request("POST", "https://openrouter.test"))
    client = make_client(FakeCompletions(error=error))

    result = await client.generate_text([])

    assert result.error == ErrorKind.BACKEND_UNAVAILABLE


@pytest.mark.parametrize("response", [
    completion(None),
    completion(""),
    completion("   \n "),
    SimpleNamespace(choices=[]),
    SimpleNamespace(choices=None),
])
async def test_generate_text_malformed_payload(response):
    client = make_client(FakeCompletions(response=response))

    result = await client.generate_text([])

    assert result.error == ErrorKind.MALFORMED_BACKEND_RESPONSE


async def test_generate_image_returns_url():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"data": [{"url": "https://cdn.example/cat.png"}]})

    client = make_client(handler=handler)

    result = await client.generate_image("draw a cat")

    assert result.ok and result.value == "https://cdn.example/cat.png"
    assert seen["url"] == IMAGE_URL
    assert seen["body"] == {"model": "openai/dall-e-mini", "prompt": "draw a cat", "size": "1024x1024", "n": 1}


async def test_generate_image_http_error():
    client = make_client(handler=lambda request: httpx.Response(502, text="bad gateway"))

    result = await client.generate_image("draw a cat")

    assert result.error == ErrorKind.BACKEND_UNAVAILABLE


async def test_generate_image_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    result = await make_client(handler=handler).generate_image("draw a cat")

    assert result.error == ErrorKind.BACKEND_UNAVAILABLE


@pytest.mark.parametrize("response", [
    httpx.Response(200, text="not json"),
    httpx.Response(200, json={"data": []}),
    httpx.Response(200, json={"error": "quota"}),
    httpx.Response(200, json={"data": [{"url": None}]}),
    httpx.Response(200, json={"data": [{"url": 123}]}),
])
async def test_generate_image_malformed_payload(response):
    result = await make_client(handler=lambda request: response).generate_image("draw a cat")

    assert result.error == ErrorKind.MALFORMED_BACKEND_RESPONSE


async def test_generate_text_unparseable_body_is_malformed():
    request = httpx.Request("POST", "https://openrouter.test/api/v1/chat/completions")
    error = openai.APIResponseValidationError(response=httpx.Response(200, request=request), body="<html>")
    client = make_client(FakeCompletions(error=error))

    result = await client.generate_text([])

    assert result.error == ErrorKind.MALFORMED_BACKEND_RESPONSE
