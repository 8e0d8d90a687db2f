import httpx
import openai
from loguru import logger

from ..models.result import ErrorKind, Result


class GenerationClient:
    """
    Text and image generation over OpenRouter.
    Chat goes through the OpenAI SDK (OpenRouter is API compatible), images through
    a plain httpx POST. Both calls return a Result and never raise.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        image_url: str,
        chat_model: str,
        image_model: str,
        image_size: str = "1024x1024",
        timeout: float = 60.0,
        openai_client=None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.chat_model = chat_model
        self.image_model = image_model
        self.image_size = image_size
        self.image_url = image_url
        self.client = openai_client or openai.AsyncOpenAI(
            api_key=api_key, base_url=base_url, timeout=timeout
        )
        self.http = http_client or httpx.AsyncClient(
            timeout=timeout,
            headers={"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"},
        )

    @classmethod
    def from_settings(cls, settings) -> "GenerationClient":
        return cls(
            api_key=settings.OPENROUTER_API_KEY,
            base_url=settings.OPENROUTER_BASE_URL,
            image_url=settings.IMAGE_API_URL,
            chat_model=settings.MODEL_CHAT,
            image_model=settings.MODEL_IMAGE,
            image_size=settings.IMAGE_SIZE,
            timeout=settings.BACKEND_TIMEOUT,
        )

    async def generate_text(self, messages: list) -> Result:
        try:
            response = await self.client.chat.completions.create(
                model=self.chat_model,
                messages=messages,
                stream=False
            )
        except openai.APIResponseValidationError as e:
            logger.warning(f"Unparseable completion payload: {e}")
            return Result.failure(ErrorKind.MALFORMED_BACKEND_RESPONSE, str(e))
        except (openai.OpenAIError, httpx.HTTPError) as e:
            logger.error(f"AI error: {e}")
            return Result.failure(ErrorKind.BACKEND_UNAVAILABLE, str(e))

        try:
            content = (response.choices[0].message.content or "").strip()
        except (AttributeError, IndexError, TypeError) as e:
            logger.warning(f"Malformed completion payload: {e}")
            return Result.failure(ErrorKind.MALFORMED_BACKEND_RESPONSE, str(e))
        if not content:
            logger.warning("Completion returned empty content")
            return Result.failure(ErrorKind.MALFORMED_BACKEND_RESPONSE, "empty content")
        return Result.success(content)

    async def generate_image(self, prompt: str) -> Result:
        payload = {"model": self.image_model, "prompt": prompt, "size": self.image_size, "n": 1}
        try:
            resp = await self.http.post(self.image_url, json=payload)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Image generation error: {e}")
            return Result.failure(ErrorKind.BACKEND_UNAVAILABLE, str(e))

        try:
            url = resp.json()["data"][0]["url"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.warning(f"Malformed image payload: {e}")
            return Result.failure(ErrorKind.MALFORMED_BACKEND_RESPONSE, str(e))
        if not url or not isinstance(url, str):
            logger.warning("Image backend returned no url")
            return Result.failure(ErrorKind.MALFORMED_BACKEND_RESPONSE, "empty url")
        return Result.success(url)

    async def close(self):
        await self.http.aclose()
        await self.client.close()
