import logging
from typing import Optional

import openai

from studyquiz.config import OPENAI_API_KEY, QUIZ_MODEL, QUIZ_TEMPERATURE
from studyquiz.errors import GenerationServiceError

logger = logging.getLogger(__name__)


class OpenAITextService:
    """Generative-text collaborator: prompt in, free text out."""

    def __init__(
        self,
        client: Optional[openai.OpenAI] = None,
        model: str = QUIZ_MODEL,
        temperature: float = QUIZ_TEMPERATURE,
    ):
        self._client = client
        self.model = model
        self.temperature = temperature

    @property
    def client(self) -> openai.OpenAI:
        # Built on first use so the service can start without a key configured
        if self._client is None:
            self._client = openai.OpenAI(api_key=OPENAI_API_KEY)
        return self._client

    def generate(self, prompt: str) -> str:
        try:
            resp = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
            )
        except openai.OpenAIError as e:
            logger.error("Model call failed: %s", e)
            raise GenerationServiceError(f"Upstream model error: {e}") from e

        content = resp.choices[0].message.content if resp.choices else None
        if not content:
            raise GenerationServiceError("Upstream model returned an empty response")

        logger.debug("Raw model response: %s", content)
        return content
