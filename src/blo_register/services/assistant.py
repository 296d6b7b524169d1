"""
Chat assistant over the stored census and roll data.

Sends the full household and voter collections as a JSON snapshot in
the system prompt together with the operator's question, through any
OpenAI-compatible chat completions endpoint (Gemini by default).
There are no retries; any failure yields a fixed fallback answer.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Optional, List, Any

from openai import OpenAI

from ..config import AssistantConfig
from ..exceptions import AssistantError
from ..logger import get_logger
from ..models import Household, Voter

logger = get_logger(__name__)

GREETING = (
    "Hello! I am your AI assistant. Ask me anything about your census and voter data, "
    "like 'How many voters are over 80?' or 'List all members of house number 23'."
)

FALLBACK_MESSAGE = (
    "Sorry, I encountered an error while processing your request. "
    "Please check your connection and try again."
)

SYSTEM_PROMPT_TEMPLATE = """You are a helpful AI assistant for a Booth Level Officer (BLO) in India.
Your task is to answer questions based ONLY on the JSON data provided below. Do not use any external knowledge or make up information.
If the data is insufficient to answer a question, state that clearly. Be concise and accurate in your responses.
When listing people or households, format them clearly.

Here is the census data which includes all household members:
{households}

Here is the electoral roll data which includes all registered voters:
{voters}
"""


@dataclass(frozen=True)
class ChatMessage:
    role: str  # "user" or "model"
    content: str


def build_system_prompt(households: List[Household], voters: List[Voter]) -> str:
    """Render the system instruction with the current data snapshot."""
    return SYSTEM_PROMPT_TEMPLATE.format(
        households=json.dumps([h.to_dict() for h in households], ensure_ascii=False),
        voters=json.dumps([v.to_dict() for v in voters], ensure_ascii=False),
    )


@dataclass
class DataAssistant:
    """
    Question answering over a data snapshot.

    Args:
        config: Assistant configuration (provider, key, model, base URL)
        client: Pre-built OpenAI-compatible client (created lazily if None)
    """
    config: AssistantConfig
    client: Optional[Any] = None
    transcript: List[ChatMessage] = field(default_factory=lambda: [ChatMessage("model", GREETING)])

    def _get_client(self) -> Any:
        if self.client is None:
            if not self.config.is_configured:
                raise AssistantError(
                    "Missing AI_API_KEY environment variable",
                    provider=self.config.provider,
                    model=self.config.model,
                )
            self.client = OpenAI(
                api_key=self.config.api_key,
                base_url=self.config.get_normalized_base_url() or None,
                timeout=self.config.timeout_sec,
                max_retries=0,
            )
        return self.client

    def _complete(self, system_prompt: str, question: str) -> str:
        client = self._get_client()
        resp = client.chat.completions.create(
            model=self.config.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": question},
            ],
        )

        try:
            content = resp.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise AssistantError(
                f"Unexpected response shape: {e}",
                provider=self.config.provider,
                model=self.config.model,
            ) from e

        if not content or not str(content).strip():
            raise AssistantError(
                "Empty response from assistant",
                provider=self.config.provider,
                model=self.config.model,
            )
        return str(content).strip()

    def ask(self, question: str, households: List[Household], voters: List[Voter]) -> str:
        """
        Answer one question and append both turns to the transcript.

        Returns:
            The model's answer, or FALLBACK_MESSAGE on any failure
        """
        question = (question or "").strip()
        if not question:
            return ""

        self.transcript.append(ChatMessage("user", question))
        logger.debug(f"Assistant question ({self.config.provider}/{self.config.model}): {question[:80]}")

        try:
            answer = self._complete(build_system_prompt(households, voters), question)
        except Exception as e:
            logger.error(f"AI Assistant Error: {e}")
            answer = FALLBACK_MESSAGE

        self.transcript.append(ChatMessage("model", answer))
        return answer
