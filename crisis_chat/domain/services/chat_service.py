"""Service for running a chat conversation against the analysis backend."""

import logging
from typing import List, Optional

from ..exceptions import AnalysisClientError
from ..models.analysis import AnalysisResult
from ..models.chat import ChatMessage, ChatRole
from ..ports.analysis_provider import AnalysisProvider

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = (
    "Welcome to the Agentic AI Crisis Communication System. "
    "Ask about any crisis situation, news, or fact."
)
NEW_CHAT_MESSAGE = "New chat started. How can I help you with a crisis or fact verification?"

# Placeholder attached to the user's own messages before any analysis exists
EMPTY_ANALYSIS = AnalysisResult()


class ChatService:
    """Keeps the transcript and sends user messages one at a time."""

    def __init__(self, provider: AnalysisProvider):
        """Initialize the service.

        Args:
            provider: Analysis provider used to answer user messages
        """
        self._provider = provider
        self._messages: List[ChatMessage] = [
            ChatMessage(role=ChatRole.ASSISTANT, content=WELCOME_MESSAGE)
        ]
        self._loading = False
        self.last_error: Optional[AnalysisClientError] = None

    @property
    def messages(self) -> List[ChatMessage]:
        """Copy of the transcript, oldest first."""
        return list(self._messages)

    @property
    def is_loading(self) -> bool:
        return self._loading

    def fallback_message(self) -> str:
        return (
            "Error: Could not connect to the AI backend. Please ensure the "
            f"analysis server is running and accessible at {self._provider.endpoint}"
        )

    async def send_message(self, text: str) -> Optional[ChatMessage]:
        """Send user text and append the exchange to the transcript.

        Args:
            text: Raw user input

        Returns:
            The assistant reply, or None when the input was empty or another
            message is still in flight

        Raises:
            AnalysisClientError: If the backend could not be reached; the
                fallback reply has already been appended
        """
        user_text = text.strip()
        if not user_text or self._loading:
            return None

        self._loading = True
        try:
            self._messages.append(
                ChatMessage(role=ChatRole.USER, content=user_text, analysis=EMPTY_ANALYSIS)
            )

            try:
                analysis = await self._provider.send(user_text)
            except AnalysisClientError as e:
                logger.error(f"❌ API call error: {e}")
                self.last_error = e
                self._messages.append(
                    ChatMessage(
                        role=ChatRole.ASSISTANT,
                        content=self.fallback_message(),
                        analysis=EMPTY_ANALYSIS,
                    )
                )
                raise

            self.last_error = None
            reply = ChatMessage(
                role=ChatRole.ASSISTANT,
                content=analysis.bot_response,
                analysis=analysis,
            )
            self._messages.append(reply)
            return reply
        finally:
            self._loading = False

    def new_chat(self) -> None:
        """Discard the transcript and start over."""
        self._messages = [ChatMessage(role=ChatRole.ASSISTANT, content=NEW_CHAT_MESSAGE)]
        self.last_error = None
        logger.info("🆕 New chat started")
