"""Per-agent conversation state, persisted after every change."""

from collections.abc import Callable, Sequence

from app.client.api import BackendClient
from app.client.formatting import generate_id
from app.client.persistence import LocalPersistence
from app.models.agent import Agent, CustomAgentConfig
from app.models.conversation import ConversationHistory, Message, MessagePart


def text_message(role: str, text: str) -> Message:
    return Message(id=generate_id(), role=role, parts=[MessagePart(type="text", text=text)])


class ConversationSession:
    def __init__(self, persistence: LocalPersistence, agent_id: str):
        self.persistence = persistence
        self.agent_id = agent_id
        self.messages: list[Message] = persistence.load_conversation_history(agent_id).messages

    def add_message(self, message: Message) -> None:
        self.set_messages([*self.messages, message])

    def set_messages(self, messages: Sequence[Message]) -> None:
        self.messages = list(messages)
        self.persistence.save_conversation_history(
            self.agent_id,
            ConversationHistory(messages=self.messages, updated_at=self.persistence.clock()),
        )

    def clear_history(self) -> None:
        self.messages = []
        self.persistence.delete_conversation_history(self.agent_id)

    def delete_message(self, message_id: str) -> None:
        self.set_messages([m for m in self.messages if m.id != message_id])

    def send(
        self,
        client: BackendClient,
        agent: Agent,
        text: str,
        on_delta: Callable[[str], None] | None = None,
    ) -> Message:
        """Send a user message and store the streamed assistant reply.

        The user message is stored before the request; if the backend fails
        the reply is not stored and the BackendError propagates.
        """
        text = text.strip()
        if not text:
            raise ValueError("Message text is required")
        self.add_message(text_message("user", text))

        if isinstance(agent, CustomAgentConfig):
            options = {
                "model_id": agent.model_id,
                "system_prompt": agent.system_prompt,
                "temperature": agent.temperature,
                "max_tokens": agent.max_tokens,
            }
        else:
            options = {"agent_id": agent.id}

        chunks = []
        for delta in client.stream_chat(self.messages, **options):
            chunks.append(delta)
            if on_delta:
                on_delta(delta)

        reply = text_message("assistant", "".join(chunks))
        self.add_message(reply)
        return reply
