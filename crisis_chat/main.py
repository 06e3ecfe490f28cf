"""Interactive command-line chat with the crisis analysis backend."""

import asyncio
import logging
import os

from .domain.exceptions import AnalysisClientError
from .domain.services.analysis_report import format_report, verification_badge
from .infrastructure.dependencies import get_service_container

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "WARNING").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

QUIT_COMMANDS = ('quit', 'exit', 'q')
NEW_CHAT_COMMAND = '/new'


async def main():
    """Run the chat loop."""
    print("CRISIS AI Chat")
    print("--------------")

    container = get_service_container()
    chat = await container.get_chat_service()
    print(f"\nCrisis AI: {chat.messages[0].content}")

    try:
        while True:
            text = input("\nYou (or 'quit' to exit, '/new' for a new chat): ")
            if text.strip().lower() in QUIT_COMMANDS:
                break

            if text.strip() == NEW_CHAT_COMMAND:
                chat.new_chat()
                print(f"\nCrisis AI: {chat.messages[0].content}")
                continue

            print("\nAnalyzing and verifying...")
            try:
                reply = await chat.send_message(text)
            except AnalysisClientError as e:
                print(f"\nConnection Error: {e}")
                print(f"\nCrisis AI: {chat.messages[-1].content}")
                continue

            if reply is None:
                continue

            print(f"\nCrisis AI: {reply.content}")
            print(f"[{verification_badge(reply.analysis)}]")
            print("\nAnalysis Report:")
            for line in format_report(reply.analysis):
                print(f"  {line}")

    finally:
        await container.shutdown()


def run():
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
