import asyncio
import sys

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from config.config import Config
from models.errors import AcquisitionError, ChatServiceError, InvalidUrlError, ModelError
from orchestrator.core import ChatOrchestrator, create_orchestrator
from tools.web.cache import InMemoryTTLCache


def print_help() -> None:
    print("\n=== Available Commands ===")
    print("help         - Show this help message")
    print("cache clear  - Drop cached pages (in-memory cache only)")
    print("exit/quit    - Exit the program")
    print("Paste a URL with a question to ground the answer in that page.\n")


def print_fragment(fragment: str) -> None:
    sys.stdout.write(fragment)
    sys.stdout.flush()


async def answer(orchestrator: ChatOrchestrator, user_input: str) -> None:
    """Stream one answer to stdout, labelling which stage failed if any."""
    sys.stdout.write("\nAI: ")
    sys.stdout.flush()
    try:
        result = await orchestrator.handle_stream_to(user_input, print_fragment)
    except InvalidUrlError as e:
        print(f"\nThat link doesn't look like a valid URL: {e.message}\n")
        return
    except AcquisitionError as e:
        print(f"\nCouldn't read the page: {e.message}\n")
        return
    except ModelError as e:
        print(f"\nCouldn't generate an answer: {e.message}\n")
        return

    print()
    if result.has_url:
        source = "cache" if result.from_cache else result.extraction_method
        print(f"[Source: {result.title} | {result.url} | via {source}, {result.word_count} words]\n")
    else:
        print()


def main():
    config = Config()
    problems = config.validate()
    if problems:
        for problem in problems:
            print(f"Error: {problem}")
        return

    try:
        orchestrator = create_orchestrator(config)
    except (ChatServiceError, ValueError) as e:
        print(f"Error initializing chat: {e!s}")
        return

    print(f"\n=== Grounded Chat ({config.get_model_info()}) ===")
    print("Type 'exit' to quit or 'help' for commands\n")

    while True:
        try:
            user_input = input("You: ").strip()
        except (KeyboardInterrupt, EOFError):
            print("\nExiting...")
            break

        if not user_input:
            continue

        command = user_input.lower()
        if command in ('exit', 'quit'):
            print("\nGoodbye!")
            break

        if command == 'help':
            print_help()
            continue

        if command == 'cache clear':
            backend = orchestrator.acquirer.cache.backend
            if isinstance(backend, InMemoryTTLCache):
                backend.clear()
                print("Cache cleared.\n")
            else:
                print("Only the in-memory cache can be cleared from here.\n")
            continue

        try:
            asyncio.run(answer(orchestrator, user_input))
        except KeyboardInterrupt:
            print("\nInterrupted.\n")


if __name__ == "__main__":
    main()
