"""Main CLI loop for interactive questions."""

import logging
import sys
from typing import TextIO

from .client import AskAPIClient, AskAPIError
from .config import CLIConfig
from .formatter import ResponseFormatter

logger = logging.getLogger(__name__)

EXIT_COMMANDS = ("exit", "quit", "q")
RESET_COMMANDS = ("/reset", "/new")


class InoBotCLI:
    """Interactive CLI for the InoBot API."""

    def __init__(
        self,
        config: CLIConfig,
        input_stream: TextIO = sys.stdin,
        output_stream: TextIO = sys.stdout,
        show_references: bool = True,
        client: AskAPIClient | None = None,
    ):
        """Initialize the CLI.

        Parameters
        ----------
        config
            CLI configuration.
        input_stream
            Input stream for user input (default: stdin).
        output_stream
            Output stream for responses (default: stdout).
        show_references
            Whether to list the source chunks under each answer.
        client
            Preconfigured API client (default: one built from *config*).
        """
        self.config = config
        self.input_stream = input_stream
        self.output_stream = output_stream
        self.client = client or AskAPIClient(config)
        self.formatter = ResponseFormatter(output_stream, show_references)

    async def run(self) -> None:
        """Run the interactive CLI loop."""
        try:
            self._print_welcome()
            while True:
                try:
                    question = self._get_user_input()
                    if not question.strip():
                        continue

                    command = question.strip().lower()
                    if command in EXIT_COMMANDS:
                        self._print("Goodbye!\n")
                        break
                    if command in RESET_COMMANDS:
                        self.client.reset()
                        self._print("Started a new conversation.\n\n")
                        continue

                    await self._process_question(question)

                except KeyboardInterrupt:
                    self._print("\n\nInterrupted. Use 'exit' or 'quit' to exit.\n")
                except EOFError:
                    self._print("\nGoodbye!\n")
                    break
        finally:
            await self.client.close()

    async def _process_question(self, question: str) -> None:
        try:
            body = await self.client.ask(question)
        except AskAPIError as e:
            self.formatter.show_error(str(e), e.code)
            return
        self.formatter.show_answer(body)
        self._print("\n")

    def _get_user_input(self) -> str:
        self._print("> ")
        line = self.input_stream.readline()
        if not line:
            raise EOFError
        return line.rstrip("\n\r")

    def _print_welcome(self) -> None:
        self._print("InoBot CLI - Ask about Inovus Labs\n")
        self._print(f"Connected to: {self.config.ask_url}\n")
        self._print(
            "Type your question and press Enter. "
            "'/reset' starts over, 'exit' or 'quit' leaves.\n\n"
        )

    def _print(self, text: str) -> None:
        self.output_stream.write(text)
        self.output_stream.flush()


async def main(
    host: str = "localhost",
    port: int = 8080,
    api_path: str = "/api/v1/ask",
    timeout: float = 120.0,
    max_history: int = 20,
    debug: bool = False,
    show_references: bool = True,
) -> None:
    """Main entry point for the CLI."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    config = CLIConfig(
        host=host,
        port=port,
        api_path=api_path,
        timeout=timeout,
        max_history=max_history,
    )
    cli = InoBotCLI(config, show_references=show_references)
    await cli.run()
