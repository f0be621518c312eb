"""Renders ask responses for the terminal."""

from typing import Any, TextIO

from bs4 import BeautifulSoup

_BLOCK_TAGS = ("p", "div", "br", "li", "h1", "h2", "h3", "h4", "ul", "ol")


def html_to_text(html: str) -> str:
    """Plain-text rendering of an HTML answer, one block per line."""
    soup = BeautifulSoup(html, "html.parser")
    for item in soup.find_all("li"):
        item.insert(0, "- ")
    for tag in soup.find_all(_BLOCK_TAGS):
        tag.append("\n")
    lines = (line.strip() for line in soup.get_text().splitlines())
    return "\n".join(line for line in lines if line)


class ResponseFormatter:
    """Writes answers, references and follow-up suggestions."""

    def __init__(self, output: TextIO, show_references: bool = True):
        self.output = output
        self.show_references = show_references

    def show_answer(self, body: dict[str, Any]) -> None:
        self._print(f"\n{html_to_text(body.get('answer', ''))}\n")

        references = body.get("references") or []
        if self.show_references and references:
            self._print("\nSources:\n")
            for ref in references:
                name = ref.get("filename") or ref.get("file_url") or "unknown"
                index = ref.get("chunk_index")
                suffix = f" (chunk {index})" if index is not None else ""
                self._print(f"  - {name}{suffix}\n")

        suggestions = body.get("followUpSuggestions") or []
        if suggestions:
            self._print("\nYou could ask:\n")
            for i, suggestion in enumerate(suggestions, start=1):
                self._print(f"  {i}. {suggestion}\n")

    def show_error(self, message: str, code: str) -> None:
        self._print(f"\n❌ Error [{code}]: {message}\n")

    def _print(self, text: str) -> None:
        self.output.write(text)
        self.output.flush()
