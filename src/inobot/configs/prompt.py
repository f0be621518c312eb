"""Prompt wording as product configuration.

Everything the model is told verbatim lives here so that wording changes
are a ``configs/prompt.yml`` edit, not a code change.
"""

from pydantic import BaseModel, Field

NO_CONTEXT_MARKER = "[No additional static context found.]"


class PromptConfig(BaseModel):
    """Assistant identity, mandated messages and heuristic tables."""

    assistant_name: str = Field(default="InoBot")
    organization: str = Field(
        default="Inovus Labs IEDC at Kristu Jyoti College",
        description="The only domain the assistant may talk about",
    )
    organization_handles: str = Field(default="inovuslabs.org, @inovuslabs")
    fallback_message: str = Field(
        default=(
            "I don't have that specific information in my knowledge base. "
            "Please check our website at inovuslabs.org or follow our social "
            "media @inovuslabs for the most up-to-date information."
        ),
        description="Exact reply when the context lacks the answer",
    )
    refusal_message: str = Field(
        default=(
            "I can only answer questions related to Inovus Labs IEDC. "
            "Please ask about our programs, events, or initiatives."
        ),
        description="Exact reply for out-of-domain questions",
    )
    valid_topics: list[str] = Field(
        default_factory=lambda: [
            "programs",
            "events",
            "startups",
            "innovation",
            "entrepreneurship",
            "workshops",
            "mentorship",
            "funding opportunities",
        ]
    )
    follow_up_indicators: list[str] = Field(
        default_factory=lambda: [
            "tell me more",
            "elaborate",
            "can you explain",
            "what about",
            "more details",
            "expand on",
            "continue",
            "go on",
            "what else",
            "anything else",
            "that",
            "this",
            "it",
            "they",
            "them",
            "above",
            "mentioned",
            "requirements",
            "process",
            "steps",
            "how long",
            "when",
            "where",
        ],
        description="Substrings marking a question as a follow-up",
    )
    summary_instruction: str = Field(
        default=(
            "Summarize the provided conversation history into a concise summary "
            "that preserves key context for follow-up questions.\n\n"
            "RULES:\n"
            "- Create a 2-3 sentence summary\n"
            "- Focus on key topics discussed about Inovus Labs IEDC\n"
            "- Preserve important facts relevant for answering follow-up questions\n"
            "- Return only the summary text, no additional formatting"
        )
    )
    suggestion_instruction: str = Field(
        default=(
            "Generate relevant follow-up questions based on the assistant's "
            "response and conversation context.\n\n"
            "RULES:\n"
            "- Generate exactly 3 specific and actionable follow-up questions\n"
            "- Questions should be relevant to Inovus Labs IEDC topics\n"
            "- Focus on practical next steps or deeper information\n"
            "- One question per line, no numbering or bullets"
        )
    )
    default_suggestions: list[str] = Field(
        default_factory=lambda: [
            "Can you tell me more about this?",
            "What are the next steps?",
            "Are there any requirements I should know about?",
        ]
    )
    error_suggestions: list[str] = Field(
        default_factory=lambda: [
            "Can you elaborate on that?",
            "What else should I know?",
            "How can I get started?",
        ],
        description="Suggestions used when the suggestion call fails",
    )
