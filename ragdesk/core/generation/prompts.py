"""
RAG prompt assembly.

Retrieved snippets become part of the system template source, so they are
brace-escaped first. User text and history are bound as placeholders and
never interpolated into template source.

Dependencies: langchain_core.prompts
System role: Prompt construction for answer generation
"""

from langchain_core.prompts import ChatPromptTemplate

from ragdesk.models.chat import ConversationRole, ConversationTurn

NO_HISTORY = "No previous conversation."

RAG_SYSTEM_PROMPT = """You are a helpful assistant that answers questions using only the reference material below.

## Instructions
1. Use ONLY the reference material to answer
2. If the material does not contain enough information, say clearly that the documents do not answer the question
3. Do not invent facts that are not in the material
4. Be concise and accurate
5. Use the conversation history only to understand follow-up questions"""

NO_EVIDENCE = "No relevant reference material was found for this question."

RAG_HUMAN_PROMPT = """Conversation history:
{chat_history}

Question: {question}"""


def escape_braces(text: str) -> str:
    """Double literal braces so text is inert inside a template source."""
    return text.replace("{", "{{").replace("}", "}}")


def format_history(turns: list[ConversationTurn]) -> str:
    """
    Render turns as ``User:`` / ``Assistant:`` lines.

    Returns:
        str: One line per turn, or NO_HISTORY when empty
    """
    if not turns:
        return NO_HISTORY
    labels = {ConversationRole.USER: "User", ConversationRole.ASSISTANT: "Assistant"}
    return "\n".join(f"{labels[turn.role]}: {turn.content}" for turn in turns)


def format_snippets(snippets: list[str]) -> str:
    """Number escaped snippets for the system message."""
    if not snippets:
        return NO_EVIDENCE
    return "\n\n".join(f"[{i}] {escape_braces(snippet)}" for i, snippet in enumerate(snippets, start=1))


def build_rag_prompt(snippets: list[str]) -> ChatPromptTemplate:
    """
    Build the RAG chat template for a set of snippets.

    Args:
        snippets: Retrieved texts in relevance order

    Returns:
        ChatPromptTemplate: Template with ``chat_history`` and ``question`` variables
    """
    system = f"{RAG_SYSTEM_PROMPT}\n\n## Reference material\n{format_snippets(snippets)}"
    return ChatPromptTemplate.from_messages([
        ("system", system),
        ("human", RAG_HUMAN_PROMPT),
    ])
