"""
Default prompt templates.

Seeded into every PromptRegistry.

Dependencies: langchain_core.prompts
System role: Built-in prompt library
"""

from langchain_core.prompts import ChatPromptTemplate

from ragdesk.observability.prompt_registry.models import PromptSpec

GENERAL_CHAT = "general-chat"
RETRIEVAL_QUERY = "retrieval-query"
RETRIEVAL_SUMMARY = "retrieval-summary"

_GENERAL_CHAT_TEMPLATE = ChatPromptTemplate.from_messages([
    ("system", "You are a helpful assistant. Use the conversation history to understand follow-up questions."),
    ("human", """Conversation history:
{chat_history}

Current question: {question}

Give a helpful, accurate and concise answer."""),
])

_RETRIEVAL_QUERY_TEMPLATE = ChatPromptTemplate.from_messages([
    ("system", "You turn user questions into search queries for a document knowledge base."),
    ("human", """Question: {question}
Context: {context}
Number of results wanted: {top_k}

Requirements:
1. Produce precise keywords or short phrases that capture the core need
2. Use the context to remove ambiguity
3. Output only the query, with no explanation

Search query:"""),
])

_RETRIEVAL_SUMMARY_TEMPLATE = ChatPromptTemplate.from_messages([
    ("system", "You answer questions strictly from retrieved document fragments."),
    ("human", """Question: {question}

Retrieved fragments:
{retrieval_results}

Rules:
1. Prefer fragments with high relevance and quote key statements
2. Name the source of each fact
3. Merge duplicates and order the answer logically
4. If the fragments are empty or irrelevant, say that no sufficiently relevant fragments were found
5. Never invent information

Answer:"""),
])

DEFAULT_PROMPTS: tuple[PromptSpec, ...] = (
    PromptSpec(
        name=GENERAL_CHAT,
        description="General conversation with chat history",
        template=_GENERAL_CHAT_TEMPLATE,
    ),
    PromptSpec(
        name=RETRIEVAL_QUERY,
        description="Rewrite a question into a retrieval query",
        template=_RETRIEVAL_QUERY_TEMPLATE,
    ),
    PromptSpec(
        name=RETRIEVAL_SUMMARY,
        description="Summarize retrieval results into an answer",
        template=_RETRIEVAL_SUMMARY_TEMPLATE,
    ),
)
