"""Tests for LangChain to Langfuse converter."""

import pytest
from langchain_core.prompts import ChatPromptTemplate

from ragdesk.observability.prompt_registry.converter import convert_chat_template, convert_variables


class TestVariableConversion:
    """Tests for variable syntax conversion."""

    def test_single_variable(self) -> None:
        """Convert single variable from {var} to {{var}}."""
        assert convert_variables("Hello {name}!") == "Hello {{name}}!"

    def test_multiple_variables(self) -> None:
        """Convert multiple variables."""
        assert convert_variables("{chat_history}\n{question}") == "{{chat_history}}\n{{question}}"

    def test_escaped_braces_unchanged(self) -> None:
        """Already doubled braces are left alone."""
        assert convert_variables("literal {{x}}") == "literal {{x}}"

    def test_non_identifier_braces_unchanged(self) -> None:
        """JSON-like braces are not variables."""
        assert convert_variables('{"a": 1} {}') == '{"a": 1} {}'


class TestChatTemplateConversion:
    """Tests for ChatPromptTemplate conversion."""

    def test_roles_and_variables(self) -> None:
        """Convert template with all role types."""
        template = ChatPromptTemplate.from_messages([
            ("system", "You are a {role} assistant."),
            ("human", "{question}"),
            ("ai", "Sure."),
        ])

        result = convert_chat_template(template)

        assert result == [
            {"role": "system", "content": "You are a {{role}} assistant."},
            {"role": "user", "content": "{{question}}"},
            {"role": "assistant", "content": "Sure."},
        ]

    def test_placeholder_messages_unsupported(self) -> None:
        """MessagesPlaceholder has no Langfuse chat role."""
        template = ChatPromptTemplate.from_messages([("placeholder", "{history}"), ("human", "hi")])

        with pytest.raises(ValueError):
            convert_chat_template(template)
