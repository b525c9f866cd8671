"""Tests for chat request -> responses payload translation."""

import pytest

from chatbridge.responses.translator import (
    DEFAULT_MODEL,
    build_backend_payload,
    normalize_content,
    normalize_message,
    text_type_for_role,
)


class TestTextTypeForRole:
    def test_assistant_uses_output_text(self):
        assert text_type_for_role("assistant") == "output_text"

    @pytest.mark.parametrize("role", ["user", "system", "developer", "tool"])
    def test_other_roles_use_input_text(self, role):
        assert text_type_for_role(role) == "input_text"


class TestNormalizeContent:
    """Tests for per-message content normalization."""

    def test_string_content_becomes_single_text_item(self):
        assert normalize_content("user", "hi") == [{"type": "input_text", "text": "hi"}]

    def test_assistant_string_content_uses_output_text(self):
        assert normalize_content("assistant", "hello") == [
            {"type": "output_text", "text": "hello"}
        ]

    def test_legacy_text_item_is_retagged_verbatim(self):
        content = [{"type": "text", "text": "  spaced\ntext  "}]
        assert normalize_content("user", content) == [
            {"type": "input_text", "text": "  spaced\ntext  "}
        ]

    def test_legacy_text_item_for_assistant(self):
        assert normalize_content("assistant", [{"type": "text", "text": "ok"}]) == [
            {"type": "output_text", "text": "ok"}
        ]

    def test_legacy_image_with_bare_url(self):
        content = [{"type": "image_url", "image_url": "https://img.local/a.png"}]
        assert normalize_content("user", content) == [
            {"type": "input_image", "image_url": "https://img.local/a.png"}
        ]

    def test_legacy_image_with_wrapped_url(self):
        content = [{"type": "image_url", "image_url": {"url": "https://img.local/b.png", "detail": "low"}}]
        assert normalize_content("user", content) == [
            {"type": "input_image", "image_url": "https://img.local/b.png"}
        ]

    def test_legacy_image_without_url_is_dropped(self):
        content = [{"type": "image_url", "image_url": {}}, {"type": "text", "text": "x"}]
        assert normalize_content("user", content) == [{"type": "input_text", "text": "x"}]

    def test_legacy_image_for_assistant_is_dropped(self):
        content = [{"type": "image_url", "image_url": "https://img.local/a.png"}]
        assert normalize_content("assistant", content) == []

    def test_normalized_input_items_pass_through_for_user(self):
        content = [
            {"type": "input_text", "text": "look"},
            {"type": "input_image", "image_url": "https://img.local/c.png"},
        ]
        assert normalize_content("user", content) == content

    def test_normalized_output_items_pass_through_for_assistant(self):
        content = [
            {"type": "output_text", "text": "answer", "annotations": []},
            {"type": "refusal", "refusal": "no"},
        ]
        assert normalize_content("assistant", content) == content

    def test_input_text_salvaged_for_assistant(self):
        assert normalize_content("assistant", [{"type": "input_text", "text": "kept"}]) == [
            {"type": "output_text", "text": "kept"}
        ]

    def test_input_image_dropped_for_assistant(self):
        content = [
            {"type": "input_image", "image_url": "https://img.local/d.png"},
            {"type": "output_text", "text": "after"},
        ]
        assert normalize_content("assistant", content) == [{"type": "output_text", "text": "after"}]

    def test_output_items_dropped_for_user(self):
        content = [{"type": "output_text", "text": "x"}, {"type": "refusal", "refusal": "y"}]
        assert normalize_content("user", content) == []

    def test_unknown_and_malformed_items_dropped(self):
        content = [{"type": "audio", "data": "..."}, "bare string", None, {"text": "no type"}]
        assert normalize_content("user", content) == []

    def test_order_is_preserved(self):
        content = [
            {"type": "text", "text": "one"},
            {"type": "image_url", "image_url": "https://img.local/1.png"},
            {"type": "input_text", "text": "two"},
        ]
        result = normalize_content("user", content)
        assert [item["type"] for item in result] == ["input_text", "input_image", "input_text"]
        assert result[0]["text"] == "one"
        assert result[2]["text"] == "two"

    def test_output_never_contains_legacy_tags(self):
        content = [
            {"type": "text", "text": "a"},
            {"type": "image_url", "image_url": "https://img.local/x.png"},
        ]
        for role in ("user", "assistant", "system"):
            types = {item["type"] for item in normalize_content(role, content)}
            assert not types & {"text", "image_url"}

    @pytest.mark.parametrize("role", ["user", "assistant", "system"])
    def test_normalization_is_idempotent(self, role):
        content = [
            {"type": "text", "text": "a"},
            {"type": "image_url", "image_url": {"url": "https://img.local/x.png"}},
            {"type": "input_text", "text": "b"},
            {"type": "input_image", "image_url": "https://img.local/y.png"},
            {"type": "output_text", "text": "c"},
            {"type": "refusal", "refusal": "d"},
        ]
        once = normalize_content(role, content)
        assert normalize_content(role, once) == once

    def test_non_list_content_returns_none(self):
        assert normalize_content("user", None) is None
        assert normalize_content("user", 42) is None

    def test_input_list_is_not_mutated(self):
        content = [{"type": "text", "text": "a"}]
        normalize_content("assistant", content)
        assert content == [{"type": "text", "text": "a"}]


class TestNormalizeMessage:
    def test_keeps_only_role_and_content(self):
        message = {"role": "user", "content": "hi", "name": "bob", "extra": 1}
        assert normalize_message(message) == {
            "role": "user",
            "content": [{"type": "input_text", "text": "hi"}],
        }

    def test_omits_content_when_not_normalizable(self):
        assert normalize_message({"role": "tool", "content": None}) == {"role": "tool"}


class TestBuildBackendPayload:
    """Tests for assembling the outbound request body."""

    def test_minimal_request(self):
        payload = build_backend_payload({"messages": [{"role": "user", "content": "hi"}], "stream": False})
        assert payload == {
            "model": DEFAULT_MODEL,
            "input": [{"role": "user", "content": [{"type": "input_text", "text": "hi"}]}],
            "stream": False,
        }
        assert "previous_response_id" not in payload
        assert "tools" not in payload
        assert "max_output_tokens" not in payload

    def test_default_model_is_gpt_4o(self):
        assert DEFAULT_MODEL == "gpt-4o"

    def test_explicit_model_wins(self):
        payload = build_backend_payload(
            {"messages": [{"role": "user", "content": "hi"}], "model": "gpt-4.1-mini"}
        )
        assert payload["model"] == "gpt-4.1-mini"

    def test_configured_default_model(self):
        payload = build_backend_payload(
            {"messages": [{"role": "user", "content": "hi"}]}, default_model="o3"
        )
        assert payload["model"] == "o3"

    def test_stream_defaults_to_false(self):
        payload = build_backend_payload({"messages": [{"role": "user", "content": "hi"}]})
        assert payload["stream"] is False

    def test_stream_override(self):
        payload = build_backend_payload(
            {"messages": [{"role": "user", "content": "hi"}], "stream": False}, stream=True
        )
        assert payload["stream"] is True

    def test_optional_fields_are_mapped(self):
        payload = build_backend_payload(
            {
                "messages": [{"role": "user", "content": "hi"}],
                "conversation_id": "resp_prev",
                "tools": ["web_search"],
                "max_tokens": 256,
                "temperature": 0.2,
            }
        )
        assert payload["previous_response_id"] == "resp_prev"
        assert payload["tools"] == [{"type": "web_search_preview"}]
        assert payload["max_output_tokens"] == 256
        assert "temperature" not in payload
        assert "conversation_id" not in payload
        assert "max_tokens" not in payload

    @pytest.mark.parametrize("field", ["conversation_id", "tools", "max_tokens"])
    def test_empty_optional_fields_are_omitted(self, field):
        empty = {"conversation_id": "", "tools": [], "max_tokens": 0}[field]
        payload = build_backend_payload(
            {"messages": [{"role": "user", "content": "hi"}], field: empty}
        )
        mapped = {
            "conversation_id": "previous_response_id",
            "tools": "tools",
            "max_tokens": "max_output_tokens",
        }[field]
        assert mapped not in payload

    def test_tools_mapping_to_empty_list_is_kept(self):
        payload = build_backend_payload(
            {"messages": [{"role": "user", "content": "hi"}], "tools": ["unknown_tool"]}
        )
        assert payload["tools"] == []

    def test_message_order_and_roles_preserved(self):
        messages = [
            {"role": "system", "content": "be brief"},
            {"role": "user", "content": "hi"},
            {"role": "assistant", "content": [{"type": "text", "text": "hello"}]},
        ]
        payload = build_backend_payload({"messages": messages})
        assert [m["role"] for m in payload["input"]] == ["system", "user", "assistant"]
        assert payload["input"][2]["content"] == [{"type": "output_text", "text": "hello"}]
