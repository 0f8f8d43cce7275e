"""
Tests for the four-field feedback enhancement
"""
import pytest

from conftest import make_completion, make_connection_error
from lendme360.exceptions import ConfigurationMissingError, UpstreamFailureError
from lendme360.services.enhancement_service import ENHANCE_SYSTEM_PROMPT, EnhancementService
from lendme360.storage.models import FeedbackResponse


@pytest.fixture
def service(gateway):
    return EnhancementService(gateway)


class TestEnhancement:
    @pytest.mark.asyncio
    async def test_empty_fields_pass_through_and_filled_fields_are_improved(self, service, mock_openai_client):
        feedback = FeedbackResponse(
            start_doing="", stop_doing="be clearer", continue_doing="great demos", other_comments=""
        )

        result = await service.enhance(feedback)

        assert result.start_doing == ""
        assert result.other_comments == ""
        assert result.stop_doing == "Improved feedback."
        assert result.continue_doing == "Improved feedback."
        assert mock_openai_client.chat.completions.create.await_count == 2

    @pytest.mark.asyncio
    async def test_whitespace_only_field_is_returned_unchanged(self, service, mock_openai_client):
        feedback = FeedbackResponse(start_doing="   ", stop_doing="", continue_doing="", other_comments="\n")

        result = await service.enhance(feedback)

        assert result == feedback
        mock_openai_client.chat.completions.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_results_keep_field_positions(self, service, mock_openai_client):
        async def echo(**kwargs):
            prompt = kwargs["messages"][1]["content"]
            original = prompt.split('"')[1]
            return make_completion(f"better {original}")

        mock_openai_client.chat.completions.create.side_effect = echo
        feedback = FeedbackResponse(start_doing="a", stop_doing="b", continue_doing="c", other_comments="d")

        result = await service.enhance(feedback)

        assert result == FeedbackResponse(
            start_doing="better a", stop_doing="better b", continue_doing="better c", other_comments="better d"
        )

    @pytest.mark.asyncio
    async def test_prompt_uses_fixed_system_instruction(self, service, mock_openai_client):
        await service.enhance(FeedbackResponse(stop_doing="be clearer"))

        kwargs = mock_openai_client.chat.completions.create.await_args.kwargs
        assert kwargs["messages"][0] == {"role": "system", "content": ENHANCE_SYSTEM_PROMPT}
        assert '"be clearer"' in kwargs["messages"][1]["content"]
        assert kwargs["max_completion_tokens"] == 1000

    @pytest.mark.asyncio
    async def test_empty_model_output_keeps_original_text(self, service, mock_openai_client):
        mock_openai_client.chat.completions.create.return_value = make_completion("   ")

        result = await service.enhance(FeedbackResponse(continue_doing="great demos"))

        assert result.continue_doing == "great demos"

    @pytest.mark.asyncio
    async def test_one_failing_field_fails_the_whole_call(self, service, mock_openai_client):
        mock_openai_client.chat.completions.create.side_effect = [
            make_completion("fine"),
            make_connection_error(),
        ]

        with pytest.raises(UpstreamFailureError) as exc_info:
            await service.enhance(FeedbackResponse(start_doing="x", stop_doing="y"))

        assert exc_info.value.message == "Failed to enhance feedback"
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_missing_api_key(self, unconfigured_gateway):
        service = EnhancementService(unconfigured_gateway)

        with pytest.raises(ConfigurationMissingError):
            await service.enhance(FeedbackResponse(start_doing="x"))
