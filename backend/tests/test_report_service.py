"""
Tests for report synthesis and response validation
"""
from types import SimpleNamespace

import pytest

from conftest import make_completion, make_connection_error
from lendme360.exceptions import (
    ConfigurationMissingError,
    UpstreamEmptyError,
    UpstreamFailureError,
    UpstreamRefusalError,
    ValidationFailedError,
)
from lendme360.services.report_service import (
    REPORT_MAX_COMPLETION_TOKENS,
    ReportService,
    build_report_prompt,
    extract_report_text,
)
from lendme360.storage.models import FeedbackResponse, ReportSubmission

REPORT_MARKDOWN = "# Emily Watson's EOY Feedback Report\n\n## Overview\nStrong year."


@pytest.fixture
def service(gateway):
    return ReportService(gateway)


@pytest.fixture
def submissions():
    return [
        ReportSubmission(
            submitter_name="John Smith",
            relationship="peer",
            response=FeedbackResponse(
                start_doing="Share knowledge",
                stop_doing="Overcommitting",
                continue_doing="Code quality",
                other_comments="Great teammate",
            ),
        ),
        ReportSubmission(
            submitter_name="Sarah Chen",
            relationship="cross-functional",
            response=FeedbackResponse(
                start_doing="Join planning",
                stop_doing="Nothing",
                continue_doing="Clear explanations",
                other_comments="",
            ),
        ),
    ]


class TestReportPrompt:
    def test_prompt_embeds_every_submission(self, submissions):
        prompt = build_report_prompt("Emily Watson", "Software Engineer", submissions)

        assert "Emily Watson (Software Engineer)" in prompt
        assert "feedback from 2 colleagues" in prompt
        assert "Feedback 1 from John Smith (peer):" in prompt
        assert "Feedback 2 from Sarah Chen (cross-functional):" in prompt
        assert "- Other Comments: Great teammate" in prompt
        assert prompt.count("- Other Comments:") == 1
        assert "# Emily Watson's EOY Feedback Report" in prompt
        for heading in ("## Overview", "## Start Doing", "## Stop Doing", "## Continue Doing",
                        "## Key Insights & Recommendations"):
            assert heading in prompt


class TestExtractReportText:
    def test_plain_string_is_trimmed(self):
        assert extract_report_text("  # Report \n") == "# Report"

    def test_text_blocks_are_joined(self):
        content = [
            {"type": "text", "text": "# Report"},
            {"type": "image", "url": "ignored"},
            SimpleNamespace(type="text", text="## Overview"),
        ]
        assert extract_report_text(content) == "# Report\n## Overview"

    def test_missing_content(self):
        assert extract_report_text(None) is None


class TestGenerateReport:
    @pytest.mark.asyncio
    async def test_returns_markdown_verbatim(self, service, submissions, mock_openai_client):
        mock_openai_client.chat.completions.create.return_value = make_completion(REPORT_MARKDOWN)

        report = await service.generate_report("Emily Watson", "Software Engineer", submissions)

        assert report == REPORT_MARKDOWN
        mock_openai_client.chat.completions.create.assert_awaited_once()
        kwargs = mock_openai_client.chat.completions.create.await_args.kwargs
        assert kwargs["max_completion_tokens"] == REPORT_MAX_COMPLETION_TOKENS

    @pytest.mark.asyncio
    async def test_zero_submissions_fails_without_upstream_call(self, service, mock_openai_client):
        with pytest.raises(ValidationFailedError) as exc_info:
            await service.generate_report("Emily Watson", "Software Engineer", [])

        assert exc_info.value.status_code == 400
        mock_openai_client.chat.completions.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_employee_name(self, service, submissions, mock_openai_client):
        with pytest.raises(ValidationFailedError):
            await service.generate_report("  ", "Software Engineer", submissions)
        mock_openai_client.chat.completions.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_refusal_is_surfaced(self, service, submissions, mock_openai_client):
        mock_openai_client.chat.completions.create.return_value = make_completion(
            content=None, refusal="I can't help with that."
        )

        with pytest.raises(UpstreamRefusalError) as exc_info:
            await service.generate_report("Emily Watson", "Software Engineer", submissions)

        assert exc_info.value.message == "Model refused to generate report: I can't help with that."

    @pytest.mark.asyncio
    async def test_empty_content_reports_debug_details(self, service, submissions, mock_openai_client):
        mock_openai_client.chat.completions.create.return_value = make_completion(
            content="", finish_reason="length"
        )

        with pytest.raises(UpstreamEmptyError) as exc_info:
            await service.generate_report("Emily Watson", "Software Engineer", submissions)

        debug = exc_info.value.debug
        assert debug["finishReason"] == "length"
        assert debug["contentType"] == "str"
        assert "content" in debug["messageKeys"]

    @pytest.mark.asyncio
    async def test_block_array_content(self, service, submissions, mock_openai_client):
        mock_openai_client.chat.completions.create.return_value = make_completion(
            content=[{"type": "text", "text": REPORT_MARKDOWN}]
        )

        report = await service.generate_report("Emily Watson", "Software Engineer", submissions)

        assert report == REPORT_MARKDOWN

    @pytest.mark.asyncio
    async def test_upstream_error_is_not_retried(self, service, submissions, mock_openai_client):
        mock_openai_client.chat.completions.create.side_effect = make_connection_error()

        with pytest.raises(UpstreamFailureError):
            await service.generate_report("Emily Watson", "Software Engineer", submissions)

        assert mock_openai_client.chat.completions.create.await_count == 1

    @pytest.mark.asyncio
    async def test_missing_api_key(self, unconfigured_gateway, submissions):
        service = ReportService(unconfigured_gateway)

        with pytest.raises(ConfigurationMissingError) as exc_info:
            await service.generate_report("Emily Watson", "Software Engineer", submissions)

        assert exc_info.value.message == "OpenAI API key not configured"
