import logging
from typing import Any, List, Optional

import openai

from ..exceptions import UpstreamEmptyError, UpstreamFailureError, UpstreamRefusalError, ValidationFailedError
from ..storage.models import ReportSubmission
from .openai_gateway import OpenAIGateway

logger = logging.getLogger(__name__)

REPORT_MAX_COMPLETION_TOKENS = 16000
REPORT_SYSTEM_PROMPT = """You are an expert HR consultant who synthesizes 360-degree feedback into actionable reports.
Your reports are concise, professional, and constructive.
You identify patterns across multiple feedback sources and provide clear, actionable insights.
Keep the report to ONE PAGE maximum - be concise but comprehensive.
Use Markdown formatting."""


def format_submissions(submissions: List[ReportSubmission]) -> str:
    """Renders every submission as a numbered block for the prompt."""
    blocks = []
    for index, fb in enumerate(submissions, start=1):
        response = fb.response
        lines = [
            f"Feedback {index} from {fb.submitter_name} ({fb.relationship}):",
            f"- Start Doing: {response.start_doing}",
            f"- Stop Doing: {response.stop_doing}",
            f"- Continue Doing: {response.continue_doing}",
        ]
        if response.other_comments:
            lines.append(f"- Other Comments: {response.other_comments}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def build_report_prompt(employee_name: str, employee_role: str, submissions: List[ReportSubmission]) -> str:
    count = len(submissions)
    return f"""Generate a comprehensive End-of-Year Feedback Report for {employee_name} ({employee_role}) based on the following feedback from {count} colleagues.

{format_submissions(submissions)}

Create a report with the following structure in Markdown format:

# {employee_name}'s EOY Feedback Report

## Overview
A brief 2-3 sentence summary of the overall feedback themes.

## Start Doing
Synthesize all "Start Doing" feedback into 3-4 key actionable points. Combine similar feedback, note if multiple people mentioned the same thing.

## Stop Doing
Synthesize all "Stop Doing" feedback into 2-3 key points. Be constructive and specific.

## Continue Doing
Synthesize all "Continue Doing" feedback into 3-4 key strengths. Highlight what colleagues appreciate most.

## Key Insights & Recommendations
Provide 3-4 actionable recommendations based on the patterns in the feedback. Be specific and constructive.

---
*Report generated from {count} colleague submissions.*

Remember: Keep it concise - this report should fit on ONE page when printed."""


def _block_value(block: Any, key: str) -> Any:
    if isinstance(block, dict):
        return block.get(key)
    return getattr(block, key, None)


def extract_report_text(content: Any) -> Optional[str]:
    """
    Pulls the report text out of a message content.

    Content is either a plain string or a list of typed blocks, of which
    only the `text` ones are kept.
    """
    if isinstance(content, str):
        return content.strip()
    if isinstance(content, list):
        texts = [_block_value(block, "text") or "" for block in content if _block_value(block, "type") == "text"]
        return "\n".join(texts).strip()
    return None


def _message_keys(message: Any) -> List[str]:
    if message is None:
        return []
    if hasattr(message, "model_dump"):
        return list(message.model_dump().keys())
    return list(vars(message).keys())


class ReportService:
    def __init__(self, gateway: OpenAIGateway):
        self._gateway = gateway

    async def generate_report(
        self,
        employee_name: str,
        employee_role: str,
        submissions: List[ReportSubmission],
    ) -> str:
        """Generates a Markdown summary report from all submissions for one employee."""
        if not employee_name or not employee_name.strip() or not submissions:
            raise ValidationFailedError("Employee name and feedback submissions are required")

        self._gateway.ensure_configured()
        prompt = build_report_prompt(employee_name, employee_role, submissions)

        logger.info(f"Requesting report for {employee_name} from {len(submissions)} submissions.")
        try:
            completion = await self._gateway.create_chat_completion(
                messages=[
                    {"role": "system", "content": REPORT_SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                max_completion_tokens=REPORT_MAX_COMPLETION_TOKENS,
            )
        except openai.OpenAIError as e:
            logger.error(f"Report generation error: {e}")
            raise UpstreamFailureError("Failed to generate report") from e

        choice = completion.choices[0] if completion.choices else None
        message = choice.message if choice else None

        refusal = getattr(message, "refusal", None)
        if refusal:
            logger.warning(f"Model refused to generate report for {employee_name}: {refusal}")
            raise UpstreamRefusalError(f"Model refused to generate report: {refusal}")

        content = getattr(message, "content", None)
        report = extract_report_text(content)
        finish_reason = getattr(choice, "finish_reason", None)
        logger.debug(f"Extracted report: {report!r} (finish_reason={finish_reason})")

        if not report:
            logger.error(f"Empty report for {employee_name}, finish_reason={finish_reason}")
            raise UpstreamEmptyError(
                "The model returned an empty response. Please try again.",
                debug={
                    "finishReason": finish_reason,
                    "messageKeys": _message_keys(message),
                    "contentType": type(content).__name__,
                },
            )

        logger.info(f"Generated report for {employee_name} ({len(report)} characters).")
        return report
