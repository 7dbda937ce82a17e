"""CSV export of a survey's responses.

One row per response, one column per question in survey order. Every cell is
double-quoted with embedded quotes doubled.
"""

import csv
import io
from datetime import datetime
from typing import Sequence

from survey_studio.models.response import Response
from survey_studio.models.survey import Question
from survey_studio.services.answer_codec import decode, display_value


def csv_filename(slug: str) -> str:
    """Download filename for a survey's export."""
    return f"{slug}-responses.csv"


def _format_timestamp(value: datetime) -> str:
    return value.strftime("%Y-%m-%d %H:%M:%S")


def export_responses_csv(
    questions: Sequence[Question],
    responses: Sequence[Response],
    include_metadata: bool = False,
) -> str:
    """Render responses as CSV text.

    Args:
        questions: Survey questions (sorted by order_index here)
        responses: Responses with their answers loaded
        include_metadata: Prepend "Response ID" and "Submitted At" columns

    Returns:
        CSV document, newline-terminated rows, every cell quoted and
        embedded double quotes doubled
    """
    ordered = sorted(questions, key=lambda q: q.order_index)

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")

    header = [question.question_text for question in ordered]
    if include_metadata:
        header = ["Response ID", "Submitted At", *header]
    writer.writerow(header)

    for response in responses:
        by_question = {answer.question_id: answer for answer in response.answers}
        row = []
        if include_metadata:
            row = [response.id, _format_timestamp(response.submitted_at)]
        for question in ordered:
            answer = by_question.get(question.id)
            if answer is None:
                row.append("")
            else:
                row.append(display_value(decode(answer.answer_text, answer.answer_choice)))
        writer.writerow(row)

    return buffer.getvalue()
