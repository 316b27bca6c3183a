"""
eventmatch.models.attendees

Attendee onboarding and recommendation payloads.
"""

from __future__ import annotations

import enum
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from eventmatch.dates import parse_event_end


class GoalsCategory(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str


class RegisterAttendeePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    event_code: str = Field(alias="eventCode")
    nickname: str
    user_email: str = Field(alias="userEmail")
    profession_id: str = Field(alias="professionId")
    linkedin_username: str = Field(default="", alias="linkedinUsername")
    photo_link: str = Field(alias="photoLink")


class RegisteredAttendee(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    event_id: str = Field(alias="eventId")
    nickname: str | None = None


class SubmitGoalPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    goals_category_id: str = Field(alias="goalsCategoryId")


class AnswerItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question_id: str = Field(alias="questionId")
    answer_ids: list[str] = Field(default_factory=list, alias="answerIds")
    text_value: str | None = Field(default=None, alias="textValue")
    number_value: Decimal | None = Field(default=None, alias="numberValue")
    date_value: str | None = Field(default=None, alias="dateValue")
    rank: int | None = None


class AnswerSubmission(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    attendee_id: str = Field(alias="attendeeId")
    answers: list[AnswerItem]


class SubmissionAck(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    attendee_id: str | None = Field(default=None, alias="attendeeId")


class QuestionType(enum.StrEnum):
    text = "text"
    number = "number"
    date = "date"
    multiple_choice = "multiple_choice"
    ranking = "ranking"
    boolean = "boolean"

    @classmethod
    def parse(cls, raw: str) -> QuestionType:
        # Unknown types render as text rather than failing the whole recommendation.
        try:
            return cls(raw)
        except ValueError:
            return cls.text


class ShareableAnswer(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    question: str
    question_type: str = Field(alias="questionType")
    answer_label: str | None = Field(default=None, alias="answerLabel")
    text_value: str | None = Field(default=None, alias="textValue")
    number_value: Decimal | None = Field(default=None, alias="numberValue")
    date_value: str | None = Field(default=None, alias="dateValue")
    rank: int | None = None

    @property
    def kind(self) -> QuestionType:
        return QuestionType.parse(self.question_type)

    @property
    def display_value(self) -> str:
        kind = self.kind
        if kind is QuestionType.text:
            return self.text_value or self.answer_label or ""
        if kind is QuestionType.number:
            if self.number_value is not None:
                return str(self.number_value)
            return self.answer_label or ""
        if kind is QuestionType.date:
            return self.date_value or self.answer_label or ""
        if kind is QuestionType.ranking and self.rank is not None:
            return f"Rank {self.rank}"
        return self.answer_label or ""

    @property
    def parsed_date(self) -> datetime | None:
        return parse_event_end(self.date_value)


class ProfessionSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    category_name: str = Field(alias="categoryName")


class GoalsCategoryName(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str


class TargetAttendee(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    nickname: str
    profession: ProfessionSummary
    goals_category: GoalsCategoryName = Field(alias="goalsCategory")
    linkedin_username: str | None = Field(default=None, alias="linkedinUsername")
    photo_link: str = Field(alias="photoLink")
    shareable_answers: list[ShareableAnswer] = Field(default_factory=list, alias="shareableAnswers")

    @property
    def linkedin_url(self) -> str | None:
        if not self.linkedin_username:
            return None
        return f"https://www.linkedin.com/in/{self.linkedin_username}"


class Recommendation(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    target_attendee_id: str = Field(alias="targetAttendeeId")
    score: Decimal
    reasoning: str
    target_attendee: TargetAttendee = Field(alias="targetAttendee")

    @property
    def score_percentage(self) -> float:
        return float(self.score) * 100


class RecommendationBatch(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    attendee_id: str = Field(alias="attendeeId")
    event_id: str = Field(alias="eventId")
    recommendations: list[Recommendation] = Field(default_factory=list)
