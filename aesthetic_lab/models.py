from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Strict
from pydantic.alias_generators import to_camel

# No string-to-number coercion; ints are still accepted as numbers
Number = Annotated[float, Strict()]
Text = Annotated[str, Strict()]


class ReportModel(BaseModel):
    # Wire names are camelCase, attributes stay snake_case
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class ThreeParts(ReportModel):
    """Vertical thirds (三庭) shares."""
    upper: Number
    middle: Number
    lower: Number
    description: Text


class FiveEyes(ReportModel):
    """Horizontal fifths (五眼) shares."""
    left_side: Number
    left_eye: Number
    middle: Number
    right_eye: Number
    right_side: Number
    description: Text


class Proportions(ReportModel):
    three_parts: ThreeParts
    five_eyes: FiveEyes


class Features(ReportModel):
    eyes: Text
    nose: Text
    lips: Text
    jawline: Text


class Suggestions(ReportModel):
    makeup: List[Text]
    medical_beauty: Optional[List[Text]] = None
    lifestyle: List[Text]


class FacialAnalysisReport(ReportModel):
    """Structured result returned by the analysis model.

    Shares are taken as given; nothing checks that they add up to 100.
    """
    overall_score: Number
    proportions: Proportions
    features: Features
    suggestions: Suggestions
    summary: Text

    def to_wire(self):
        return self.model_dump(by_alias=True, exclude_none=True)
