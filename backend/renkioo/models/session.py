"""互动故事会话与家长报告数据模型"""
from datetime import datetime, timezone
from typing import Optional, List, Dict, Literal
from pydantic import BaseModel, Field

from .story import PersonalityTrait, Language, InteractiveCharacter, StorySegment, ChoicePoint, StoryMood

SessionStatus = Literal["in_progress", "completed", "abandoned"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ChoiceMade(BaseModel):
    choice_point_id: str
    option_id: str
    trait: PersonalityTrait
    timestamp: datetime = Field(default_factory=_utcnow)


class StorySession(BaseModel):
    """一次阅读过程：记录当前段落、已做选择与路径"""
    id: str
    story_id: str
    current_segment_id: str
    choices_made: List[ChoiceMade] = Field(default_factory=list)
    path_taken: List[str] = Field(default_factory=list)  # 按顺序记录到过的段落 ID
    status: SessionStatus = "in_progress"
    started_at: datetime = Field(default_factory=_utcnow)
    completed_at: Optional[datetime] = None
    parent_report_generated: bool = False


class MakeChoiceRequest(BaseModel):
    session_id: str
    choice_point_id: str
    option_id: str


class ParentReportRequest(BaseModel):
    child_name: Optional[str] = None
    language: Optional[Language] = None  # 为空时沿用故事语言


class SessionProgress(BaseModel):
    current_choice: int
    total_choices: int


class StorySummary(BaseModel):
    id: str
    title: str
    main_character: InteractiveCharacter
    total_choice_points: int
    mood: StoryMood
    estimated_duration: str = ""


class StartStoryResponse(BaseModel):
    story_id: str
    session_id: str
    story: StorySummary
    current_segment: StorySegment
    current_choice_point: Optional[ChoicePoint] = None
    progress: SessionProgress


class ChoiceResponse(BaseModel):
    segment: StorySegment
    next_choice_point: Optional[ChoicePoint] = None
    is_ending: bool
    progress: SessionProgress
    trait: PersonalityTrait
    trait_info: Dict[str, str]


class SessionStateResponse(BaseModel):
    session: StorySession
    story: StorySummary
    current_segment: Optional[StorySegment] = None
    current_choice_point: Optional[ChoicePoint] = None
    progress: SessionProgress
    is_ending: bool


# ---------- 家长报告 ----------

class TraitCount(BaseModel):
    trait: PersonalityTrait
    count: int
    percentage: int


class ChoiceTimelineItem(BaseModel):
    choice_number: int
    question: str
    chosen_option: str
    trait: PersonalityTrait
    insight: str


class ActivitySuggestion(BaseModel):
    title: str
    description: str
    for_trait: PersonalityTrait
    emoji: str


class TherapeuticReportSection(BaseModel):
    concern_type: str
    concern_name_tr: str
    concern_name_en: str
    therapeutic_approach: str
    coping_mechanism: str
    recommended_traits: List[PersonalityTrait]
    parent_guidance: List[str]
    avoid_topics: List[str]
    child_strengths: List[str]
    encouraging_message: str


class ParentReport(BaseModel):
    id: str
    session_id: str
    child_name: Optional[str] = None
    story_title: str
    dominant_traits: List[TraitCount]
    trait_insights: Dict[str, str]
    choice_timeline: List[ChoiceTimelineItem]
    activity_suggestions: List[ActivitySuggestion]
    conversation_starters: List[str]
    therapeutic_section: Optional[TherapeuticReportSection] = None
    generated_at: datetime = Field(default_factory=_utcnow)
    total_choices: int
