"""互动故事数据模型：大纲、故事图谱、段落与故事实例"""
from datetime import datetime, timezone
from typing import Optional, List, Dict, Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

PersonalityTrait = Literal[
    "empathy",
    "courage",
    "curiosity",
    "creativity",
    "problem_solving",
    "sharing",
    "patience",
    "independence",
]
StoryMood = Literal["happy", "adventure", "calm", "magical", "therapeutic"]
Language = Literal["tr", "en"]


def _normalize_trait(value):
    """LLM 偶尔输出 "Problem-Solving" 之类的写法，统一成枚举值。"""
    if isinstance(value, str):
        return value.strip().lower().replace("-", "_").replace(" ", "_")
    return value


class LLMModel(BaseModel):
    """LLM 返回的 JSON 使用 camelCase 键名，这里同时接受 snake_case。"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------- 大纲（LLM 规划结果） ----------

class CharacterArc(LLMModel):
    start: str = ""
    middle: str = ""
    end: str = ""


class InteractiveCharacter(LLMModel):
    name: str
    type: str = ""  # 动物种类，如 tilki / fox
    age: str | int = ""
    appearance: str = ""
    personality: List[str] = Field(default_factory=list)
    speech_style: str = ""
    arc: CharacterArc = Field(default_factory=CharacterArc)


class PlannedOption(LLMModel):
    text: str
    emoji: str = ""
    trait: PersonalityTrait
    story_direction: str

    @field_validator("trait", mode="before")
    @classmethod
    def check_trait(cls, value):
        return _normalize_trait(value)


class PlannedChoicePoint(LLMModel):
    position: Optional[int] = None  # 从 1 开始，缺省时按顺序补齐
    question: str
    options: List[PlannedOption] = Field(default_factory=list)


class InteractiveOutline(LLMModel):
    title: str
    main_character: InteractiveCharacter
    story_arc: str = ""
    choice_points: List[PlannedChoicePoint]
    convergence_points: List[str] = Field(default_factory=list)  # 仅作叙事提示，不参与建图
    ending_theme: str = ""
    mood: StoryMood = "adventure"

    @model_validator(mode="after")
    def fill_positions(self):
        for i, cp in enumerate(self.choice_points):
            if cp.position is None:
                cp.position = i + 1
        return self


# ---------- 故事图谱 ----------

class SegmentDescriptor(BaseModel):
    id: str
    description: str
    is_ending: bool = False
    choice_point_index: Optional[int] = None  # 该段之后的选择点下标，结局段为 None


class ChoiceOption(BaseModel):
    id: str
    text: str
    emoji: str = ""
    trait: PersonalityTrait
    next_segment_id: str
    story_direction: str = ""


class ChoicePoint(BaseModel):
    id: str
    question: str
    position: int
    index: int  # 在 choice_point_order 中的下标
    options: List[ChoiceOption] = Field(default_factory=list)


class StoryGraph(BaseModel):
    segments: Dict[str, SegmentDescriptor]
    choice_points: Dict[str, ChoicePoint]
    choice_point_order: List[str]
    start_segment_id: str
    ending_segment_ids: List[str]


# ---------- 段落内容 ----------

class StoryPage(LLMModel):
    page_number: Optional[int] = None
    text: str
    scene_description: str = ""
    visual_prompt: str = ""
    emotion: str = "warm"
    image_url: Optional[str] = None


class StorySegment(LLMModel):
    id: str
    pages: List[StoryPage]
    ends_with_choice: bool
    choice_point_id: Optional[str] = None


class SegmentStyleContext(BaseModel):
    """段落生成时沿用的整体风格信息。"""
    mood: StoryMood = "adventure"
    ending_theme: str = ""
    story_arc: str = ""


class PreviousChoice(BaseModel):
    question: str
    chosen: str
    trait: PersonalityTrait


# ---------- 治疗性上下文 ----------

class TherapeuticContext(BaseModel):
    concern_type: str
    therapeutic_approach: str = ""


class EnhancedTherapeuticContext(BaseModel):
    concern_type: str
    therapeutic_approach: str
    recommended_traits: List[PersonalityTrait]
    coping_mechanism: str
    parent_guidance: List[str] = Field(default_factory=list)
    avoid_topics: List[str] = Field(default_factory=list)


# ---------- 故事实例 ----------

class InteractiveStory(BaseModel):
    """运行时互动故事（segments 随选择逐步增长）"""
    id: str
    title: str
    is_interactive: bool = True
    main_character: InteractiveCharacter
    segments: Dict[str, StorySegment] = Field(default_factory=dict)
    segment_descriptors: Dict[str, SegmentDescriptor] = Field(default_factory=dict)
    choice_points: Dict[str, ChoicePoint] = Field(default_factory=dict)
    choice_point_order: List[str] = Field(default_factory=list)
    start_segment_id: str = "seg_start"
    ending_segment_ids: List[str] = Field(default_factory=list)
    total_choice_points: int = 0
    estimated_duration: str = ""
    themes: List[PersonalityTrait] = Field(default_factory=list)
    educational_value: str = ""
    ending_theme: str = ""
    mood: StoryMood = "adventure"
    language: Language = "tr"
    child_age: int = 6
    therapeutic_context: Optional[TherapeuticContext] = None
    enhanced_therapeutic_context: Optional[EnhancedTherapeuticContext] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# ---------- 请求与结果 ----------

class GenerateInteractiveStoryRequest(BaseModel):
    child_age: int = Field(ge=2, le=12)
    child_name: Optional[str] = None
    language: Language = "tr"
    selected_theme: Optional[str] = None
    therapeutic_context: Optional[TherapeuticContext] = None
    drawing_insights: List[str] = Field(default_factory=list)  # 画作分析摘要


class CreateSessionResult(BaseModel):
    story: InteractiveStory
    first_segment: StorySegment
    first_choice_point: Optional[ChoicePoint] = None


class AdvanceResult(BaseModel):
    segment: StorySegment
    next_choice_point: Optional[ChoicePoint] = None
    is_ending: bool
