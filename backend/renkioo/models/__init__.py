from .story import (
    PersonalityTrait,
    StoryMood,
    Language,
    CharacterArc,
    InteractiveCharacter,
    PlannedOption,
    PlannedChoicePoint,
    InteractiveOutline,
    SegmentDescriptor,
    ChoiceOption,
    ChoicePoint,
    StoryGraph,
    StoryPage,
    StorySegment,
    SegmentStyleContext,
    PreviousChoice,
    TherapeuticContext,
    EnhancedTherapeuticContext,
    InteractiveStory,
    GenerateInteractiveStoryRequest,
    CreateSessionResult,
    AdvanceResult,
)
from .session import (
    SessionStatus,
    ChoiceMade,
    StorySession,
    MakeChoiceRequest,
    ParentReportRequest,
    SessionProgress,
    StorySummary,
    StartStoryResponse,
    ChoiceResponse,
    SessionStateResponse,
    TraitCount,
    ChoiceTimelineItem,
    ActivitySuggestion,
    TherapeuticReportSection,
    ParentReport,
)

__all__ = [
    "PersonalityTrait",
    "StoryMood",
    "Language",
    "CharacterArc",
    "InteractiveCharacter",
    "PlannedOption",
    "PlannedChoicePoint",
    "InteractiveOutline",
    "SegmentDescriptor",
    "ChoiceOption",
    "ChoicePoint",
    "StoryGraph",
    "StoryPage",
    "StorySegment",
    "SegmentStyleContext",
    "PreviousChoice",
    "TherapeuticContext",
    "EnhancedTherapeuticContext",
    "InteractiveStory",
    "GenerateInteractiveStoryRequest",
    "CreateSessionResult",
    "AdvanceResult",
    "SessionStatus",
    "ChoiceMade",
    "StorySession",
    "MakeChoiceRequest",
    "ParentReportRequest",
    "SessionProgress",
    "StorySummary",
    "StartStoryResponse",
    "ChoiceResponse",
    "SessionStateResponse",
    "TraitCount",
    "ChoiceTimelineItem",
    "ActivitySuggestion",
    "TherapeuticReportSection",
    "ParentReport",
]
