"""家长报告：根据孩子在故事中的选择统计性格特质，给出活动与对话建议"""
import logging
import uuid
from collections import Counter
from typing import List, Optional

from renkioo.constants.therapeutic import get_concern_name, get_therapeutic_mapping
from renkioo.constants.traits import TRAIT_DEFINITIONS, get_trait_info, get_trait_name
from renkioo.models.story import InteractiveStory
from renkioo.models.session import (
    ActivitySuggestion,
    ChoiceTimelineItem,
    ParentReport,
    StorySession,
    TherapeuticReportSection,
    TraitCount,
)
from renkioo.services.errors import ReportNotReadyError
from renkioo.services.session_service import load_session
from renkioo.utils.store import save_report, save_session

logger = logging.getLogger(__name__)

TOP_TRAITS = 3


def count_traits(session: StorySession) -> List[TraitCount]:
    """按出现次数降序统计特质，同次数时保持特质表顺序。"""
    counts = Counter(c.trait for c in session.choices_made)
    total = len(session.choices_made)
    result = [
        TraitCount(trait=trait, count=counts[trait], percentage=round(counts[trait] / total * 100))
        for trait in TRAIT_DEFINITIONS
        if counts[trait] > 0
    ]
    return sorted(result, key=lambda tc: tc.count, reverse=True)


def _timeline(story: InteractiveStory, session: StorySession, language: str) -> List[ChoiceTimelineItem]:
    items = []
    for i, choice in enumerate(session.choices_made):
        cp = story.choice_points.get(choice.choice_point_id)
        option = next((o for o in cp.options if o.id == choice.option_id), None) if cp else None
        items.append(ChoiceTimelineItem(
            choice_number=i + 1,
            question=cp.question if cp else "",
            chosen_option=option.text if option else "",
            trait=choice.trait,
            insight=get_trait_info(choice.trait, language)["description"],
        ))
    return items


def _activities(dominant: List[TraitCount], language: str) -> List[ActivitySuggestion]:
    suggestions = []
    for tc in dominant[:TOP_TRAITS]:
        info = get_trait_info(tc.trait, language)
        title = f"{info['name']} için aktivite" if language == "tr" else f"Activity for {info['name']}"
        suggestions.append(ActivitySuggestion(
            title=title,
            description=info["activity_suggestion"],
            for_trait=tc.trait,
            emoji=info["emoji"],
        ))
    return suggestions


def _conversation_starters(story: InteractiveStory, language: str) -> List[str]:
    name = story.main_character.name
    if language == "tr":
        return [
            f'"{story.title}" hikayesinde en çok hangi kısmı sevdin?',
            f"{name} gibi davranmak nasıl hissettirdi?",
            "Başka bir seçim yapsaydın hikaye nasıl değişirdi sence?",
            "Bu hikayedeki gibi bir durumla karşılaşsan ne yapardın?",
        ]
    return [
        f'What was your favorite part of "{story.title}"?',
        f"How did it feel to act like {name}?",
        "How do you think the story would change if you made a different choice?",
        "What would you do if you faced a situation like the one in this story?",
    ]


def _therapeutic_section(
    story: InteractiveStory,
    dominant: List[TraitCount],
    language: str,
) -> Optional[TherapeuticReportSection]:
    if not story.therapeutic_context or not story.therapeutic_context.concern_type:
        return None
    concern = story.therapeutic_context.concern_type
    mapping = get_therapeutic_mapping(concern)
    suffix = "tr" if language == "tr" else "en"

    strengths = []
    for tc in dominant[:TOP_TRAITS]:
        definition = TRAIT_DEFINITIONS[tc.trait]
        name = definition[f"name_{suffix}"]
        if tc.trait in mapping["recommended_traits"]:
            if language == "tr":
                strengths.append(f"{name}: Çocuğunuz önerilen terapötik özelliklerden birini güçlü bir şekilde gösterdi.")
            else:
                strengths.append(f"{name}: Your child strongly demonstrated one of the recommended therapeutic traits.")
        else:
            strengths.append(f"{name}: {definition[f'positive_description_{suffix}']}")

    coping = mapping[f"coping_mechanism_{suffix}"]
    if language == "tr":
        top_name = get_trait_name(dominant[0].trait, "tr") if dominant else "özel"
        message = f"Çocuğunuz zorluklarla karşılaşırken {top_name.lower()} özelliğini güçlü bir şekilde gösterdi. {coping}"
    else:
        top_name = get_trait_name(dominant[0].trait, "en") if dominant else "special"
        message = f"Your child strongly showed {top_name.lower()} when facing challenges. {coping}"

    return TherapeuticReportSection(
        concern_type=concern,
        concern_name_tr=get_concern_name(concern, "tr"),
        concern_name_en=get_concern_name(concern, "en"),
        therapeutic_approach=mapping[f"therapeutic_value_{suffix}"],
        coping_mechanism=coping,
        recommended_traits=mapping["recommended_traits"],
        parent_guidance=mapping[f"parent_guidance_{suffix}"],
        avoid_topics=mapping[f"avoid_topics_{suffix}"],
        child_strengths=strengths,
        encouraging_message=message,
    )


def build_parent_report(
    story: InteractiveStory,
    session: StorySession,
    child_name: Optional[str] = None,
    language: Optional[str] = None,
) -> ParentReport:
    """纯函数：根据故事与会话生成报告，不做存储。"""
    language = language or story.language
    dominant = count_traits(session)
    return ParentReport(
        id=f"report_{uuid.uuid4().hex[:12]}",
        session_id=session.id,
        child_name=child_name,
        story_title=story.title,
        dominant_traits=dominant,
        trait_insights={tc.trait: get_trait_info(tc.trait, language)["description"] for tc in dominant},
        choice_timeline=_timeline(story, session, language),
        activity_suggestions=_activities(dominant, language),
        conversation_starters=_conversation_starters(story, language),
        therapeutic_section=_therapeutic_section(story, dominant, language),
        total_choices=len(session.choices_made),
    )


def generate_parent_report(
    session_id: str,
    child_name: Optional[str] = None,
    language: Optional[str] = None,
) -> ParentReport:
    """为已读完的会话生成家长报告并保存。"""
    session, story = load_session(session_id)
    if session.status != "completed":
        raise ReportNotReadyError(session_id)

    report = build_parent_report(story, session, child_name=child_name, language=language)
    save_report(report)
    session.parent_report_generated = True
    save_session(session)

    top = ", ".join(f"{tc.trait}({tc.count})" for tc in report.dominant_traits[:TOP_TRAITS])
    logger.info(f"[家长报告] ✅ 会话 {session_id} 报告已生成: {report.total_choices} 次选择，主要特质 {top or '-'}")
    return report
