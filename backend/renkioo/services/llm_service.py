"""LLM 互动故事大纲规划与段落生成 - OpenAI 兼容 API"""
import json
import re
import logging
from typing import List
from openai import AsyncOpenAI
from pydantic import ValidationError
from renkioo.config import get_settings
from renkioo.constants.therapeutic import (
    build_enhanced_therapeutic_context,
    format_recommended_traits_prompt,
)
from renkioo.data.age_params import get_age_params
from renkioo.models.story import (
    GenerateInteractiveStoryRequest,
    InteractiveCharacter,
    InteractiveOutline,
    PreviousChoice,
    SegmentStyleContext,
    StorySegment,
)
from renkioo.services.errors import GenerationParseError
from renkioo.utils.logger_utils import log_llm_call, timed_execution

logger = logging.getLogger(__name__)


# ---------- 大纲提示词 ----------

OUTLINE_SYSTEM_TR = """Sen interaktif çocuk masalı tasarımcısısın. Dallanmalı hikaye yapısı oluşturuyorsun.

GÖREV: 4-5 seçim noktası içeren interaktif hikaye taslağı oluştur.

KURALLAR:
1. Her seçim noktasında 2-3 SEÇİM olacak
2. Seçimler ASLA "yanlış" olmayacak - hepsi pozitif sonuçlara götürür
3. Her seçim bir KİŞİLİK ÖZELLİĞİ ortaya çıkarır
4. Yollar YAKINSAYACAK - paralel yollar bir noktada birleşir
5. TÜM yollar aynı pozitif mesajla biter

KİŞİLİK ÖZELLİKLERİ (her seçim birine bağlı olmalı):
- empathy: Başkalarının duygularını anlama
- courage: Zor durumlarda ileri adım atma
- curiosity: Yeni şeyler öğrenme isteği
- creativity: Farklı çözümler düşünme
- problem_solving: Mantıklı düşünme
- sharing: Başkalarıyla bölüşme
- patience: Beklemeyi bilme
- independence: Kendi başına hareket etme

YAKINSAMALI YAPI ÖRNEĞİ:
Başlangıç → Segment1 → Seçim1 (2 seçenek)
  → Seg2A veya Seg2B → Seçim2
    → Segment3 (YAKINSAMA) → Seçim3
      → Seg4A/4B/4C → Seçim4
        → Bitiş (YAKINSAMA - aynı pozitif son)

Bu yapı ~12 segment üretir, 100+ değil.
{therapeutic}
ÇIKTI: Sadece JSON formatında yanıt ver."""

OUTLINE_SYSTEM_EN = """You are an interactive children's story designer creating branching narratives.

TASK: Create an interactive story outline with 4-5 decision points.

RULES:
1. Each decision point has 2-3 CHOICES
2. Choices are NEVER "wrong" - all lead to positive outcomes
3. Each choice reveals a PERSONALITY TRAIT
4. Paths CONVERGE - parallel paths merge at certain points
5. ALL paths end with the same positive message

PERSONALITY TRAITS (each choice must map to one):
- empathy: Understanding others' feelings
- courage: Stepping forward in difficult situations
- curiosity: Desire to learn new things
- creativity: Thinking of different solutions
- problem_solving: Logical thinking
- sharing: Sharing with others
- patience: Knowing how to wait
- independence: Acting on one's own
{therapeutic}
OUTPUT: Respond only in JSON format."""

OUTLINE_SCHEMA_TR = """JSON ŞEMASI:
{
  "title": "Hikaye başlığı (3-5 kelime)",
  "mainCharacter": {
    "name": "Karakter adı",
    "type": "Hayvan türü (tilki, tavşan, ayı, vb.)",
    "age": "Çocuğun yaşına yakın",
    "appearance": "Detaylı fiziksel görünüm (renkler, özellikler)",
    "personality": ["özellik1", "özellik2", "özellik3"],
    "speechStyle": "Nasıl konuşuyor",
    "arc": {"start": "Başlangıçtaki durumu", "middle": "Yaşadığı değişim", "end": "Ulaştığı nokta"}
  },
  "storyArc": "Genel hikaye özeti (2-3 cümle)",
  "choicePoints": [
    {
      "position": 1,
      "question": "Karakter ne yapmalı? (çocuğa soru)",
      "options": [
        {
          "text": "Seçenek metni (kısa, 5-10 kelime)",
          "emoji": "🎯",
          "trait": "empathy|courage|curiosity|creativity|problem_solving|sharing|patience|independence",
          "storyDirection": "Bu seçim hikayeyi nereye götürür (1 cümle)"
        }
      ]
    }
  ],
  "convergencePoints": ["Yakınsama noktalarının açıklaması"],
  "endingTheme": "Pozitif bitiş mesajı",
  "mood": "happy|adventure|calm|magical|therapeutic"
}"""

OUTLINE_SCHEMA_EN = """JSON SCHEMA:
{
  "title": "Story title (3-5 words)",
  "mainCharacter": {
    "name": "Character name",
    "type": "Animal type (fox, rabbit, bear, etc.)",
    "age": "Close to child's age",
    "appearance": "Detailed physical appearance",
    "personality": ["trait1", "trait2", "trait3"],
    "speechStyle": "How they speak",
    "arc": {"start": "Starting state", "middle": "Change experienced", "end": "Final state"}
  },
  "storyArc": "Overall story summary (2-3 sentences)",
  "choicePoints": [
    {
      "position": 1,
      "question": "What should character do? (question for child)",
      "options": [
        {
          "text": "Option text (short, 5-10 words)",
          "emoji": "🎯",
          "trait": "empathy|courage|curiosity|creativity|problem_solving|sharing|patience|independence",
          "storyDirection": "Where this choice leads (1 sentence)"
        }
      ]
    }
  ],
  "convergencePoints": ["Description of convergence points"],
  "endingTheme": "Positive ending message",
  "mood": "happy|adventure|calm|magical|therapeutic"
}"""


# ---------- 段落提示词 ----------

SEGMENT_SYSTEM_TR = """Sen çocuk masalı yazarısın. SOMUT sahneler yazarsın, özet değil.

KARAKTER:
İsim: {name}
Tür: {type}
Görünüm: {appearance}
Kişilik: {personality}
Konuşma tarzı: {speech_style}

KURALLAR:
1. Her sayfada {sentences} cümle, ~{words} kelime
2. GÖSTER, özetleme: "Eğlendiler" DEĞİL, "Luna kırmızı topu havaya attı ve güldü"
3. Duyusal detaylar ekle: renkler, sesler, hisler
4. Karakter tutarlılığını koru
5. {scene_rule}

ÖNCEKİ SEÇİMLER:
{choices}

ÇIKTI: Sadece JSON formatında yanıt ver."""

SEGMENT_SYSTEM_EN = """You are a children's story writer. Write CONCRETE scenes, not summaries.

CHARACTER:
Name: {name}
Type: {type}
Appearance: {appearance}
Personality: {personality}
Speech style: {speech_style}

RULES:
1. Each page: {sentences} sentences, ~{words} words
2. SHOW, don't summarize: NOT "They had fun" but "Luna threw the red ball in the air and laughed"
3. Add sensory details: colors, sounds, feelings
4. Maintain character consistency
5. {scene_rule}

PREVIOUS CHOICES:
{choices}

OUTPUT: Respond only in JSON format."""


def _normalize_json(raw: str) -> str:
    """从模型输出中提取 JSON 并做清洗。"""
    raw = raw.strip()

    # 去掉可能的 markdown 代码块
    if raw.startswith("```"):
        raw = re.sub(r"^```\w*\n?", "", raw)
        raw = re.sub(r"\n?```\s*$", "", raw)
        raw = raw.strip()

    start = raw.find("{")
    if start < 0:
        raise GenerationParseError("LLM 响应中没有 JSON 对象", raw=raw)

    # 找到匹配的结束括号（考虑嵌套与字符串内的括号），同时移除字符串外的尾随逗号
    brace_count = 0
    in_string = False
    escape_next = False
    closed = False
    out: List[str] = []

    for i in range(start, len(raw)):
        char = raw[i]

        if escape_next:
            escape_next = False
            out.append(char)
            continue

        if char == '\\':
            escape_next = True
            out.append(char)
            continue

        if char == '"':
            in_string = not in_string
            out.append(char)
            continue

        if not in_string:
            if char == ",":
                rest = raw[i + 1:].lstrip()
                if rest[:1] in ("}", "]"):
                    continue
            elif char == "{":
                brace_count += 1
            elif char == "}":
                brace_count -= 1
                if brace_count == 0:
                    out.append(char)
                    closed = True
                    break

        out.append(char)

    if not closed:
        raise GenerationParseError("LLM 响应中的 JSON 对象不完整", raw=raw)

    return "".join(out)


def _parse_json(raw: str) -> dict:
    """解析清洗后的 JSON；失败时抛 GenerationParseError，不做兜底内容。"""
    cleaned = _normalize_json(raw)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error(f"[LLM] ❌ JSON 解析失败: {e.msg} at line {e.lineno}, col {e.colno}")
        logger.debug(f"[LLM] 原始内容 (前1000字符):\n{raw[:1000]}")
        raise GenerationParseError(f"JSON 解析失败: {e.msg}", raw=raw) from e
    if not isinstance(data, dict):
        raise GenerationParseError("LLM 响应的 JSON 不是对象", raw=raw)
    return data


async def _chat(system_prompt: str, user_prompt: str, max_tokens: int) -> str:
    settings = get_settings()
    client = AsyncOpenAI(
        base_url=settings.llm_api_base.rstrip("/"),
        api_key=settings.llm_api_key,
        timeout=settings.llm_timeout,
    )
    resp = await client.chat.completions.create(
        model=settings.llm_model,
        messages=[
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
        max_tokens=max_tokens,
        temperature=settings.llm_temperature,
    )
    raw = resp.choices[0].message.content or ""
    logger.debug(f"[LLM] 原始响应 (前200字符): {raw[:200]}...")
    return raw


def _therapeutic_block(request: GenerateInteractiveStoryRequest) -> str:
    if not request.therapeutic_context:
        return ""
    ctx = build_enhanced_therapeutic_context(request.therapeutic_context.concern_type, request.language)
    if ctx is None:
        return ""
    avoid = "\n".join(f"- {t}" for t in ctx.avoid_topics)
    traits = format_recommended_traits_prompt(ctx.recommended_traits, request.language)
    if request.language == "tr":
        return f"""
TERAPÖTİK BAĞLAM:
Çizimde "{ctx.concern_type}" içeriği tespit edildi.
Terapötik yaklaşım: {ctx.therapeutic_approach}

{traits}

KAÇINILMASI GEREKEN KONULAR:
{avoid}

ÖNEMLİ KURALLAR:
- Hikaye bu konuyu DOĞRUDAN ele almaz, METAFORLAR kullanır
- Karakter benzer zorlukları sembolik olarak yaşar ve aşar
- Her seçimde yukarıdaki ÖNERİLEN ÖZELLİKLERDEN en az biri olmalı
- Her yol UMUT ve GÜVENLİK ile biter
- Başa çıkma mekanizması: {ctx.coping_mechanism}
"""
    return f"""
THERAPEUTIC CONTEXT:
Drawing contains "{ctx.concern_type}" content.
Therapeutic approach: {ctx.therapeutic_approach}

{traits}

TOPICS TO AVOID:
{avoid}

IMPORTANT RULES:
- Story does NOT address this topic DIRECTLY, uses METAPHORS
- Character experiences and overcomes similar challenges symbolically
- Each choice must include at least one of the RECOMMENDED TRAITS above
- All paths end with HOPE and SAFETY
- Coping mechanism: {ctx.coping_mechanism}
"""


def build_outline_prompts(request: GenerateInteractiveStoryRequest) -> tuple[str, str]:
    """构建大纲规划的 system / user 提示词。"""
    age = get_age_params(request.child_age)
    therapeutic = _therapeutic_block(request)
    insights = ". ".join(i.strip() for i in request.drawing_insights if i and i.strip())

    if request.language == "tr":
        system_prompt = OUTLINE_SYSTEM_TR.format(therapeutic=therapeutic)
        user_prompt = f"""Çocuk yaşı: {request.child_age}
Çocuk adı: {request.child_name or "Kahraman"}
Seçilen tema: {request.selected_theme or "Macera"}
Kelime hazinesi: {age.vocabulary}
Temalar: {", ".join(age.themes)}
Seçim karmaşıklığı: {age.choice_complexity}
{f"Çizim analizi: {insights}" if insights else ""}

{OUTLINE_SCHEMA_TR}"""
    else:
        system_prompt = OUTLINE_SYSTEM_EN.format(therapeutic=therapeutic)
        user_prompt = f"""Child age: {request.child_age}
Child name: {request.child_name or "Hero"}
Selected theme: {request.selected_theme or "Adventure"}
Vocabulary: {age.vocabulary}
Themes: {", ".join(age.themes)}
Choice complexity: {age.choice_complexity}
{f"Drawing analysis: {insights}" if insights else ""}

{OUTLINE_SCHEMA_EN}"""
    return system_prompt, user_prompt


def parse_outline(raw: str) -> InteractiveOutline:
    """把 LLM 原始响应解析并校验为 InteractiveOutline。"""
    data = _parse_json(raw)
    try:
        return InteractiveOutline.model_validate(data)
    except ValidationError as e:
        logger.error(f"[LLM] ❌ 大纲结构校验失败: {e.error_count()} 处错误")
        raise GenerationParseError(f"大纲结构不符合预期: {e}", raw=raw) from e


@timed_execution("大纲规划")
async def plan_interactive_outline(request: GenerateInteractiveStoryRequest) -> InteractiveOutline:
    """调用 LLM 规划整个互动故事的大纲（全部选择点）。"""
    settings = get_settings()
    log_llm_call(
        logger, "大纲规划", settings.llm_model, request.language,
        child_age=request.child_age,
        concern=request.therapeutic_context.concern_type if request.therapeutic_context else None,
    )
    system_prompt, user_prompt = build_outline_prompts(request)
    raw = await _chat(system_prompt, user_prompt, settings.outline_max_tokens)
    outline = parse_outline(raw)

    count = len(outline.choice_points)
    if count < settings.min_choice_points:
        logger.warning(
            f"[LLM] ⚠️ 选择点只有 {count} 个（建议至少 {settings.min_choice_points} 个），继续建图"
        )
    logger.info(f"[LLM] ✅ 大纲规划完成: 《{outline.title}》，{count} 个选择点")
    return outline


def format_choice_history(previous_choices: List[PreviousChoice], language: str = "tr") -> str:
    if not previous_choices:
        return "Henüz seçim yapılmadı" if language == "tr" else "No choices made yet"
    return "\n".join(
        f'{i + 1}. "{c.question}" → "{c.chosen}" ({c.trait})'
        for i, c in enumerate(previous_choices)
    )


def build_segment_prompts(
    character: InteractiveCharacter,
    style_context: SegmentStyleContext,
    previous_choices: List[PreviousChoice],
    segment_id: str,
    segment_description: str,
    is_ending: bool,
    language: str,
    child_age: int,
) -> tuple[str, str]:
    """构建段落生成的 system / user 提示词。"""
    age = get_age_params(child_age)
    is_tr = language == "tr"
    if is_ending:
        scene_rule = (
            "Bu bir BİTİŞ sahnesi - pozitif, umut dolu bitir" if is_tr
            else "This is an ENDING scene - end positively and hopefully"
        )
    else:
        scene_rule = (
            "Sahne bir seçim noktasına hazırlık olsun" if is_tr
            else "Scene should prepare for a choice point"
        )

    template = SEGMENT_SYSTEM_TR if is_tr else SEGMENT_SYSTEM_EN
    system_prompt = template.format(
        name=character.name,
        type=character.type,
        appearance=character.appearance,
        personality=", ".join(character.personality),
        speech_style=character.speech_style,
        sentences=age.sentences_per_page,
        words=age.words_per_page,
        scene_rule=scene_rule,
        choices=format_choice_history(previous_choices, language),
    )

    if is_tr:
        ending_line = f"BİTİŞ SAHNESİ: {style_context.ending_theme}" if is_ending else ""
        user_prompt = f"""Bu segment için sahne yaz:
Segment ID: {segment_id}
Segment açıklaması: {segment_description}
Sayfa sayısı: {age.pages_per_segment}
{ending_line}

JSON ŞEMASI:
{{
  "pages": [
    {{
      "pageNumber": 1,
      "text": "Sahne metni ({age.words_per_page} kelime)",
      "sceneDescription": "Görsel için sahne açıklaması",
      "visualPrompt": "Detaylı görsel prompt (İngilizce)",
      "emotion": "Sayfanın duygusu"
    }}
  ]
}}"""
    else:
        ending_line = f"ENDING SCENE: {style_context.ending_theme}" if is_ending else ""
        user_prompt = f"""Write scene for this segment:
Segment ID: {segment_id}
Segment description: {segment_description}
Page count: {age.pages_per_segment}
{ending_line}

JSON SCHEMA:
{{
  "pages": [
    {{
      "pageNumber": 1,
      "text": "Scene text (~{age.words_per_page} words)",
      "sceneDescription": "Scene description for visual",
      "visualPrompt": "Detailed visual prompt",
      "emotion": "Page emotion"
    }}
  ]
}}"""
    return system_prompt, user_prompt


def parse_segment(raw: str, segment_id: str, is_ending: bool) -> StorySegment:
    """把 LLM 原始响应解析为 StorySegment；页码缺失时按顺序补齐。"""
    data = _parse_json(raw)
    pages = data.get("pages")
    if not isinstance(pages, list) or not pages:
        raise GenerationParseError(f"段落 {segment_id} 缺少 pages", raw=raw)
    try:
        segment = StorySegment.model_validate({
            "id": segment_id,
            "pages": pages,
            "ends_with_choice": not is_ending,
        })
    except ValidationError as e:
        logger.error(f"[LLM] ❌ 段落 {segment_id} 结构校验失败: {e.error_count()} 处错误")
        raise GenerationParseError(f"段落结构不符合预期: {e}", raw=raw) from e

    for i, page in enumerate(segment.pages):
        if page.page_number is None:
            page.page_number = i + 1
    return segment


@timed_execution("段落生成")
async def generate_segment(
    character: InteractiveCharacter,
    style_context: SegmentStyleContext,
    previous_choices: List[PreviousChoice],
    segment_id: str,
    segment_description: str,
    is_ending: bool,
    language: str,
    child_age: int,
) -> StorySegment:
    """按需生成单个段落的页面内容。"""
    settings = get_settings()
    log_llm_call(
        logger, "段落生成", settings.llm_model, language,
        segment_id=segment_id,
        is_ending=is_ending,
        choices=len(previous_choices),
    )
    system_prompt, user_prompt = build_segment_prompts(
        character, style_context, previous_choices,
        segment_id, segment_description, is_ending, language, child_age,
    )
    raw = await _chat(system_prompt, user_prompt, settings.segment_max_tokens)
    segment = parse_segment(raw, segment_id, is_ending)
    logger.info(f"[LLM] ✅ 段落 {segment_id} 生成完成，共 {len(segment.pages)} 页")
    return segment
