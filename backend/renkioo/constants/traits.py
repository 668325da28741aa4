"""性格特质配置：每个选项都关联一个特质，用于家长报告展示"""
from typing import Dict, TypedDict


class TraitDefinition(TypedDict):
    """特质定义（tr/en 双语）"""
    name_tr: str
    name_en: str
    emoji: str
    color: str
    positive_description_tr: str
    positive_description_en: str
    activity_suggestion_tr: str
    activity_suggestion_en: str


class TraitInfo(TypedDict):
    """按语言取出的特质展示信息"""
    name: str
    emoji: str
    color: str
    description: str
    activity_suggestion: str


# 8 种固定特质（与 PersonalityTrait 枚举一一对应）
TRAIT_DEFINITIONS: Dict[str, TraitDefinition] = {
    "empathy": {
        "name_tr": "Empati",
        "name_en": "Empathy",
        "emoji": "💜",
        "color": "#9333EA",
        "positive_description_tr": "Çocuğunuz başkalarının duygularını anlamakta çok başarılı. Bu değerli bir sosyal beceri!",
        "positive_description_en": "Your child excels at understanding others' feelings. This is a valuable social skill!",
        "activity_suggestion_tr": "Birlikte hayvan barınağı ziyaret edin veya yaşlılara kart yazın.",
        "activity_suggestion_en": "Visit an animal shelter together or write cards for elderly neighbors.",
    },
    "courage": {
        "name_tr": "Cesaret",
        "name_en": "Courage",
        "emoji": "🦁",
        "color": "#EF4444",
        "positive_description_tr": "Çocuğunuz zor durumlardan korkmadan ileri adım atabiliyor. Bu güçlü bir liderlik özelliği!",
        "positive_description_en": "Your child steps forward bravely in difficult situations. This is a strong leadership quality!",
        "activity_suggestion_tr": "Yeni bir spor veya aktivite deneyin, cesaretini destekleyin.",
        "activity_suggestion_en": "Try a new sport or activity together, supporting their bravery.",
    },
    "curiosity": {
        "name_tr": "Merak",
        "name_en": "Curiosity",
        "emoji": "🔍",
        "color": "#3B82F6",
        "positive_description_tr": "Çocuğunuz dünyayı keşfetmeye meraklı. Bu öğrenme aşkının temelidir!",
        "positive_description_en": "Your child is curious about exploring the world. This is the foundation of a love for learning!",
        "activity_suggestion_tr": "Birlikte doğa yürüyüşüne çıkın ve sorularını dinleyin.",
        "activity_suggestion_en": "Go on nature walks together and listen to their questions.",
    },
    "creativity": {
        "name_tr": "Yaratıcılık",
        "name_en": "Creativity",
        "emoji": "🎨",
        "color": "#F59E0B",
        "positive_description_tr": "Çocuğunuz yaratıcı düşünebiliyor ve farklı çözümler üretebiliyor!",
        "positive_description_en": "Your child can think creatively and come up with different solutions!",
        "activity_suggestion_tr": "Sanat malzemeleri sağlayın ve serbest çizim/oyun zamanı verin.",
        "activity_suggestion_en": "Provide art supplies and give them free drawing/play time.",
    },
    "problem_solving": {
        "name_tr": "Problem Çözme",
        "name_en": "Problem Solving",
        "emoji": "🧩",
        "color": "#10B981",
        "positive_description_tr": "Çocuğunuz mantıklı düşünüp çözüm bulabiliyor. Bu akademik başarıya katkı sağlar!",
        "positive_description_en": "Your child can think logically and find solutions. This contributes to academic success!",
        "activity_suggestion_tr": "Bulmaca, lego veya strateji oyunları oynayın.",
        "activity_suggestion_en": "Play puzzles, lego, or strategy games together.",
    },
    "sharing": {
        "name_tr": "Paylaşım",
        "name_en": "Sharing",
        "emoji": "🤝",
        "color": "#EC4899",
        "positive_description_tr": "Çocuğunuz paylaşmayı ve işbirliği yapmayı seviyor. Bu güçlü sosyal bağlar kurar!",
        "positive_description_en": "Your child loves sharing and cooperating. This builds strong social bonds!",
        "activity_suggestion_tr": "Birlikte yemek pişirin ve paylaşın, ya da oyuncak bağışı yapın.",
        "activity_suggestion_en": "Cook and share food together, or donate toys to those in need.",
    },
    "patience": {
        "name_tr": "Sabır",
        "name_en": "Patience",
        "emoji": "🌱",
        "color": "#6366F1",
        "positive_description_tr": "Çocuğunuz sabırlı bekleyebiliyor. Bu duygusal olgunluğun işareti!",
        "positive_description_en": "Your child can wait patiently. This is a sign of emotional maturity!",
        "activity_suggestion_tr": "Birlikte bitki yetiştirin veya uzun süreli bir proje başlatın.",
        "activity_suggestion_en": "Grow plants together or start a long-term project.",
    },
    "independence": {
        "name_tr": "Bağımsızlık",
        "name_en": "Independence",
        "emoji": "🚀",
        "color": "#14B8A6",
        "positive_description_tr": "Çocuğunuz kendi başına karar verebiliyor. Bu özgüven gelişiminin göstergesi!",
        "positive_description_en": "Your child can make decisions independently. This shows confidence development!",
        "activity_suggestion_tr": "Günlük küçük kararları kendisinin vermesine izin verin.",
        "activity_suggestion_en": "Let them make small daily decisions on their own.",
    },
}


def get_trait_name(trait: str, language: str = "tr") -> str:
    """获取特质名称"""
    definition = TRAIT_DEFINITIONS[trait]
    return definition["name_tr"] if language == "tr" else definition["name_en"]


def get_trait_info(trait: str, language: str = "tr") -> TraitInfo:
    """按语言返回特质展示信息。trait 必须是 8 种固定特质之一，否则抛 KeyError。"""
    definition = TRAIT_DEFINITIONS[trait]
    is_tr = language == "tr"
    return {
        "name": get_trait_name(trait, language),
        "emoji": definition["emoji"],
        "color": definition["color"],
        "description": definition["positive_description_tr"] if is_tr else definition["positive_description_en"],
        "activity_suggestion": definition["activity_suggestion_tr"] if is_tr else definition["activity_suggestion_en"],
    }


def get_all_traits(language: str = "tr") -> list[dict]:
    """获取所有特质列表（含 ID）"""
    return [{"id": trait, **get_trait_info(trait, language)} for trait in TRAIT_DEFINITIONS]
