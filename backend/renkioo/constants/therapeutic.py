"""治疗性映射：画作中检测到的问题类型 → 推荐特质、应对方式与家长指导"""
from typing import Dict, List, TypedDict, Optional

from renkioo.constants.traits import TRAIT_DEFINITIONS
from renkioo.models.story import EnhancedTherapeuticContext


class TherapeuticTraitMapping(TypedDict):
    recommended_traits: List[str]
    therapeutic_value_tr: str
    therapeutic_value_en: str
    coping_mechanism_tr: str
    coping_mechanism_en: str
    parent_guidance_tr: List[str]
    parent_guidance_en: List[str]
    avoid_topics_tr: List[str]
    avoid_topics_en: List[str]


# 未知类型统一归入 other
FALLBACK_CONCERN = "other"

THERAPEUTIC_TRAIT_MAPPING: Dict[str, TherapeuticTraitMapping] = {
    "war": {
        "recommended_traits": ["courage", "empathy", "patience"],
        "therapeutic_value_tr": "Savaş/çatışma temalarıyla başa çıkmak için güvenlik ve barış hissi oluşturma",
        "therapeutic_value_en": "Building sense of safety and peace to cope with war/conflict themes",
        "coping_mechanism_tr": "Çocuğunuz zor durumlarla başa çıkarken koruyucu ve barışçıl çözümler aramayı tercih ediyor",
        "coping_mechanism_en": "Your child prefers seeking protective and peaceful solutions when facing difficulties",
        "parent_guidance_tr": [
            "Güvenli bir ortamda olduğunu hissettirin",
            "Haberlere maruziyeti sınırlayın",
            "Barış ve güvenlik temalı aktiviteler yapın",
            "Duygularını ifade etmesine izin verin"
        ],
        "parent_guidance_en": [
            "Make them feel they are in a safe environment",
            "Limit exposure to news",
            "Do activities with peace and safety themes",
            "Allow them to express their feelings"
        ],
        "avoid_topics_tr": ["Silah", "savaş detayları", "şiddet haberleri"],
        "avoid_topics_en": ["Weapons", "war details", "violence news"]
    },
    "violence": {
        "recommended_traits": ["courage", "problem_solving", "empathy"],
        "therapeutic_value_tr": "Şiddet temalarını güç ve kontrol hissiyle dönüştürme",
        "therapeutic_value_en": "Transforming violence themes with sense of power and control",
        "coping_mechanism_tr": "Çocuğunuz zorluklarla karşılaştığında güçlü durmayı ve çözüm bulmayı tercih ediyor",
        "coping_mechanism_en": "Your child prefers standing strong and finding solutions when facing challenges",
        "parent_guidance_tr": [
            "Güvenli olduğunu vurgulayın",
            "Fiziksel aktivitelerle enerji atmasına yardımcı olun",
            "Koruyucu figürleri (polis, itfaiye) tanıtın",
            "Şiddetsiz problem çözme yollarını konuşun"
        ],
        "parent_guidance_en": [
            "Emphasize that they are safe",
            "Help release energy through physical activities",
            "Introduce protective figures (police, firefighters)",
            "Discuss non-violent problem solving methods"
        ],
        "avoid_topics_tr": ["Detaylı şiddet sahneleri", "korku verici hikayeler"],
        "avoid_topics_en": ["Detailed violence scenes", "scary stories"]
    },
    "fear": {
        "recommended_traits": ["courage", "problem_solving", "patience"],
        "therapeutic_value_tr": "Korkuyu yönetilebilir ve yenilebilir bir şey olarak görme",
        "therapeutic_value_en": "Seeing fear as something manageable and defeatable",
        "coping_mechanism_tr": "Çocuğunuz korkularıyla yüzleşirken cesaret ve mantık kullanmayı tercih ediyor",
        "coping_mechanism_en": "Your child prefers using courage and logic when facing fears",
        "parent_guidance_tr": [
            "Korkularını küçümsemeyin, dinleyin",
            "Küçük adımlarla korkuyla yüzleşmeyi destekleyin",
            "Nefes egzersizleri öğretin",
            "Başarı hikayelerini paylaşın"
        ],
        "parent_guidance_en": [
            "Don't belittle their fears, listen",
            "Support facing fears in small steps",
            "Teach breathing exercises",
            "Share success stories"
        ],
        "avoid_topics_tr": ["Korkuyu büyütme", "cezalandırıcı dil"],
        "avoid_topics_en": ["Amplifying fear", "punitive language"]
    },
    "loneliness": {
        "recommended_traits": ["sharing", "empathy", "curiosity"],
        "therapeutic_value_tr": "Bağlantı kurma ve aidiyet hissi oluşturma",
        "therapeutic_value_en": "Building connection and sense of belonging",
        "coping_mechanism_tr": "Çocuğunuz yalnızlık hissettiğinde bağlantı kurmaya ve paylaşmaya yöneliyor",
        "coping_mechanism_en": "Your child tends to connect and share when feeling lonely",
        "parent_guidance_tr": [
            "Kaliteli birlikte zaman geçirin",
            "Sosyal aktivitelere katılımı destekleyin",
            "Hayali arkadaşları normalleştirin",
            "Aile bağlarını güçlendirin"
        ],
        "parent_guidance_en": [
            "Spend quality time together",
            "Support participation in social activities",
            "Normalize imaginary friends",
            "Strengthen family bonds"
        ],
        "avoid_topics_tr": ["Yalnızlığı cezalandırma", "sosyal baskı"],
        "avoid_topics_en": ["Punishing loneliness", "social pressure"]
    },
    "loss": {
        "recommended_traits": ["empathy", "patience", "sharing"],
        "therapeutic_value_tr": "Kaybı anlamlandırma ve anıları kutlama",
        "therapeutic_value_en": "Making sense of loss and celebrating memories",
        "coping_mechanism_tr": "Çocuğunuz kayıpla başa çıkarken duygusal bağlantı ve sabır gösteriyor",
        "coping_mechanism_en": "Your child shows emotional connection and patience when coping with loss",
        "parent_guidance_tr": [
            "Yas sürecine saygı gösterin",
            "Anıları paylaşın ve kutlayın",
            "Üzüntünün normal olduğunu söyleyin",
            "Fiziksel yakınlık sunun"
        ],
        "parent_guidance_en": [
            "Respect the grieving process",
            "Share and celebrate memories",
            "Say that sadness is normal",
            "Offer physical closeness"
        ],
        "avoid_topics_tr": ["Hızlı iyileşme beklentisi", "ölümü gizleme"],
        "avoid_topics_en": ["Expecting quick recovery", "hiding death"]
    },
    "death": {
        "recommended_traits": ["empathy", "patience", "creativity"],
        "therapeutic_value_tr": "Ölümü dönüşüm olarak anlama ve sevginin devamını hissetme",
        "therapeutic_value_en": "Understanding death as transformation and feeling love continues",
        "coping_mechanism_tr": "Çocuğunuz ölüm kavramıyla duygusal anlayış ve yaratıcı ifade ile başa çıkıyor",
        "coping_mechanism_en": "Your child copes with death concept through emotional understanding and creative expression",
        "parent_guidance_tr": [
            "Yaşa uygun açıklamalar yapın",
            "Sorularını dürüstçe yanıtlayın",
            "Anma ritüelleri oluşturun",
            "Duygularını sanatla ifade etmesine izin verin"
        ],
        "parent_guidance_en": [
            "Give age-appropriate explanations",
            "Answer questions honestly",
            "Create memorial rituals",
            "Allow expressing feelings through art"
        ],
        "avoid_topics_tr": ["Ölümü uyku ile karıştırma", "detaylı fiziksel açıklamalar"],
        "avoid_topics_en": ["Confusing death with sleep", "detailed physical explanations"]
    },
    "bullying": {
        "recommended_traits": ["courage", "independence", "empathy"],
        "therapeutic_value_tr": "Özgüven inşası ve sosyal güçlenme",
        "therapeutic_value_en": "Building self-confidence and social empowerment",
        "coping_mechanism_tr": "Çocuğunuz zorbalıkla karşılaştığında cesurca durma ve kendi değerini bilme eğiliminde",
        "coping_mechanism_en": "Your child tends to stand bravely and know their worth when facing bullying",
        "parent_guidance_tr": [
            "Asla suçlamayın, dinleyin",
            "Okul ile işbirliği yapın",
            "Sosyal beceriler geliştirin",
            "Güçlü yanlarını vurgulayın"
        ],
        "parent_guidance_en": [
            "Never blame, listen",
            "Cooperate with school",
            "Develop social skills",
            "Emphasize their strengths"
        ],
        "avoid_topics_tr": ["Karşılık vermeyi teşvik", "durumu küçümseme"],
        "avoid_topics_en": ["Encouraging retaliation", "belittling the situation"]
    },
    "family_separation": {
        "recommended_traits": ["patience", "independence", "sharing"],
        "therapeutic_value_tr": "Sevginin mesafeye rağmen devam ettiğini hissetme",
        "therapeutic_value_en": "Feeling that love continues despite distance",
        "coping_mechanism_tr": "Çocuğunuz aile değişikliklerine sabır ve bağımsızlıkla uyum sağlıyor",
        "coping_mechanism_en": "Your child adapts to family changes with patience and independence",
        "parent_guidance_tr": [
            "Her iki ebeveynin sevgisini vurgulayın",
            "Rutinleri koruyun",
            "Çocuğu ortaya koymayın",
            "Duygularını ifade etmesine izin verin"
        ],
        "parent_guidance_en": [
            "Emphasize both parents' love",
            "Maintain routines",
            "Don't put the child in the middle",
            "Allow expressing feelings"
        ],
        "avoid_topics_tr": ["Diğer ebeveyni kötüleme", "çocuğu haberci yapma"],
        "avoid_topics_en": ["Badmouthing other parent", "making child a messenger"]
    },
    "anxiety": {
        "recommended_traits": ["patience", "problem_solving", "creativity"],
        "therapeutic_value_tr": "Kaygıyı yönetilebilir ve kontrol edilebilir yapma",
        "therapeutic_value_en": "Making anxiety manageable and controllable",
        "coping_mechanism_tr": "Çocuğunuz kaygıyla başa çıkarken sakinleşme ve çözüm odaklı düşünme eğiliminde",
        "coping_mechanism_en": "Your child tends to calm down and think solution-focused when coping with anxiety",
        "parent_guidance_tr": [
            "Kaygıyı normalleştirin",
            "Nefes ve gevşeme teknikleri öğretin",
            "Endişeleri birlikte listeleyin",
            "Küçük başarıları kutlayın"
        ],
        "parent_guidance_en": [
            "Normalize anxiety",
            "Teach breathing and relaxation techniques",
            "List worries together",
            "Celebrate small successes"
        ],
        "avoid_topics_tr": ["Kaygıyı büyütme", "aşırı koruma"],
        "avoid_topics_en": ["Amplifying anxiety", "overprotection"]
    },
    "anger": {
        "recommended_traits": ["patience", "empathy", "creativity"],
        "therapeutic_value_tr": "Öfkeyi sağlıklı yollarla ifade etmeyi öğrenme",
        "therapeutic_value_en": "Learning to express anger in healthy ways",
        "coping_mechanism_tr": "Çocuğunuz öfkeyle başa çıkarken sakinleşme ve duygusal anlayış gösterme eğiliminde",
        "coping_mechanism_en": "Your child tends to calm down and show emotional understanding when coping with anger",
        "parent_guidance_tr": [
            "Öfkenin normal bir duygu olduğunu söyleyin",
            "Fiziksel aktivite ile enerji atmasına yardımcı olun",
            "Sakinleşme köşesi oluşturun",
            "Model olun - kendi öfkenizi yönetin"
        ],
        "parent_guidance_en": [
            "Say that anger is a normal emotion",
            "Help release energy through physical activity",
            "Create a calm-down corner",
            "Be a model - manage your own anger"
        ],
        "avoid_topics_tr": ["Öfkeyi bastırma", "cezalandırıcı tepkiler"],
        "avoid_topics_en": ["Suppressing anger", "punitive reactions"]
    },
    "depression": {
        "recommended_traits": ["empathy", "curiosity", "sharing"],
        "therapeutic_value_tr": "Umut ve bağlantı hissini yeniden inşa etme",
        "therapeutic_value_en": "Rebuilding sense of hope and connection",
        "coping_mechanism_tr": "Çocuğunuz üzgün hissettiğinde bağlantı kurmaya ve keşfetmeye yöneliyor",
        "coping_mechanism_en": "Your child tends to connect and explore when feeling sad",
        "parent_guidance_tr": [
            "Küçük mutlulukları fark ettirin",
            "Rutinleri koruyun",
            "Fiziksel aktiviteyi teşvik edin",
            "Profesyonel destek düşünün"
        ],
        "parent_guidance_en": [
            "Point out small happinesses",
            "Maintain routines",
            "Encourage physical activity",
            "Consider professional support"
        ],
        "avoid_topics_tr": ["Neşelenmeye zorlama", "durumu küçümseme"],
        "avoid_topics_en": ["Forcing cheerfulness", "belittling the situation"]
    },
    "low_self_esteem": {
        "recommended_traits": ["independence", "creativity", "courage"],
        "therapeutic_value_tr": "Kendi değerini keşfetme ve özgüven inşası",
        "therapeutic_value_en": "Discovering self-worth and building confidence",
        "coping_mechanism_tr": "Çocuğunuz kendine güvensiz hissettiğinde bağımsız başarılar ve yaratıcı ifade arıyor",
        "coping_mechanism_en": "Your child seeks independent achievements and creative expression when feeling insecure",
        "parent_guidance_tr": [
            "Çabayı sonuç kadar övün",
            "Güçlü yanlarını vurgulayın",
            "Karşılaştırma yapmayın",
            "Sorumluluk vererek güçlendirin"
        ],
        "parent_guidance_en": [
            "Praise effort as much as results",
            "Emphasize their strengths",
            "Don't make comparisons",
            "Empower by giving responsibility"
        ],
        "avoid_topics_tr": ["Olumsuz etiketler", "diğer çocuklarla karşılaştırma"],
        "avoid_topics_en": ["Negative labels", "comparing with other children"]
    },
    "disaster": {
        "recommended_traits": ["courage", "sharing", "patience"],
        "therapeutic_value_tr": "Topluluk gücü ve yeniden yapılanma umudu",
        "therapeutic_value_en": "Community strength and hope for rebuilding",
        "coping_mechanism_tr": "Çocuğunuz felaket durumlarında birlikte hareket etme ve sabırlı olma eğiliminde",
        "coping_mechanism_en": "Your child tends to act together and be patient in disaster situations",
        "parent_guidance_tr": [
            "Güvenlik planı yapın",
            "Haberlere maruziyeti sınırlayın",
            "Yardım etme fırsatları sunun",
            "Rutinleri yeniden kurun"
        ],
        "parent_guidance_en": [
            "Make a safety plan",
            "Limit exposure to news",
            "Offer opportunities to help",
            "Re-establish routines"
        ],
        "avoid_topics_tr": ["Felaket detayları", "gelecek felaket senaryoları"],
        "avoid_topics_en": ["Disaster details", "future disaster scenarios"]
    },
    "abuse": {
        "recommended_traits": ["courage", "independence", "empathy"],
        "therapeutic_value_tr": "Güvenlik, ses bulma ve güç kazanma",
        "therapeutic_value_en": "Safety, finding voice and gaining power",
        "coping_mechanism_tr": "Çocuğunuz zor durumlarla karşılaştığında yardım aramaya ve kendi gücünü bulmaya yöneliyor",
        "coping_mechanism_en": "Your child tends to seek help and find their own strength when facing difficult situations",
        "parent_guidance_tr": [
            "Koşulsuz destek sağlayın",
            "Profesyonel yardım alın",
            "Sınırları öğretin",
            "Her zaman dinleyin, asla suçlamayın"
        ],
        "parent_guidance_en": [
            "Provide unconditional support",
            "Get professional help",
            "Teach boundaries",
            "Always listen, never blame"
        ],
        "avoid_topics_tr": ["Detaylı sorgulama", "suçlayıcı dil"],
        "avoid_topics_en": ["Detailed questioning", "blaming language"]
    },
    "neglect": {
        "recommended_traits": ["independence", "curiosity", "sharing"],
        "therapeutic_value_tr": "Kendi değerini keşfetme ve güvenli bağlar kurma",
        "therapeutic_value_en": "Discovering self-worth and building secure attachments",
        "coping_mechanism_tr": "Çocuğunuz ilgi eksikliği hissettiğinde kendi kaynaklarını bulmaya ve bağlantı kurmaya yöneliyor",
        "coping_mechanism_en": "Your child tends to find their own resources and connect when feeling neglected",
        "parent_guidance_tr": [
            "Tutarlı ilgi ve bakım sağlayın",
            "Kaliteli birlikte zaman geçirin",
            "Temel ihtiyaçların karşılandığından emin olun",
            "Duygusal bağı güçlendirin"
        ],
        "parent_guidance_en": [
            "Provide consistent attention and care",
            "Spend quality time together",
            "Ensure basic needs are met",
            "Strengthen emotional bond"
        ],
        "avoid_topics_tr": ["İhmal eden yetişkini savunma"],
        "avoid_topics_en": ["Defending neglecting adult"]
    },
    "domestic_violence_witness": {
        "recommended_traits": ["courage", "empathy", "patience"],
        "therapeutic_value_tr": "Güvenlik hissi oluşturma ve duygusal işleme",
        "therapeutic_value_en": "Building sense of safety and emotional processing",
        "coping_mechanism_tr": "Çocuğunuz zor aile durumlarıyla karşılaştığında güvenlik aramaya ve sabır göstermeye yöneliyor",
        "coping_mechanism_en": "Your child tends to seek safety and show patience when facing difficult family situations",
        "parent_guidance_tr": [
            "Profesyonel destek alın",
            "Güvenli ortam sağlayın",
            "Çocuğun suçu olmadığını vurgulayın",
            "Duygularını ifade etmesine izin verin"
        ],
        "parent_guidance_en": [
            "Get professional support",
            "Provide safe environment",
            "Emphasize it's not child's fault",
            "Allow expressing feelings"
        ],
        "avoid_topics_tr": ["Şiddet detayları", "taraf tutturma"],
        "avoid_topics_en": ["Violence details", "taking sides"]
    },
    "parental_addiction": {
        "recommended_traits": ["independence", "patience", "empathy"],
        "therapeutic_value_tr": "Çocuğun suçu olmadığını anlama ve kendi gücünü bulma",
        "therapeutic_value_en": "Understanding it's not child's fault and finding own strength",
        "coping_mechanism_tr": "Çocuğunuz aile zorluklarıyla karşılaştığında bağımsız olmaya ve sabır göstermeye yöneliyor",
        "coping_mechanism_en": "Your child tends to be independent and show patience when facing family challenges",
        "parent_guidance_tr": [
            "Yaşa uygun açıklamalar yapın",
            "Çocuğun suçu olmadığını vurgulayın",
            "Destek gruplarından yararlanın",
            "Rutinleri koruyun"
        ],
        "parent_guidance_en": [
            "Give age-appropriate explanations",
            "Emphasize it's not child's fault",
            "Use support groups",
            "Maintain routines"
        ],
        "avoid_topics_tr": ["Bağımlı ebeveyni kötüleme", "çocuğa sorumluluk yükleme"],
        "avoid_topics_en": ["Badmouthing addicted parent", "putting responsibility on child"]
    },
    "parental_mental_illness": {
        "recommended_traits": ["empathy", "patience", "independence"],
        "therapeutic_value_tr": "Hastalığı anlamlandırma ve sevginin devam ettiğini bilme",
        "therapeutic_value_en": "Making sense of illness and knowing love continues",
        "coping_mechanism_tr": "Çocuğunuz ebeveyn zorluklarıyla karşılaştığında anlayış ve sabır gösteriyor",
        "coping_mechanism_en": "Your child shows understanding and patience when facing parental challenges",
        "parent_guidance_tr": [
            "Yaşa uygun açıklamalar yapın",
            "Sevginin devam ettiğini vurgulayın",
            "Tutarlı rutinler sağlayın",
            "Destek sistemi oluşturun"
        ],
        "parent_guidance_en": [
            "Give age-appropriate explanations",
            "Emphasize love continues",
            "Provide consistent routines",
            "Build support system"
        ],
        "avoid_topics_tr": ["Hastalığı çocuğa yük olarak sunma"],
        "avoid_topics_en": ["Presenting illness as child's burden"]
    },
    "medical_trauma": {
        "recommended_traits": ["courage", "patience", "problem_solving"],
        "therapeutic_value_tr": "Tıbbi korkuları yönetme ve kontrol hissi kazanma",
        "therapeutic_value_en": "Managing medical fears and gaining sense of control",
        "coping_mechanism_tr": "Çocuğunuz tıbbi durumlarla başa çıkarken cesaret ve mantıklı düşünme kullanıyor",
        "coping_mechanism_en": "Your child uses courage and logical thinking when coping with medical situations",
        "parent_guidance_tr": [
            "Prosedürleri önceden açıklayın",
            "Oyunla hazırlık yapın",
            "Kontrol hissi verin (seçenekler sunun)",
            "Başarıları kutlayın"
        ],
        "parent_guidance_en": [
            "Explain procedures beforehand",
            "Prepare through play",
            "Give sense of control (offer choices)",
            "Celebrate successes"
        ],
        "avoid_topics_tr": ["Korkutucu tıbbi detaylar", "ağrı tehditleri"],
        "avoid_topics_en": ["Scary medical details", "pain threats"]
    },
    "school_stress": {
        "recommended_traits": ["problem_solving", "patience", "creativity"],
        "therapeutic_value_tr": "Akademik baskıyı yönetme ve başarıyı yeniden tanımlama",
        "therapeutic_value_en": "Managing academic pressure and redefining success",
        "coping_mechanism_tr": "Çocuğunuz okul stresiyle başa çıkarken çözüm odaklı ve yaratıcı yaklaşıyor",
        "coping_mechanism_en": "Your child approaches school stress with solution-focused and creative approach",
        "parent_guidance_tr": [
            "Çabayı sonuç kadar değerlendirin",
            "Dinlenme zamanı sağlayın",
            "Gerçekçi beklentiler koyun",
            "Okul dışı başarıları da kutlayın"
        ],
        "parent_guidance_en": [
            "Value effort as much as results",
            "Provide rest time",
            "Set realistic expectations",
            "Celebrate non-academic successes too"
        ],
        "avoid_topics_tr": ["Aşırı akademik baskı", "başka çocuklarla karşılaştırma"],
        "avoid_topics_en": ["Excessive academic pressure", "comparing with other children"]
    },
    "social_rejection": {
        "recommended_traits": ["independence", "creativity", "sharing"],
        "therapeutic_value_tr": "Kendi değerini bilme ve doğru arkadaşları bulma",
        "therapeutic_value_en": "Knowing self-worth and finding right friends",
        "coping_mechanism_tr": "Çocuğunuz sosyal reddedilmeyle karşılaştığında kendi değerini biliyor ve yeni bağlantılar arıyor",
        "coping_mechanism_en": "Your child knows their worth and seeks new connections when facing social rejection",
        "parent_guidance_tr": [
            "Değerli olduğunu vurgulayın",
            "Farklı sosyal ortamlar sunun",
            "Sosyal becerileri pratik edin",
            "Kaliteli arkadaşlığı tartışın"
        ],
        "parent_guidance_en": [
            "Emphasize they are valuable",
            "Offer different social environments",
            "Practice social skills",
            "Discuss quality friendship"
        ],
        "avoid_topics_tr": ["Popülerlik baskısı", "reddeden çocukları kötüleme"],
        "avoid_topics_en": ["Popularity pressure", "badmouthing rejecting children"]
    },
    "displacement": {
        "recommended_traits": ["curiosity", "patience", "sharing"],
        "therapeutic_value_tr": "Yeni ortama uyum ve kökleri koruma",
        "therapeutic_value_en": "Adapting to new environment and preserving roots",
        "coping_mechanism_tr": "Çocuğunuz yer değişikliğiyle başa çıkarken keşfetmeye ve bağlantı kurmaya yöneliyor",
        "coping_mechanism_en": "Your child tends to explore and connect when coping with displacement",
        "parent_guidance_tr": [
            "Kültürel bağları koruyun",
            "Yeni ortamı keşfetmeyi destekleyin",
            "Tutarlı rutinler sağlayın",
            "Duygularını ifade etmesine izin verin"
        ],
        "parent_guidance_en": [
            "Preserve cultural ties",
            "Support exploring new environment",
            "Provide consistent routines",
            "Allow expressing feelings"
        ],
        "avoid_topics_tr": ["Eski yeri idealize etme", "yeni yeri kötüleme"],
        "avoid_topics_en": ["Idealizing old place", "badmouthing new place"]
    },
    "poverty": {
        "recommended_traits": ["creativity", "sharing", "patience"],
        "therapeutic_value_tr": "Değerin maddi şeylerle ölçülmediğini anlama",
        "therapeutic_value_en": "Understanding value is not measured by material things",
        "coping_mechanism_tr": "Çocuğunuz ekonomik zorluklarla başa çıkarken yaratıcılık ve paylaşım gösteriyor",
        "coping_mechanism_en": "Your child shows creativity and sharing when coping with economic difficulties",
        "parent_guidance_tr": [
            "Sevgi ve zamanı vurgulayın",
            "Yaratıcı aktiviteler yapın",
            "Paylaşmanın değerini öğretin",
            "Umut ve hedefler konuşun"
        ],
        "parent_guidance_en": [
            "Emphasize love and time",
            "Do creative activities",
            "Teach value of sharing",
            "Discuss hope and goals"
        ],
        "avoid_topics_tr": ["Maddi eksiklikleri vurgulama", "çocuğa ekonomik yük bindirme"],
        "avoid_topics_en": ["Emphasizing material lacks", "putting economic burden on child"]
    },
    "cyberbullying": {
        "recommended_traits": ["courage", "independence", "problem_solving"],
        "therapeutic_value_tr": "Dijital güvenlik ve öz değer",
        "therapeutic_value_en": "Digital safety and self-worth",
        "coping_mechanism_tr": "Çocuğunuz online zorbalıkla karşılaştığında cesurca yardım arıyor ve çözüm buluyor",
        "coping_mechanism_en": "Your child bravely seeks help and finds solutions when facing online bullying",
        "parent_guidance_tr": [
            "Dijital okuryazarlık öğretin",
            "Açık iletişim kurun",
            "Kanıtları saklayın",
            "Gerekirse yetkililere bildirin"
        ],
        "parent_guidance_en": [
            "Teach digital literacy",
            "Establish open communication",
            "Save evidence",
            "Report to authorities if needed"
        ],
        "avoid_topics_tr": ["İnterneti tamamen yasaklama", "suçlayıcı dil"],
        "avoid_topics_en": ["Completely banning internet", "blaming language"]
    },
    "other": {
        "recommended_traits": ["empathy", "courage", "patience"],
        "therapeutic_value_tr": "Genel duygusal güçlenme ve başa çıkma becerileri",
        "therapeutic_value_en": "General emotional strengthening and coping skills",
        "coping_mechanism_tr": "Çocuğunuz zorluklarla karşılaştığında duygusal anlayış ve sabır gösteriyor",
        "coping_mechanism_en": "Your child shows emotional understanding and patience when facing challenges",
        "parent_guidance_tr": [
            "Dinleyin ve destekleyin",
            "Duygularını ifade etmesine izin verin",
            "Birlikte çözüm arayın",
            "Profesyonel destek düşünün"
        ],
        "parent_guidance_en": [
            "Listen and support",
            "Allow expressing feelings",
            "Seek solutions together",
            "Consider professional support"
        ],
        "avoid_topics_tr": ["Durumu küçümseme"],
        "avoid_topics_en": ["Belittling the situation"]
    },
    "none": {
        "recommended_traits": ["curiosity", "creativity", "sharing"],
        "therapeutic_value_tr": "Pozitif gelişim ve keşif",
        "therapeutic_value_en": "Positive development and exploration",
        "coping_mechanism_tr": "Çocuğunuz doğal merakı ve yaratıcılığıyla dünyayı keşfediyor",
        "coping_mechanism_en": "Your child explores the world with natural curiosity and creativity",
        "parent_guidance_tr": [
            "Keşfi destekleyin",
            "Yaratıcılığı teşvik edin",
            "Birlikte kaliteli zaman geçirin"
        ],
        "parent_guidance_en": [
            "Support exploration",
            "Encourage creativity",
            "Spend quality time together"
        ],
        "avoid_topics_tr": [],
        "avoid_topics_en": []
    },
}


CONCERN_NAMES: Dict[str, Dict[str, str]] = {
    "war": {"tr": "Savaş/Çatışma", "en": "War/Conflict"},
    "violence": {"tr": "Şiddet", "en": "Violence"},
    "fear": {"tr": "Korku", "en": "Fear"},
    "loneliness": {"tr": "Yalnızlık", "en": "Loneliness"},
    "loss": {"tr": "Kayıp", "en": "Loss"},
    "death": {"tr": "Ölüm", "en": "Death"},
    "bullying": {"tr": "Zorbalık", "en": "Bullying"},
    "family_separation": {"tr": "Aile Ayrılığı", "en": "Family Separation"},
    "anxiety": {"tr": "Kaygı", "en": "Anxiety"},
    "anger": {"tr": "Öfke", "en": "Anger"},
    "depression": {"tr": "Depresyon", "en": "Depression"},
    "low_self_esteem": {"tr": "Düşük Özgüven", "en": "Low Self-Esteem"},
    "disaster": {"tr": "Felaket", "en": "Disaster"},
    "abuse": {"tr": "İstismar", "en": "Abuse"},
    "neglect": {"tr": "İhmal", "en": "Neglect"},
    "domestic_violence_witness": {"tr": "Aile İçi Şiddete Tanıklık", "en": "Domestic Violence Witness"},
    "parental_addiction": {"tr": "Ebeveyn Bağımlılığı", "en": "Parental Addiction"},
    "parental_mental_illness": {"tr": "Ebeveyn Ruh Sağlığı Sorunu", "en": "Parental Mental Illness"},
    "medical_trauma": {"tr": "Tıbbi Travma", "en": "Medical Trauma"},
    "school_stress": {"tr": "Okul Stresi", "en": "School Stress"},
    "social_rejection": {"tr": "Sosyal Reddedilme", "en": "Social Rejection"},
    "displacement": {"tr": "Yerinden Edilme", "en": "Displacement"},
    "poverty": {"tr": "Yoksulluk", "en": "Poverty"},
    "cyberbullying": {"tr": "Siber Zorbalık", "en": "Cyberbullying"},
    "other": {"tr": "Diğer", "en": "Other"},
    "none": {"tr": "Yok", "en": "None"},
}


def get_therapeutic_mapping(concern_type: str) -> TherapeuticTraitMapping:
    """根据问题类型获取映射，未知类型回退到 other。"""
    return THERAPEUTIC_TRAIT_MAPPING.get(concern_type, THERAPEUTIC_TRAIT_MAPPING[FALLBACK_CONCERN])


def get_concern_name(concern_type: str, language: str = "tr") -> str:
    names = CONCERN_NAMES.get(concern_type)
    if not names:
        return concern_type
    return names[language] if language in names else names["en"]


def build_enhanced_therapeutic_context(
    concern_type: str,
    language: str = "tr",
) -> Optional[EnhancedTherapeuticContext]:
    """按语言展开治疗性上下文（用于大纲提示词与家长报告）。"""
    if not concern_type:
        return None
    mapping = get_therapeutic_mapping(concern_type)
    suffix = "tr" if language == "tr" else "en"
    return EnhancedTherapeuticContext(
        concern_type=concern_type,
        therapeutic_approach=mapping[f"therapeutic_value_{suffix}"],
        recommended_traits=mapping["recommended_traits"],
        coping_mechanism=mapping[f"coping_mechanism_{suffix}"],
        parent_guidance=mapping[f"parent_guidance_{suffix}"],
        avoid_topics=mapping[f"avoid_topics_{suffix}"],
    )


def format_recommended_traits_prompt(recommended_traits: List[str], language: str = "tr") -> str:
    """把推荐特质格式化为提示词段落。"""
    lines = []
    for trait in recommended_traits:
        definition = TRAIT_DEFINITIONS[trait]
        if language == "tr":
            lines.append(f"- {definition['name_tr']} ({trait}): {definition['positive_description_tr']}")
        else:
            lines.append(f"- {definition['name_en']} ({trait}): {definition['positive_description_en']}")
    details = "\n".join(lines)
    if language == "tr":
        return f"ÖNERİLEN TERAPÖTİK ÖZELLİKLER (seçimlerde öncelik ver):\n{details}"
    return f"RECOMMENDED THERAPEUTIC TRAITS (prioritize in choices):\n{details}"
