"""年龄段参数 - 决定每段页数、句子数、词汇与选择复杂度。"""
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class AgeParams:
    pages_per_segment: int
    sentences_per_page: int
    words_per_page: int
    vocabulary: str
    themes: List[str]
    choice_complexity: str


TODDLER = AgeParams(
    pages_per_segment=1,
    sentences_per_page=2,
    words_per_page=30,
    vocabulary="Günlük objeler, temel duygular (mutlu, üzgün), basit eylemler",
    themes=["Sevgi", "Arkadaşlık", "Keşif", "Aile"],
    choice_complexity="Çok basit, görsel ağırlıklı seçimler (2 seçenek)",
)

PRESCHOOL = AgeParams(
    pages_per_segment=2,
    sentences_per_page=3,
    words_per_page=50,
    vocabulary="Hayvanlar, doğa, arkadaşlık, basit duygusal kavramlar",
    themes=["Paylaşım", "Cesaret", "Merak", "Yardımlaşma"],
    choice_complexity="Basit seçimler, net sonuçlar (2-3 seçenek)",
)

EARLY_READER = AgeParams(
    pages_per_segment=2,
    sentences_per_page=4,
    words_per_page=70,
    vocabulary="Macera, duygusal çeşitlilik, problem çözme kavramları",
    themes=["Problem çözme", "Empati", "Dayanıklılık", "Arkadaşlık"],
    choice_complexity="Orta karmaşıklıkta seçimler, sonuçları düşündüren (2-3 seçenek)",
)

PRETEEN = AgeParams(
    pages_per_segment=3,
    sentences_per_page=5,
    words_per_page=100,
    vocabulary="Soyut kavramlar, ahlaki temalar, karakter gelişimi",
    themes=["Sorumluluk", "Adalet", "Kimlik", "Büyüme"],
    choice_complexity="Karmaşık seçimler, ahlaki ikilemler içerebilir (3 seçenek)",
)


def get_age_params(age: int) -> AgeParams:
    """按孩子年龄返回对应年龄段参数（≤3、≤6、≤9、>9）。"""
    if age <= 3:
        return TODDLER
    if age <= 6:
        return PRESCHOOL
    if age <= 9:
        return EARLY_READER
    return PRETEEN
