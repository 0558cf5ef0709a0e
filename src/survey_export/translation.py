"""
Column label translation helpers.

Turns Japanese question titles into English-looking variable names for
exports requested with English headers. The dictionary covers common survey
vocabulary; anything else falls back to a simplified hiragana-to-romaji pass.
"""

import re
from typing import Dict


TRANSLATIONS: Dict[str, str] = {
    # Profile
    "名前": "name",
    "年齢": "age",
    "性別": "gender",
    "職業": "occupation",
    "住所": "address",
    "電話番号": "phone",
    "メールアドレス": "email",
    "生年月日": "birth_date",
    "年収": "annual_income",
    "学歴": "education",
    "家族構成": "family_structure",

    # Survey vocabulary
    "回答": "response",
    "質問": "question",
    "選択肢": "option",
    "評価": "rating",
    "満足度": "satisfaction",
    "重要度": "importance",
    "頻度": "frequency",
    "理由": "reason",
    "意見": "opinion",
    "感想": "impression",
    "提案": "suggestion",
    "問題": "problem",
    "改善点": "improvement",
    "要望": "request",

    # Time
    "開始時間": "start_time",
    "終了時間": "end_time",
    "期間": "period",
    "日時": "datetime",
    "曜日": "day_of_week",
    "月": "month",
    "年": "year",

    # Quantities
    "回数": "count",
    "金額": "amount",
    "価格": "price",
    "費用": "cost",
    "予算": "budget",
    "割合": "ratio",
    "パーセント": "percentage",
    "点数": "score",
    "ランク": "rank",
    "順位": "ranking",

    # Places
    "場所": "location",
    "地域": "region",
    "都道府県": "prefecture",
    "市区町村": "city",
    "最寄り駅": "nearest_station",

    # Products and organisations
    "商品": "product",
    "サービス": "service",
    "ブランド": "brand",
    "会社": "company",
    "企業": "corporation",
    "組織": "organization",
    "団体": "group",
    "学校": "school",
    "大学": "university",
    "病院": "hospital",
    "店舗": "store",
    "店": "shop",

    # Sentiment
    "好き": "like",
    "嫌い": "dislike",
    "良い": "good",
    "悪い": "bad",
    "高い": "high",
    "低い": "low",
    "多い": "many",
    "少ない": "few",
    "大きい": "large",
    "小さい": "small",
    "新しい": "new",
    "古い": "old",
    "簡単": "easy",
    "難しい": "difficult",
    "便利": "convenient",
    "不便": "inconvenient",
    "安全": "safe",
    "危険": "dangerous",
    "快適": "comfortable",
    "不快": "uncomfortable",

    # Other
    "その他": "other",
    "不明": "unknown",
    "無回答": "no_answer",
    "特になし": "none",
    "すべて": "all",
    "一部": "partial",
    "完全": "complete",
    "未完了": "incomplete",
}

HIRAGANA_TO_ROMAJI: Dict[str, str] = {
    "あ": "a", "い": "i", "う": "u", "え": "e", "お": "o",
    "か": "ka", "き": "ki", "く": "ku", "け": "ke", "こ": "ko",
    "さ": "sa", "し": "shi", "す": "su", "せ": "se", "そ": "so",
    "た": "ta", "ち": "chi", "つ": "tsu", "て": "te", "と": "to",
    "な": "na", "に": "ni", "ぬ": "nu", "ね": "ne", "の": "no",
    "は": "ha", "ひ": "hi", "ふ": "fu", "へ": "he", "ほ": "ho",
    "ま": "ma", "み": "mi", "む": "mu", "め": "me", "も": "mo",
    "や": "ya", "ゆ": "yu", "よ": "yo",
    "ら": "ra", "り": "ri", "る": "ru", "れ": "re", "ろ": "ro",
    "わ": "wa", "を": "wo", "ん": "n",
}

_NON_JAPANESE_RE = re.compile("[^\u3040-\u309F\u30A0-\u30FF\u4E00-\u9FAF0-9A-Za-z_\\s]")
_NON_WORD_RE = re.compile(r"[^0-9A-Za-z_\s]")
_WHITESPACE_RE = re.compile(r"\s+")
_VALID_NAME_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


def translate_variable_name(name: str) -> str:
    """
    Translate a Japanese label into an English variable name.

    Strategy:
        1. Exact dictionary match
        2. First dictionary entry contained in the label is substituted,
           then punctuation is stripped, whitespace becomes "_", lower-cased
        3. Simplified romaji transliteration
    """
    if name in TRANSLATIONS:
        return TRANSLATIONS[name]

    for japanese, english in TRANSLATIONS.items():
        if japanese in name:
            translated = name.replace(japanese, english, 1)
            translated = _NON_WORD_RE.sub("", translated)
            translated = _WHITESPACE_RE.sub("_", translated)
            return translated.lower()

    return japanese_to_romaji(name)


def japanese_to_romaji(text: str) -> str:
    """Transliterate hiragana; katakana and kanji pass through unchanged."""
    result = _NON_JAPANESE_RE.sub("", text)
    result = _WHITESPACE_RE.sub("_", result).lower()
    for hiragana, romaji in HIRAGANA_TO_ROMAJI.items():
        result = result.replace(hiragana, romaji)
    return result


def is_valid_variable_name(name: str) -> bool:
    """ASCII letters, digits and underscores only, not starting with a digit."""
    return bool(_VALID_NAME_RE.match(name))


def normalize_variable_name(name: str) -> str:
    name = re.sub(r"[^a-zA-Z0-9_]", "_", name)
    name = re.sub(r"_+", "_", name)
    name = name.strip("_")
    return name.lower()
