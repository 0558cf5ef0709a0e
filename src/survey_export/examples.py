"""
Example survey snapshot for demos and tests.

Builds a small customer survey covering every question kind, with a mix of
complete, partial and stale answers.
"""
from datetime import datetime, timedelta, timezone

from survey_export.model import (
    QuestionKind,
    QuestionSettings,
    QuestionSpec,
    ResponseRecord,
    SurveySnapshot,
)


def build_example_survey(response_count: int = 6) -> SurveySnapshot:
    survey = SurveySnapshot(id="survey-demo", title="顧客満足度調査")

    survey.questions = [
        QuestionSpec(id="q-name", title="名前", kind=QuestionKind.NAME, order=0),
        QuestionSpec(id="q-email", title="メールアドレス", kind=QuestionKind.EMAIL, order=1),
        QuestionSpec(id="q-age", title="年齢", kind=QuestionKind.AGE_GROUP, order=2),
        QuestionSpec(id="q-pref", title="都道府県", kind=QuestionKind.PREFECTURE, order=3),
        QuestionSpec(
            id="q-satisfaction",
            title="満足度",
            kind=QuestionKind.RADIO,
            options=["不満", "普通", "満足"],
            settings=QuestionSettings(ordinal_structure=True),
            order=4,
        ),
        QuestionSpec(
            id="q-channel",
            title="購入経路",
            kind=QuestionKind.SELECT,
            options=["店舗", "通販", "その他"],
            order=5,
        ),
        QuestionSpec(
            id="q-features",
            title="重視する点",
            kind=QuestionKind.CHECKBOX,
            options=["価格", "品質", "デザイン"],
            order=6,
        ),
        QuestionSpec(id="q-comment", title="意見", kind=QuestionKind.TEXTAREA, order=7),
    ]

    ages = ["20代", "30代", "", "40代", "unknown", "30代"]
    prefectures = ["東京都", "大阪府", "北海道", "", "福岡県", "沖縄県"]
    satisfaction = ["満足", "普通", "不満", "満足", "", "普通"]
    channels = ["店舗", "通販", "通販", "その他", "店舗", ""]
    features = ["価格,品質", "デザイン", "", "価格,品質,デザイン", "品質", "価格,割引"]
    comments = ["とても良い", "", "配送が遅い, 改善希望", 'He said "great"', "", "特になし"]

    start = datetime(2024, 4, 1, 0, 0, tzinfo=timezone.utc)
    responses = []
    for i in range(response_count):
        k = i % len(ages)
        answers = {
            "q-name": f"回答者{i + 1}",
            "q-email": f"user{i + 1}@example.com",
            "q-age": ages[k],
            "q-pref": prefectures[k],
            "q-satisfaction": satisfaction[k],
            "q-channel": channels[k],
            "q-features": features[k],
            "q-comment": comments[k],
        }
        if k == 5:
            # Left over from a question that was deleted after collection
            answers["q-deleted"] = "old value"
        responses.append(ResponseRecord(
            id=f"r{i + 1:03d}",
            created_at=start + timedelta(hours=7 * i, minutes=13, seconds=42),
            answers=answers,
        ))

    survey.responses = responses
    return survey
