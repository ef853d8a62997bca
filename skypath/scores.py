# skypath/scores.py

SUBJECT_FIELDS = ('korean', 'math', 'english', 'science')

# 카탈로그의 subject 값
SUBJECT_LABELS = {
    'korean': '국어',
    'math': '수학',
    'english': '영어',
    'science': '과학'
}

WEAK_THRESHOLD = 80


def default_scores():
    return {field: 0 for field in SUBJECT_FIELDS}


def extract_scores(entry):
    """성적 기록에서 네 과목 점수만 추출"""
    return {field: entry.get(field, 0) for field in SUBJECT_FIELDS}


def latest_scores(entries):
    """가장 최근 기간의 점수 (기록이 없으면 None)"""
    if not entries:
        return None
    latest = max(entries, key=lambda e: e.get('date', ''))
    return extract_scores(latest)


def weak_subjects(scores):
    """점수가 기준 미만인 과목의 카탈로그 subject 목록"""
    scores = scores or {}
    return [
        SUBJECT_LABELS[field]
        for field in SUBJECT_FIELDS
        if (scores.get(field) or 0) < WEAK_THRESHOLD
    ]
