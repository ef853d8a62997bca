# skypath/utils.py

import math
import logging
from flask import current_app, request
from .database import find_videos_by_subjects
from .scores import weak_subjects

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ('title', 'instructor', 'description')


def json_body():
    """요청 JSON 본문 (본문이 없으면 빈 dict)"""
    data = request.get_json(silent=True)
    return {} if data is None else data


def public_user(user, *fields):
    """비밀번호를 제외한 사용자 정보"""
    data = {k: v for k, v in user.items() if k != 'password'}
    if fields:
        data = {k: data.get(k) for k in ('id',) + fields}
    return data


def matches_search(video, term):
    """제목/강사/설명 대소문자 무시 부분 일치"""
    term = term.lower()
    return any(term in (video.get(field) or '').lower() for field in SEARCH_FIELDS)


def search_videos(videos, term):
    if not term:
        return list(videos)
    return [video for video in videos if matches_search(video, term)]


def sort_by_upload_date(videos):
    """업로드일 최신순"""
    return sorted(videos, key=lambda v: v.get('uploadDate') or '', reverse=True)


def paginate(items, page, limit):
    """페이지 슬라이스와 페이지 정보 반환"""
    total = len(items)
    start = (page - 1) * limit
    return items[start:start + limit], {
        'total': total,
        'page': page,
        'limit': limit,
        'pages': math.ceil(total / limit)
    }


def get_recommendations(user):
    """약점 과목 + 학년 기준 추천 영상"""
    weak = weak_subjects(user.get('scores'))
    videos = find_videos_by_subjects(
        weak,
        user.get('grade'),
        current_app.config['RECOMMENDATION_LIMIT']
    )
    logger.info(f"추천 영상 조회: user={user.get('id')} weak={weak} count={len(videos)}")
    return weak, videos
