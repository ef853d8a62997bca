# skypath/database.py

import re
import uuid
import logging
from datetime import datetime

import firebase_admin
from firebase_admin import credentials, firestore
from google.api_core.exceptions import AlreadyExists, NotFound
from flask import current_app

from .errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

USERS = 'users'
USER_EMAILS = 'user_emails'
VIDEOS = 'videos'
SCORE_HISTORY = 'score_history'
PROGRESS = 'progress'

# Firestore 예약 문서 ID
RESERVED_ID_PATTERN = re.compile(r'__.*__')


def init_firestore(config):
    """Firebase Admin SDK 초기화 후 Firestore 클라이언트 반환"""
    if not firebase_admin._apps:
        creds = config.get('FIREBASE_CREDS') or {}
        if creds.get('private_key'):
            cred = credentials.Certificate(creds)
        else:
            cred = credentials.ApplicationDefault()

        options = {}
        if config.get('FIREBASE_PROJECT_ID'):
            options['projectId'] = config['FIREBASE_PROJECT_ID']
        firebase_admin.initialize_app(cred, options or None)
        logger.info(f"✅ Firebase 초기화 완료 - Project: {config.get('FIREBASE_PROJECT_ID') or 'default'}")

    return firestore.client()


def is_valid_document_id(doc_id):
    """Firestore 문서 ID로 쓸 수 있는 값인지 확인 ('/' 포함, 빈 값, '.', '..', '__...__' 불가)"""
    if not doc_id or '/' in doc_id or doc_id in ('.', '..'):
        return False
    return not RESERVED_ID_PATTERN.fullmatch(doc_id)


def get_db():
    return current_app.extensions['firestore']


def now_iso():
    return datetime.utcnow().isoformat()


def snapshot_to_dict(snapshot):
    """문서 스냅샷을 id 포함 dict로 변환"""
    data = snapshot.to_dict() or {}
    data['id'] = snapshot.id
    return data


def ping():
    """Firestore 연결 확인"""
    get_db().collection(USERS).limit(1).get()


# ----------------------------------------------------------------
# 사용자
# ----------------------------------------------------------------

def create_user(user_data):
    """사용자 생성 - 이메일 예약 문서로 중복 방지"""
    if not is_valid_document_id(user_data['email']):
        raise ValidationError('Invalid email format')

    db = get_db()
    user_id = uuid.uuid4().hex
    email_ref = db.collection(USER_EMAILS).document(user_data['email'])

    try:
        email_ref.create({'userId': user_id, 'createdAt': now_iso()})
    except AlreadyExists:
        raise ConflictError('Email already exists')

    try:
        db.collection(USERS).document(user_id).set(user_data)
    except Exception:
        email_ref.delete()
        raise

    return user_id


def find_user_by_email(email):
    """이메일로 사용자 조회"""
    if not is_valid_document_id(email):
        return None
    db = get_db()
    email_doc = db.collection(USER_EMAILS).document(email).get()
    if not email_doc.exists:
        return None
    return get_user(email_doc.to_dict().get('userId'))


def get_user(user_id):
    """사용자 문서 조회"""
    if not user_id:
        return None
    doc = get_db().collection(USERS).document(user_id).get()
    return snapshot_to_dict(doc) if doc.exists else None


def update_user(user_id, data):
    """사용자 문서 업데이트"""
    try:
        get_db().collection(USERS).document(user_id).update(data)
    except NotFound:
        raise NotFoundError('User not found')


# ----------------------------------------------------------------
# 영상
# ----------------------------------------------------------------

def create_video_document(video_data):
    """영상 문서 생성"""
    video_id = uuid.uuid4().hex
    get_db().collection(VIDEOS).document(video_id).set(video_data)
    return dict(video_data, id=video_id)


def get_video_document(video_id):
    """영상 문서 조회"""
    doc = get_db().collection(VIDEOS).document(video_id).get()
    return snapshot_to_dict(doc) if doc.exists else None


def increment_video_views(video_id):
    """조회수 1 증가 (원자적 업데이트) 후 문서 반환"""
    ref = get_db().collection(VIDEOS).document(video_id)
    try:
        ref.update({'views': firestore.Increment(1)})
    except NotFound:
        return None
    doc = ref.get()
    return snapshot_to_dict(doc) if doc.exists else None


def list_active_videos(filters=None):
    """active 상태 영상 조회 (동일값 필터만 적용)"""
    query = get_db().collection(VIDEOS).where('status', '==', 'active')
    for field, value in (filters or {}).items():
        if value:
            query = query.where(field, '==', value)
    return [snapshot_to_dict(doc) for doc in query.stream()]


def find_videos_by_subjects(subjects, grade, limit):
    """과목 목록 + 학년으로 active 영상 조회"""
    if not subjects:
        return []
    query = get_db().collection(VIDEOS) \
        .where('status', '==', 'active') \
        .where('grade', '==', grade) \
        .where('subject', 'in', list(subjects)) \
        .limit(limit)
    return [snapshot_to_dict(doc) for doc in query.stream()]


# ----------------------------------------------------------------
# 성적 기록
# ----------------------------------------------------------------

def score_history_id(user_id, date):
    return f"{user_id}_{date}"


def create_score_history(user_id, entry):
    """성적 기록 생성 - (사용자, 기간) 당 하나"""
    entry_id = score_history_id(user_id, entry['date'])
    data = dict(entry, userId=user_id, createdAt=now_iso())
    try:
        get_db().collection(SCORE_HISTORY).document(entry_id).create(data)
    except AlreadyExists:
        raise ConflictError('Score for this date already exists')
    return dict(data, id=entry_id)


def list_score_history(user_id):
    """사용자 성적 기록 조회 (기간 오름차순)"""
    docs = get_db().collection(SCORE_HISTORY).where('userId', '==', user_id).stream()
    entries = [snapshot_to_dict(doc) for doc in docs]
    return sorted(entries, key=lambda e: e.get('date', ''))


def delete_score_history(user_id, entry_id):
    """본인 성적 기록 삭제 - 타인 기록은 없는 것으로 처리"""
    ref = get_db().collection(SCORE_HISTORY).document(entry_id)
    doc = ref.get()
    if not doc.exists or (doc.to_dict() or {}).get('userId') != user_id:
        raise NotFoundError('Score history not found')
    ref.delete()
    return snapshot_to_dict(doc)


# ----------------------------------------------------------------
# 시청 진도
# ----------------------------------------------------------------

def upsert_progress(user_id, video_id, progress, completed):
    """시청 진도 저장"""
    data = {
        'userId': user_id,
        'videoId': video_id,
        'progress': progress,
        'completed': completed,
        'lastWatchedAt': now_iso()
    }
    get_db().collection(PROGRESS).document(f"{user_id}_{video_id}").set(data, merge=True)
    return data


def list_progress(user_id):
    """사용자 시청 진도 조회 (최근 시청 순)"""
    docs = get_db().collection(PROGRESS).where('userId', '==', user_id).stream()
    records = [snapshot_to_dict(doc) for doc in docs]
    return sorted(records, key=lambda r: r.get('lastWatchedAt', ''), reverse=True)
