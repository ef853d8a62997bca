# skypath/user_routes.py
from flask import Blueprint, jsonify
from .auth import token_required, current_user_id, hash_password, verify_password, create_jwt
from .database import (
    create_user, find_user_by_email, get_user, update_user, now_iso,
    create_score_history, list_score_history, delete_score_history, list_progress
)
from .errors import ApiError, NotFoundError
from .schemas import (
    parse_body, RegisterRequest, LoginRequest, ProfileUpdateRequest,
    PasswordChangeRequest, ScoresRequest, ScoreHistoryRequest
)
from .scores import default_scores, latest_scores
from .utils import json_body, public_user
import logging

logger = logging.getLogger(__name__)

user_bp = Blueprint('users', __name__)

LOGIN_USER_FIELDS = ('email', 'name', 'role', 'grade', 'school', 'subscription')


def _require_user(user_id):
    user = get_user(user_id)
    if not user:
        raise NotFoundError('User not found')
    return user


# ----------------------------------------------------------------
# 인증
# ----------------------------------------------------------------

@user_bp.route('/auth/register', methods=['POST'])
def register():
    """회원가입"""
    body = parse_body(RegisterRequest, json_body())

    try:
        user_data = {
            'email': body.email,
            'password': hash_password(body.password),
            'name': body.name,
            'role': 'student',
            'grade': body.grade,
            'school': body.school,
            'subscription': {'plan': 'free', 'startDate': None, 'endDate': None},
            'scores': default_scores(),
            'watchHistory': [],
            'createdAt': now_iso(),
            'lastLogin': None
        }
        user_id = create_user(user_data)
        token = create_jwt(user_id, body.email, 'student')
        logger.info(f"✅ 회원가입 완료: {user_id}")

        user = dict(user_data, id=user_id)
        return jsonify({
            'message': 'User registered successfully',
            'token': token,
            'user': public_user(user, 'email', 'name', 'role', 'grade', 'school')
        }), 201

    except ApiError:
        raise
    except Exception as e:
        logger.error(f"회원가입 실패: {e}")
        return jsonify({'error': 'Registration failed', 'details': str(e)}), 500


@user_bp.route('/auth/login', methods=['POST'])
def login():
    """로그인 - 없는 이메일과 틀린 비밀번호는 같은 응답"""
    body = parse_body(LoginRequest, json_body())

    try:
        user = find_user_by_email(body.email)
        if not user or not verify_password(body.password, user.get('password')):
            return jsonify({'error': 'Invalid credentials'}), 401

        user['lastLogin'] = now_iso()
        update_user(user['id'], {'lastLogin': user['lastLogin']})
        token = create_jwt(user['id'], user['email'], user.get('role', 'student'))

        return jsonify({
            'message': 'Login successful',
            'token': token,
            'user': public_user(user, *LOGIN_USER_FIELDS)
        })

    except ApiError:
        raise
    except Exception as e:
        logger.error(f"로그인 오류: {e}")
        return jsonify({'error': 'Login failed', 'details': str(e)}), 500


# ----------------------------------------------------------------
# 내 정보
# ----------------------------------------------------------------

@user_bp.route('/users/me', methods=['GET'])
@token_required
def get_me():
    """내 정보 조회"""
    try:
        return jsonify(public_user(_require_user(current_user_id())))
    except ApiError:
        raise
    except Exception as e:
        logger.error(f"사용자 조회 실패: {e}")
        return jsonify({'error': 'Failed to fetch user', 'details': str(e)}), 500


@user_bp.route('/users/profile', methods=['PUT'])
@token_required
def update_profile():
    """프로필 업데이트 (전달된 항목만)"""
    body = parse_body(ProfileUpdateRequest, json_body())

    try:
        user_id = current_user_id()
        changes = body.model_dump(exclude_none=True)
        if changes:
            update_user(user_id, changes)
        return jsonify({
            'message': 'Profile updated successfully',
            'user': public_user(_require_user(user_id))
        })
    except ApiError:
        raise
    except Exception as e:
        logger.error(f"프로필 업데이트 실패: {e}")
        return jsonify({'error': 'Failed to update profile', 'details': str(e)}), 500


@user_bp.route('/users/password', methods=['PUT'])
@token_required
def change_password():
    """비밀번호 변경"""
    body = parse_body(PasswordChangeRequest, json_body())

    try:
        user = _require_user(current_user_id())
        if not verify_password(body.currentPassword, user.get('password')):
            return jsonify({'error': 'Current password is incorrect'}), 401

        update_user(user['id'], {'password': hash_password(body.newPassword)})
        logger.info(f"비밀번호 변경: {user['id']}")
        return jsonify({'message': 'Password changed successfully'})
    except ApiError:
        raise
    except Exception as e:
        logger.error(f"비밀번호 변경 실패: {e}")
        return jsonify({'error': 'Failed to change password', 'details': str(e)}), 500


@user_bp.route('/users/scores', methods=['PUT'])
@token_required
def update_scores():
    """현재 성적 업데이트"""
    body = parse_body(ScoresRequest, json_body())

    try:
        user_id = current_user_id()
        update_user(user_id, {'scores': body.scores()})
        return jsonify({
            'message': 'Scores updated successfully',
            'user': public_user(_require_user(user_id))
        })
    except ApiError:
        raise
    except Exception as e:
        logger.error(f"성적 업데이트 실패: {e}")
        return jsonify({'error': 'Failed to update scores', 'details': str(e)}), 500


# ----------------------------------------------------------------
# 모의고사 성적 기록
# ----------------------------------------------------------------

@user_bp.route('/users/score-history', methods=['POST'])
@token_required
def add_score_history():
    """모의고사 성적 추가 - 같은 기간은 덮어쓰지 않고 거부"""
    body = parse_body(ScoreHistoryRequest, json_body())

    try:
        user_id = current_user_id()
        entry = create_score_history(user_id, dict(body.scores(), date=body.date))

        # 최신 기간이면 현재 성적에 반영
        entries = list_score_history(user_id)
        if entries and entries[-1]['date'] == entry['date']:
            update_user(user_id, {'scores': body.scores()})

        logger.info(f"성적 기록 추가: {entry['id']}")
        return jsonify({
            'message': 'Score history added successfully',
            'scoreHistory': entry
        }), 201
    except ApiError:
        raise
    except Exception as e:
        logger.error(f"성적 기록 추가 실패: {e}")
        return jsonify({'error': 'Failed to add score history', 'details': str(e)}), 500


@user_bp.route('/users/score-history', methods=['GET'])
@token_required
def get_score_history():
    """모의고사 성적 조회"""
    try:
        entries = list_score_history(current_user_id())
        return jsonify({'scoreHistory': entries, 'count': len(entries)})
    except Exception as e:
        logger.error(f"성적 기록 조회 실패: {e}")
        return jsonify({'error': 'Failed to fetch score history', 'details': str(e)}), 500


@user_bp.route('/users/score-history/<entry_id>', methods=['DELETE'])
@token_required
def remove_score_history(entry_id):
    """모의고사 성적 삭제"""
    try:
        user_id = current_user_id()
        deleted = delete_score_history(user_id, entry_id)

        # 최신 기록을 지웠다면 남은 기록 중 최신으로 현재 성적 재계산
        remaining = list_score_history(user_id)
        if remaining and remaining[-1]['date'] < deleted.get('date', ''):
            update_user(user_id, {'scores': latest_scores(remaining)})

        logger.info(f"성적 기록 삭제: {entry_id}")
        return jsonify({'message': 'Score history deleted successfully'})
    except ApiError:
        raise
    except Exception as e:
        logger.error(f"성적 기록 삭제 실패: {e}")
        return jsonify({'error': 'Failed to delete score history', 'details': str(e)}), 500


@user_bp.route('/users/watch-history', methods=['GET'])
@token_required
def get_watch_history():
    """시청 기록 조회"""
    try:
        records = list_progress(current_user_id())
        return jsonify({'watchHistory': records, 'count': len(records)})
    except Exception as e:
        logger.error(f"시청 기록 조회 실패: {e}")
        return jsonify({'error': 'Failed to fetch watch history', 'details': str(e)}), 500
