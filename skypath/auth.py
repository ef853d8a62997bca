# skypath/auth.py
import jwt
import logging
from datetime import datetime, timedelta
from functools import wraps
from flask import request, jsonify, g, current_app
from werkzeug.security import generate_password_hash, check_password_hash

logger = logging.getLogger(__name__)

ADMIN_ROLES = ('admin', 'master')


def hash_password(password):
    """비밀번호 단방향 해시"""
    return generate_password_hash(password)


def verify_password(password, password_hash):
    """비밀번호 해시 비교"""
    if not password or not password_hash:
        return False
    return check_password_hash(password_hash, password)


def create_jwt(user_id, email, role):
    """사용자 JWT 토큰 생성 (userId, email, role 클레임)"""
    now = datetime.utcnow()
    payload = {
        'userId': user_id,
        'email': email,
        'role': role,
        'iat': now,
        'exp': now + timedelta(days=current_app.config['JWT_EXPIRES_DAYS'])
    }
    return jwt.encode(
        payload,
        current_app.config['JWT_SECRET'],
        algorithm=current_app.config['JWT_ALGORITHM']
    )


def verify_jwt_token(token):
    """JWT 토큰 검증 - 유효하면 클레임, 아니면 None"""
    try:
        return jwt.decode(
            token,
            current_app.config['JWT_SECRET'],
            algorithms=[current_app.config['JWT_ALGORITHM']]
        )
    except jwt.ExpiredSignatureError:
        logger.info("만료된 토큰")
        return None
    except jwt.InvalidTokenError as e:
        logger.info(f"유효하지 않은 토큰: {e}")
        return None


def get_bearer_token():
    """Authorization 헤더에서 Bearer 토큰 추출"""
    auth_header = request.headers.get('Authorization', None)
    if not auth_header or not auth_header.startswith('Bearer '):
        return None
    token = auth_header.split(' ', 1)[1].strip()
    return token or None


def is_admin(claims):
    return claims.get('role') in ADMIN_ROLES


def _authenticate():
    """토큰 확인 후 (claims, 오류 응답) 반환"""
    token = get_bearer_token()
    if not token:
        return None, (jsonify({'error': 'Access token required'}), 401)

    claims = verify_jwt_token(token)
    if claims is None:
        return None, (jsonify({'error': 'Invalid token'}), 403)

    return claims, None


def token_required(f):
    """사용자 인증 데코레이터"""
    @wraps(f)
    def decorated(*args, **kwargs):
        claims, error = _authenticate()
        if error:
            return error
        g.user = claims
        return f(*args, **kwargs)
    return decorated


def admin_required(f):
    """관리자(admin/master) 인증 데코레이터"""
    @wraps(f)
    def decorated(*args, **kwargs):
        claims, error = _authenticate()
        if error:
            return error
        if not is_admin(claims):
            return jsonify({'error': 'Admin access required'}), 403
        g.user = claims
        return f(*args, **kwargs)
    return decorated


def current_user_id():
    return g.user['userId']
