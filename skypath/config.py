# skypath/config.py

import os
from dotenv import load_dotenv

load_dotenv()

# 실행 환경
APP_ENV = os.environ.get('APP_ENV', 'development')
PORT = int(os.environ.get('PORT', 10000))
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
API_VERSION = '2.0.0'

# JWT 설정
INSECURE_JWT_SECRET = 'your-secret-key'
JWT_SECRET = os.environ.get('JWT_SECRET', INSECURE_JWT_SECRET)
JWT_ALGORITHM = 'HS256'
JWT_EXPIRES_DAYS = 7

# 관리자 계정 (create-admin 명령용)
ADMIN_EMAIL = os.environ.get('ADMIN_EMAIL', 'admin@skypath.com')
ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD', 'admin1234')

# Firebase 설정
FIREBASE_PROJECT_ID = os.environ.get('FIREBASE_PROJECT_ID', '')
FIREBASE_CREDS = {
    "type": os.environ.get("FIREBASE_TYPE", "service_account"),
    "project_id": FIREBASE_PROJECT_ID,
    "private_key_id": os.environ.get("FIREBASE_PRIVATE_KEY_ID", ""),
    "private_key": os.environ.get("FIREBASE_PRIVATE_KEY", "").replace('\\n', '\n'),
    "client_email": os.environ.get("FIREBASE_CLIENT_EMAIL", ""),
    "client_id": os.environ.get("FIREBASE_CLIENT_ID", ""),
    "auth_uri": os.environ.get("FIREBASE_AUTH_URI", "https://accounts.google.com/o/oauth2/auth"),
    "token_uri": os.environ.get("FIREBASE_TOKEN_URI", "https://oauth2.googleapis.com/token"),
}

# S3 설정
AWS_ACCESS_KEY_ID = os.environ.get('AWS_ACCESS_KEY_ID')
AWS_SECRET_ACCESS_KEY = os.environ.get('AWS_SECRET_ACCESS_KEY')
AWS_REGION = os.environ.get('AWS_REGION', 'ap-northeast-2')
S3_BUCKET_NAME = os.environ.get('S3_BUCKET_NAME', '')
S3_ENDPOINT_URL = os.environ.get('S3_ENDPOINT_URL') or None
PRESIGNED_URL_EXPIRES = 7 * 24 * 3600

# 업로드 설정
MAX_CONTENT_LENGTH = 5 * 1024 * 1024 * 1024  # 5GB
ALLOWED_IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.gif', '.webp'}
DEFAULT_THUMBNAIL = 'linear-gradient(135deg, #667eea 0%, #764ba2 100%)'

# 목록/검색 설정
DEFAULT_PAGE_SIZE = 50
SEARCH_RESULT_LIMIT = 20
RECOMMENDATION_LIMIT = 10
