# skypath/__init__.py
"""
SKYPATH 교육 영상 플랫폼 백엔드

주요 모듈:
- app: Flask 앱 생성 (create_app)
- config: 설정 관리
- auth: JWT 발급/검증 및 권한 데코레이터
- database: Firestore 데이터베이스 연동
- storage: S3 파일 업로드
- schemas: 요청 검증
- scores: 과목 점수 / 약점 과목 규칙
- video_handler: 비디오 업로드 처리
- utils: 검색/페이지/추천 유틸리티
- api_routes: 영상/추천 API
- user_routes: 인증/사용자/성적 API
- commands: 관리자 계정 생성 명령
"""

__version__ = "2.0.0"
__description__ = "SKYPATH Educational Video Platform Backend"
