# skypath/app.py (메인 애플리케이션)
import logging
from datetime import datetime
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge
from . import config, database, storage, commands
from .api_routes import api_bp
from .user_routes import user_bp
from .errors import ApiError

logger = logging.getLogger(__name__)


def configure_logging(level):
    """로깅 설정"""
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def check_jwt_secret(app):
    """기본 JWT 시크릿 사용 여부 확인 - 운영 환경에서는 실행 중단"""
    if app.config['JWT_SECRET'] != config.INSECURE_JWT_SECRET:
        return
    if app.config['APP_ENV'] == 'production':
        raise RuntimeError('JWT_SECRET must be set to a secure value in production')
    logger.warning("⚠️ JWT_SECRET 미설정 - 기본 시크릿 사용 중 (배포 설정 오류)")


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(e):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(e):
        return jsonify({'error': 'File too large'}), 413

    @app.errorhandler(404)
    def handle_not_found(e):
        return jsonify({'error': 'Route not found'}), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(e):
        return jsonify({'error': 'Method not allowed'}), 405

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({'error': e.description}), e.code

    @app.errorhandler(Exception)
    def handle_server_error(e):
        logger.exception(f"서버 오류: {e}")
        return jsonify({'error': 'Internal server error', 'details': str(e)}), 500


def create_app(test_config=None, db=None, s3=None):
    """앱 생성 - Firestore/S3 클라이언트는 주입하거나 설정으로 생성"""
    app = Flask(__name__)
    app.config.from_object(config)
    if test_config:
        app.config.update(test_config)

    configure_logging(app.config['LOG_LEVEL'])
    check_jwt_secret(app)

    app.extensions['firestore'] = db if db is not None else database.init_firestore(app.config)
    app.extensions['s3'] = s3 if s3 is not None else storage.create_s3_client(app.config)

    # Blueprint 등록
    app.register_blueprint(user_bp, url_prefix='/api')
    app.register_blueprint(api_bp, url_prefix='/api')

    commands.init_app(app)
    register_error_handlers(app)

    @app.after_request
    def after_request(response):
        """보안 헤더 + CORS"""
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['Access-Control-Allow-Origin'] = '*'
        response.headers['Access-Control-Allow-Methods'] = 'GET, POST, PUT, DELETE, OPTIONS'
        response.headers['Access-Control-Allow-Headers'] = 'Content-Type, Authorization'
        return response

    @app.route('/health', methods=['GET'])
    def health_check():
        """서비스 상태 확인"""
        try:
            database.ping()
            firestore_status = 'connected'
        except Exception as e:
            logger.warning(f"Firestore 연결 확인 실패: {e}")
            firestore_status = 'disconnected'

        try:
            storage.ping()
            s3_status = 'connected'
        except Exception as e:
            logger.warning(f"S3 연결 확인 실패: {e}")
            s3_status = 'disconnected'

        return jsonify({
            'status': 'OK',
            'timestamp': datetime.utcnow().isoformat(),
            'firestore': firestore_status,
            's3': s3_status,
            'version': app.config['API_VERSION']
        })

    app.logger.info("✅ 앱 초기화 완료")
    return app
