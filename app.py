# app.py - 실행 진입점 (gunicorn app:app)
import os
from skypath.app import create_app

app = create_app()

if __name__ == "__main__":
    port = app.config['PORT']

    app.logger.info(f"🚀 SKYPATH API 서버 시작 (port {port})")

    if os.environ.get('RAILWAY_ENVIRONMENT') or app.config['APP_ENV'] == 'production':
        app.run(host="0.0.0.0", port=port, debug=False)
    else:
        app.run(host="0.0.0.0", port=port, debug=True)
