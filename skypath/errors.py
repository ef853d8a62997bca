# skypath/errors.py
"""API 오류 타입 - 각 오류는 HTTP 상태 코드를 가진다"""


class ApiError(Exception):
    status_code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'error': self.message}


class ValidationError(ApiError):
    status_code = 400


class ConflictError(ApiError):
    # 중복 이메일, 중복 성적 기간
    status_code = 400


class NotFoundError(ApiError):
    status_code = 404
