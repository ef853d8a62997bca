# skypath/storage.py
import io
import logging
import boto3
from boto3.s3.transfer import TransferConfig
from flask import current_app

logger = logging.getLogger(__name__)

# 대용량 파일 지원을 위한 설정
s3_config = TransferConfig(
    multipart_threshold=1024 * 1024 * 100,
    multipart_chunksize=1024 * 1024 * 100,
    max_concurrency=10,
    use_threads=True
)


def create_s3_client(config):
    """S3 클라이언트 생성 (S3_ENDPOINT_URL 지정 시 S3 호환 스토리지)"""
    return boto3.client(
        's3',
        aws_access_key_id=config.get('AWS_ACCESS_KEY_ID'),
        aws_secret_access_key=config.get('AWS_SECRET_ACCESS_KEY'),
        region_name=config.get('AWS_REGION'),
        endpoint_url=config.get('S3_ENDPOINT_URL')
    )


def get_s3():
    return current_app.extensions['s3']


def object_url(key):
    """업로드된 객체의 저장 위치 URL"""
    bucket = current_app.config['S3_BUCKET_NAME']
    endpoint = current_app.config.get('S3_ENDPOINT_URL')
    if endpoint:
        return f"{endpoint.rstrip('/')}/{bucket}/{key}"
    region = current_app.config['AWS_REGION']
    return f"https://{bucket}.s3.{region}.amazonaws.com/{key}"


def upload_bytes(data, key, content_type=None):
    """메모리의 파일 내용을 S3에 업로드하고 위치 URL 반환"""
    extra_args = {'ContentType': content_type} if content_type else None
    get_s3().upload_fileobj(
        io.BytesIO(data),
        current_app.config['S3_BUCKET_NAME'],
        key,
        ExtraArgs=extra_args,
        Config=s3_config
    )
    return object_url(key)


def generate_presigned_url(key, expires_in=86400):
    """S3 객체에 대해 presigned URL 생성"""
    return get_s3().generate_presigned_url(
        ClientMethod='get_object',
        Params={'Bucket': current_app.config['S3_BUCKET_NAME'], 'Key': key},
        ExpiresIn=expires_in
    )


def ping():
    """버킷 접근 확인"""
    get_s3().head_bucket(Bucket=current_app.config['S3_BUCKET_NAME'])


def delete_object(key):
    """S3 객체 삭제"""
    get_s3().delete_object(Bucket=current_app.config['S3_BUCKET_NAME'], Key=key)
