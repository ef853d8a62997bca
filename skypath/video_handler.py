# skypath/video_handler.py
import re
import time
import tempfile
import logging
from pathlib import Path
from flask import current_app
from moviepy.video.io.VideoFileClip import VideoFileClip
from .storage import upload_bytes, delete_object
from .database import create_video_document, now_iso

logger = logging.getLogger(__name__)


def get_video_duration(data, filename):
    """비디오 길이 가져오기 (형식 무관)"""
    ext = Path(filename or '').suffix.lower() or '.mp4'
    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile(suffix=ext, delete=False) as tmp_file:
            tmp_file.write(data)
            tmp_path = Path(tmp_file.name)

        with VideoFileClip(str(tmp_path)) as clip:
            duration_sec = int(clip.duration)
            minutes = duration_sec // 60
            seconds = duration_sec % 60
            return f"{minutes}:{seconds:02d}"
    except Exception as e:
        logger.warning(f"비디오 길이 가져오기 실패: {e}")
        return "0:00"
    finally:
        if tmp_path:
            tmp_path.unlink(missing_ok=True)


def is_allowed_file(filename, allowed_extensions):
    """파일 확장자 확인"""
    return Path(filename).suffix.lower() in allowed_extensions


def storage_key(prefix, filename, timestamp):
    """업로드 시각 + 원본 파일명 기반 객체 키"""
    safe_name = re.sub(r'[\\/]', '_', filename)
    return f"{prefix}/{timestamp}-{safe_name}"


def upload_thumbnail(thumbnail_file, timestamp):
    """썸네일 이미지 업로드 - (URL, 객체 키) 반환, 실패 시 (None, None)"""
    if not thumbnail_file or not thumbnail_file.filename:
        return None, None
    if not is_allowed_file(thumbnail_file.filename, current_app.config['ALLOWED_IMAGE_EXTENSIONS']):
        logger.warning(f"지원하지 않는 썸네일 형식: {thumbnail_file.filename}")
        return None, None

    try:
        key = storage_key('thumbnails', thumbnail_file.filename, timestamp)
        url = upload_bytes(thumbnail_file.read(), key, thumbnail_file.mimetype)
        logger.info(f"썸네일 업로드 완료: {key}")
        return url, key
    except Exception as e:
        logger.error(f"썸네일 처리 실패: {e}")
        return None, None


def remove_uploaded_objects(keys):
    """메타데이터 저장 실패 시 업로드된 객체 정리"""
    for key in filter(None, keys):
        try:
            delete_object(key)
            logger.info(f"업로드 객체 삭제: {key}")
        except Exception as e:
            logger.error(f"업로드 객체 삭제 실패 (수동 정리 필요): {key} - {e}")


def process_video_upload(file, form, uploader_id, thumbnail_file=None):
    """비디오 업로드 처리 - 파일을 메모리로 읽어 S3에 올린 뒤 메타데이터 저장"""
    timestamp = int(time.time() * 1000)
    data = file.read()
    original_name = file.filename
    video_key = storage_key('videos', original_name, timestamp)

    duration = form.duration
    if not duration:
        duration = get_video_duration(data, original_name)
        logger.info(f"비디오 길이 측정: {duration}")

    video_url = upload_bytes(data, video_key, file.mimetype)
    logger.info(f"S3 업로드 완료: {video_key} ({len(data) / 1024 / 1024:.1f}MB)")

    thumbnail_url, thumbnail_key = upload_thumbnail(thumbnail_file, timestamp)
    thumbnail = thumbnail_url \
        or form.thumbnail \
        or current_app.config['DEFAULT_THUMBNAIL']

    video_data = {
        'title': form.title,
        'instructor': form.instructor,
        'duration': duration,
        'provider': form.provider,
        'grade': form.grade,
        'subject': form.subject,
        'description': form.description or '',
        'thumbnail': thumbnail,
        'videoUrl': video_url,
        'videoKey': video_key,
        'fileName': original_name,
        'fileSize': len(data),
        'views': 0,
        'likes': 0,
        'uploadedBy': uploader_id,
        'uploadDate': now_iso(),
        'status': 'active',
        'tags': form.tag_list()
    }

    try:
        video = create_video_document(video_data)
    except Exception:
        remove_uploaded_objects([video_key, thumbnail_key])
        raise

    logger.info(f"✅ 비디오 업로드 완료: {video['id']}")
    return video
