# skypath/api_routes.py
from flask import Blueprint, request, jsonify, current_app
from .auth import admin_required, token_required, current_user_id
from .database import get_video_document, increment_video_views, list_active_videos, get_user, update_user, upsert_progress
from .errors import ApiError, NotFoundError
from .schemas import parse_body, VideoListQuery, VideoSearchQuery, VideoUploadForm, ProgressRequest
from .storage import generate_presigned_url
from .utils import json_body, search_videos, sort_by_upload_date, paginate, get_recommendations
from .video_handler import process_video_upload
import logging

logger = logging.getLogger(__name__)

api_bp = Blueprint('api', __name__)


@api_bp.route('', methods=['GET'])
def api_index():
    """API 엔드포인트 안내"""
    return jsonify({
        'message': f"SKYPATH API v{current_app.config['API_VERSION']}",
        'endpoints': {
            'auth': {'register': 'POST /api/auth/register', 'login': 'POST /api/auth/login'},
            'videos': {
                'list': 'GET /api/videos',
                'search': 'GET /api/videos/search',
                'detail': 'GET /api/videos/:id',
                'upload': 'POST /api/videos/upload (admin)',
                'progress': 'PUT /api/videos/:id/progress'
            },
            'user': {
                'profile': 'GET /api/users/me',
                'updateProfile': 'PUT /api/users/profile',
                'updatePassword': 'PUT /api/users/password',
                'updateScores': 'PUT /api/users/scores',
                'watchHistory': 'GET /api/users/watch-history'
            },
            'scoreHistory': {
                'add': 'POST /api/users/score-history',
                'list': 'GET /api/users/score-history',
                'delete': 'DELETE /api/users/score-history/:id'
            },
            'learning': {'recommendations': 'GET /api/recommendations'}
        }
    })


# ----------------------------------------------------------------
# 영상
# ----------------------------------------------------------------

@api_bp.route('/videos', methods=['GET'])
def list_videos():
    """영상 목록 조회 (active만, 최신 업로드 순)"""
    params = parse_body(VideoListQuery, request.args.to_dict())

    try:
        videos = list_active_videos({
            'grade': params.grade,
            'subject': params.subject,
            'provider': params.provider
        })
        videos = sort_by_upload_date(search_videos(videos, params.search))
        page_items, pagination = paginate(videos, params.page, params.limit)
        return jsonify({'videos': page_items, 'pagination': pagination})
    except Exception as e:
        logger.error(f"영상 목록 조회 실패: {e}")
        return jsonify({'error': 'Failed to fetch videos', 'details': str(e)}), 500


@api_bp.route('/videos/search', methods=['GET'])
def search():
    """영상 검색"""
    params = parse_body(VideoSearchQuery, request.args.to_dict())

    try:
        videos = list_active_videos({'grade': params.grade, 'subject': params.subject})
        results = search_videos(videos, params.query)[:current_app.config['SEARCH_RESULT_LIMIT']]
        return jsonify({'query': params.query, 'results': results, 'count': len(results)})
    except Exception as e:
        logger.error(f"검색 실패: {e}")
        return jsonify({'error': 'Search failed', 'details': str(e)}), 500


@api_bp.route('/videos/<video_id>', methods=['GET'])
def get_video_detail(video_id):
    """영상 상세 조회 - 조회할 때마다 조회수 증가"""
    try:
        video = increment_video_views(video_id)
        if not video:
            return jsonify({'error': 'Video not found'}), 404

        video['streamUrl'] = None
        if video.get('videoKey'):
            try:
                video['streamUrl'] = generate_presigned_url(
                    video['videoKey'],
                    expires_in=current_app.config['PRESIGNED_URL_EXPIRES']
                )
            except Exception as e:
                logger.warning(f"Presigned URL 생성 실패 ({video_id}): {e}")

        return jsonify(video)
    except Exception as e:
        logger.error(f"영상 조회 실패 ({video_id}): {e}")
        return jsonify({'error': 'Failed to fetch video', 'details': str(e)}), 500


@api_bp.route('/videos/upload', methods=['POST'])
@admin_required
def upload_video():
    """영상 업로드 (admin/master)"""
    file = request.files.get('video')
    if not file or not file.filename:
        return jsonify({'error': 'Video file required'}), 400

    form = parse_body(VideoUploadForm, request.form.to_dict())

    try:
        video = process_video_upload(
            file, form, current_user_id(),
            thumbnail_file=request.files.get('thumbnail')
        )
        return jsonify({'message': 'Video uploaded successfully', 'video': video}), 201
    except ApiError:
        raise
    except Exception as e:
        logger.error(f"영상 업로드 실패: {e}")
        return jsonify({'error': 'Failed to upload video', 'details': str(e)}), 500


@api_bp.route('/videos/<video_id>/progress', methods=['PUT'])
@token_required
def update_progress(video_id):
    """시청 진도 저장"""
    body = parse_body(ProgressRequest, json_body())

    try:
        if not get_video_document(video_id):
            raise NotFoundError('Video not found')

        user_id = current_user_id()
        user = get_user(user_id)
        if not user:
            raise NotFoundError('User not found')

        record = upsert_progress(user_id, video_id, body.progress, body.completed)

        history = [h for h in user.get('watchHistory') or [] if h.get('videoId') != video_id]
        history.append({
            'videoId': video_id,
            'watchedAt': record['lastWatchedAt'],
            'progress': body.progress,
            'completed': body.completed
        })
        update_user(user_id, {'watchHistory': history})

        return jsonify({'message': 'Progress saved successfully', 'progress': record})
    except ApiError:
        raise
    except Exception as e:
        logger.error(f"시청 진도 저장 실패 ({video_id}): {e}")
        return jsonify({'error': 'Failed to save progress', 'details': str(e)}), 500


# ----------------------------------------------------------------
# 추천
# ----------------------------------------------------------------

@api_bp.route('/recommendations', methods=['GET'])
@token_required
def recommendations():
    """약점 과목 기반 추천"""
    try:
        user = get_user(current_user_id())
        if not user:
            return jsonify({'error': 'User not found'}), 404

        weak, videos = get_recommendations(user)
        return jsonify({'weakSubjects': weak, 'recommendations': videos})
    except Exception as e:
        logger.error(f"추천 조회 실패: {e}")
        return jsonify({'error': 'Failed to fetch recommendations', 'details': str(e)}), 500
