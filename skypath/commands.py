# skypath/commands.py
"""관리자 계정 생성 명령

사용법: flask --app skypath.app create-admin [--email EMAIL] [--password PASSWORD]
"""

import logging
import click
from flask.cli import with_appcontext
from flask import current_app
from .auth import hash_password
from .database import create_user, find_user_by_email, update_user, now_iso
from .scores import default_scores

logger = logging.getLogger(__name__)


def create_or_promote_admin(email, password, name='관리자'):
    """기존 계정이면 admin 으로 승격, 없으면 새로 생성. (user_id, 생성여부) 반환"""
    existing = find_user_by_email(email)
    if existing:
        update_user(existing['id'], {'role': 'admin'})
        logger.info(f"기존 계정을 관리자로 승격: {email}")
        return existing['id'], False

    user_id = create_user({
        'email': email,
        'password': hash_password(password),
        'name': name,
        'role': 'admin',
        'grade': 'admin',
        'school': None,
        'subscription': {'plan': 'free', 'startDate': None, 'endDate': None},
        'scores': default_scores(),
        'watchHistory': [],
        'createdAt': now_iso(),
        'lastLogin': None
    })
    logger.info(f"관리자 계정 생성: {email}")
    return user_id, True


@click.command('create-admin')
@click.option('--email', default=None, help='관리자 이메일 (기본값: ADMIN_EMAIL)')
@click.option('--password', default=None, help='관리자 비밀번호 (기본값: ADMIN_PASSWORD)')
@with_appcontext
def create_admin_command(email, password):
    """관리자 계정 생성 또는 승격"""
    email = email or current_app.config['ADMIN_EMAIL']
    password = password or current_app.config['ADMIN_PASSWORD']

    user_id, created = create_or_promote_admin(email, password)
    if created:
        click.echo(f"✅ 관리자 계정 생성 완료: {email} ({user_id})")
    else:
        click.echo(f"✅ 기존 계정을 관리자로 업그레이드했습니다: {email} (기존 비밀번호 사용)")


def init_app(app):
    app.cli.add_command(create_admin_command)
