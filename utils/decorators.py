import logging
from functools import wraps

import jwt
from flask import request, g, current_app

from models import db
from models.user import User
from utils.authorization import require_authenticated, require_role
from utils.errors import Unauthenticated

logger = logging.getLogger(__name__)

def _bearer_token():
    auth_header = request.headers.get('Authorization', '')
    if not auth_header.startswith('Bearer '):
        return None
    token = auth_header.split(' ', 1)[1].strip()
    if not token or token.lower() in ('null', 'undefined'):
        return None
    return token

def token_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        token = _bearer_token()
        if not token:
            raise Unauthenticated("Token is missing")

        try:
            data = jwt.decode(token, current_app.config['SECRET_KEY'], algorithms=["HS256"])
        except jwt.ExpiredSignatureError:
            raise Unauthenticated("Token expired")
        except jwt.InvalidTokenError as e:
            logger.info("Auth failed: %s", e)
            raise Unauthenticated("Token is invalid")

        user_id = data.get('user_id')
        user = db.session.get(User, int(user_id)) if str(user_id or '').isdigit() else None
        if not user or not user.is_active:
            raise Unauthenticated("User not found or inactive")

        g.user = require_authenticated(user)
        return f(*args, **kwargs)
    return decorated

def role_required(allowed_roles):
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            require_role(g.get('user'), allowed_roles)
            return f(*args, **kwargs)
        return decorated_function
    return decorator
