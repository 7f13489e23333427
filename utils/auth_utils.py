import datetime

import jwt
from flask import current_app

def generate_token(user):
    hours = current_app.config.get('JWT_EXPIRY_HOURS', 24)
    payload = {
        "user_id": user.id,
        "email": user.email,
        "role": user.role,
        "employee_id": user.employee_id,
        "exp": datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(hours=hours)
    }
    return jwt.encode(payload, current_app.config['SECRET_KEY'], algorithm="HS256")
