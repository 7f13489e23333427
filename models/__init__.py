# models/__init__.py
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

# Import all models
from .user import User
from .employee import Employee
from .change_request import ChangeRequest, ChangeRequestStatus, ChangeRequestCategory
from .audit_log import AuditLog
