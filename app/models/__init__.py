from app.models.audit_event import AuditEvent
from app.models.field import Field
from app.models.form import Form
from app.models.user import User

__all__ = ["AuditEvent", "Field", "Form", "User"]
