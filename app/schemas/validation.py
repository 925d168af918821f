from pydantic import BaseModel


class ValidationError(BaseModel):
    """Individual validation error"""
    field: str
    message: str


class ValidationPreviewResponse(BaseModel):
    """Response from the field dry-run endpoint"""
    valid: bool
    errors: list[ValidationError]
