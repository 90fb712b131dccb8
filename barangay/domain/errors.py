# barangay/domain/errors.py


class NotFoundError(LookupError):
    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class LayoutError(Exception):
    """Base class for rejected layout edits."""


class FieldNotFoundError(LayoutError, KeyError):
    def __init__(self, key: str):
        super().__init__(key)
        self.key = key

    def __str__(self):
        return f"Field '{self.key}' does not exist in this layout"


class DuplicateFieldError(LayoutError):
    def __init__(self, key: str):
        super().__init__(f"Field '{key}' already exists in this layout")
        self.key = key


class InvalidFieldNameError(LayoutError, ValueError):
    pass


class UnknownAttributeError(LayoutError, ValueError):
    pass


class NotATextFieldError(LayoutError, ValueError):
    def __init__(self, key: str):
        super().__init__(f"Field '{key}' holds an image, placeholders only go into text fields")
        self.key = key


class SessionError(Exception):
    pass


class InvalidSessionError(SessionError):
    pass


class SessionExpiredError(SessionError):
    pass
