# barangay/delivery/api/designer.py
"""Layout editing operations for the template designer.

The client holds the layout being edited; each call applies one operation to
the posted layout and returns the result. Nothing is persisted here, saving is
a whole-document PUT on /documents/{id}.
"""
from typing import Any, Callable, List

from fastapi import APIRouter, Depends, HTTPException, status

from barangay.delivery.api.dependencies import current_session
from barangay.delivery.schemas.body import (
    AddFieldBody,
    DesignerBody,
    InjectPlaceholderBody,
    LayoutResponse,
    MoveFieldBody,
    PlaceholderOut,
    RemoveFieldBody,
    ResizeFieldBody,
    UpdateFieldBody,
)
from barangay.domain.errors import (
    DuplicateFieldError,
    FieldNotFoundError,
    InvalidFieldNameError,
    NotATextFieldError,
    UnknownAttributeError,
)
from barangay.domain.layout import LayoutEditor, starter_layout
from barangay.domain.substitution import PLACEHOLDER_CATALOG

router = APIRouter(prefix="/designer", tags=["designer"], dependencies=[Depends(current_session)])


def _apply(body: DesignerBody, operation: Callable[[LayoutEditor], Any]) -> LayoutResponse:
    editor = LayoutEditor(body.layout_settings)
    try:
        result = operation(editor)
    except FieldNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except DuplicateFieldError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except (InvalidFieldNameError, UnknownAttributeError, NotATextFieldError) as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    return LayoutResponse(layout_settings=editor.to_settings(), key=result if isinstance(result, str) else None)


@router.get("/placeholders", response_model=List[PlaceholderOut])
async def placeholders():
    return PLACEHOLDER_CATALOG


@router.get("/starter-layout", response_model=LayoutResponse)
async def get_starter_layout():
    return LayoutResponse(layout_settings=starter_layout().to_settings())


@router.post("/fields", response_model=LayoutResponse)
async def add_field(body: AddFieldBody):
    return _apply(body, lambda editor: editor.add_field(body.name))


@router.post("/fields/update", response_model=LayoutResponse)
async def update_field(body: UpdateFieldBody):
    return _apply(body, lambda editor: editor.update_field(body.key, body.attribute, body.value))


@router.post("/fields/move", response_model=LayoutResponse)
async def move_field(body: MoveFieldBody):
    return _apply(body, lambda editor: editor.move_field(body.key, body.x, body.y))


@router.post("/fields/resize", response_model=LayoutResponse)
async def resize_field(body: ResizeFieldBody):
    return _apply(body, lambda editor: editor.resize_field(body.key, body.width, body.height))


@router.post("/fields/inject", response_model=LayoutResponse)
async def inject_placeholder(body: InjectPlaceholderBody):
    return _apply(body, lambda editor: editor.inject_placeholder(body.key, body.token, body.offset))


@router.post("/fields/remove", response_model=LayoutResponse)
async def remove_field(body: RemoveFieldBody):
    return _apply(body, lambda editor: editor.remove_field(body.key))
