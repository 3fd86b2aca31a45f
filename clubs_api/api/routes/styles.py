from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from clubs_api.core.deps import verify_csrf_token
from clubs_api.db.session import get_async_session
from clubs_api.schemas.reference import StyleCreate, StyleRead, StyleUpdate
from clubs_api.services.styles import StyleService

router = APIRouter(prefix="/styles", tags=["Styles"])


# PUBLIC_INTERFACE
@router.get("", response_model=List[StyleRead], summary="List styles")
async def list_styles(
    session: AsyncSession = Depends(get_async_session),
) -> List[StyleRead]:
    styles = await StyleService(session).list()
    return [StyleRead.model_validate(s) for s in styles]


# PUBLIC_INTERFACE
@router.get("/{style_name}", response_model=StyleRead, summary="Get style")
async def get_style(
    style_name: str = Path(...),
    session: AsyncSession = Depends(get_async_session),
) -> StyleRead:
    style = await StyleService(session).get(style_name)
    return StyleRead.model_validate(style)


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=StyleRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create style",
    dependencies=[Depends(verify_csrf_token)],
)
async def create_style(
    payload: StyleCreate,
    session: AsyncSession = Depends(get_async_session),
) -> StyleRead:
    created = await StyleService(session).create(payload)
    return StyleRead.model_validate(created)


# PUBLIC_INTERFACE
@router.put(
    "/{style_name}",
    response_model=StyleRead,
    summary="Update style",
    description="Update a style in place. The name in the path must match the payload.",
    dependencies=[Depends(verify_csrf_token)],
)
async def update_style(
    payload: StyleUpdate,
    style_name: str = Path(...),
    session: AsyncSession = Depends(get_async_session),
) -> StyleRead:
    updated = await StyleService(session).update(style_name, payload)
    return StyleRead.model_validate(updated)


# PUBLIC_INTERFACE
@router.get("/{style_name}/delete", response_model=StyleRead, summary="Confirm style deletion")
async def confirm_delete_style(
    style_name: str = Path(...),
    session: AsyncSession = Depends(get_async_session),
) -> StyleRead:
    style = await StyleService(session).confirm_delete(style_name)
    return StyleRead.model_validate(style)


# PUBLIC_INTERFACE
@router.delete(
    "/{style_name}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete style",
    dependencies=[Depends(verify_csrf_token)],
)
async def delete_style(
    style_name: str = Path(...),
    session: AsyncSession = Depends(get_async_session),
) -> None:
    await StyleService(session).delete(style_name)
