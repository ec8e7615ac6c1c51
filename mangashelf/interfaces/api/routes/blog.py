"""Routes for the public blog reader and the admin blog workspace."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from mangashelf.application.use_cases.activity import ActivityRecorder
from mangashelf.application.use_cases.blog import BlogWorkspace, validate_post_form
from mangashelf.domain.entities import POST_STATUS_DRAFT, BlogPost, PostForm
from mangashelf.domain.errors import ValidationError
from mangashelf.domain.visibility import (
    LOAD_PERMISSION_MESSAGE,
    AuthState,
    ViewerIntent,
    VisibilityDecision,
)
from mangashelf.infrastructure.repositories import DocumentRepository
from mangashelf.interfaces.api.dependencies import (
    get_activity_recorder,
    get_auth_state,
    get_documents,
    require_admin,
)
from mangashelf.interfaces.api.schemas import (
    BlogPageRead,
    BlogPostRead,
    PostFormRead,
    PostWrite,
)

router = APIRouter(prefix="/blog", tags=["blog"])

_REDIRECT_PATHS = {
    VisibilityDecision.REDIRECT_TO_SIGNIN: "/signin",
    VisibilityDecision.REDIRECT_HOME: "/home",
}


def _post_to_schema(post: BlogPost) -> BlogPostRead:
    return BlogPostRead.model_validate(post)


def _workspace_to_schema(workspace: BlogWorkspace) -> BlogPageRead:
    view = workspace.view
    return BlogPageRead(
        state=view.state.value,
        decision=view.decision.value,
        editing=view.editing,
        redirect_to=_REDIRECT_PATHS.get(view.decision),
        status=workspace.status,
        posts=[_post_to_schema(post) for post in view.visible],
        selected=_post_to_schema(view.selected) if view.selected else None,
        form=PostFormRead.model_validate(workspace.form) if view.editing else None,
    )


async def _render(
    documents: DocumentRepository,
    auth: AuthState,
    intent: ViewerIntent,
    requested_id: str | None,
) -> BlogPageRead:
    workspace = BlogWorkspace(documents, auth, intent=intent, requested_id=requested_id)
    try:
        await workspace.load()
        return _workspace_to_schema(workspace)
    finally:
        workspace.close()


@router.get("/posts", response_model=BlogPageRead)
async def read_blog(
    post: str | None = Query(None, description="Identifier of the post to open"),
    documents: DocumentRepository = Depends(get_documents),
    auth: AuthState = Depends(get_auth_state),
) -> BlogPageRead:
    """Return the public reader view; drafts are only listed for admins."""

    return await _render(documents, auth, ViewerIntent.READER, post)


@router.get("/workspace", response_model=BlogPageRead)
async def read_workspace(
    post: str | None = Query(None, description="Identifier of the post to open"),
    documents: DocumentRepository = Depends(get_documents),
    auth: AuthState = Depends(get_auth_state),
) -> BlogPageRead:
    """Return the admin workspace view, or the redirect that applies instead."""

    return await _render(documents, auth, ViewerIntent.OWNER, post)


async def _save(
    workspace: BlogWorkspace, payload: PostWrite, existing: BlogPost | None
) -> BlogPageRead:
    form = PostForm(
        id=existing.id if existing else None,
        title=payload.title,
        summary=payload.summary,
        body=payload.body,
        cover=payload.cover,
        tags=payload.tags,
        status=existing.status if existing else POST_STATUS_DRAFT,
        published_at=existing.published_at if existing else None,
    )
    try:
        validate_post_form(form)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc

    if not await workspace.save(form, publish=payload.publish):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=workspace.status
        )
    return _workspace_to_schema(workspace)


def _raise_for_load_failure(workspace: BlogWorkspace) -> None:
    if not workspace.status:
        return
    code = (
        status.HTTP_403_FORBIDDEN
        if workspace.status == LOAD_PERMISSION_MESSAGE
        else status.HTTP_503_SERVICE_UNAVAILABLE
    )
    raise HTTPException(status_code=code, detail=workspace.status)


def _open_workspace(
    documents: DocumentRepository,
    auth: AuthState,
    recorder: ActivityRecorder,
) -> BlogWorkspace:
    return BlogWorkspace(
        documents, auth, intent=ViewerIntent.OWNER, recorder=recorder
    )


@router.post("/posts", response_model=BlogPageRead, status_code=status.HTTP_201_CREATED)
async def create_post(
    payload: PostWrite,
    documents: DocumentRepository = Depends(get_documents),
    recorder: ActivityRecorder = Depends(get_activity_recorder),
    auth: AuthState = Depends(require_admin),
) -> BlogPageRead:
    """Create a draft or publish a new post, then return the reselected view."""

    workspace = _open_workspace(documents, auth, recorder)
    try:
        return await _save(workspace, payload, None)
    finally:
        workspace.close()


@router.put("/posts/{post_id}", response_model=BlogPageRead)
async def update_post(
    post_id: str,
    payload: PostWrite,
    documents: DocumentRepository = Depends(get_documents),
    recorder: ActivityRecorder = Depends(get_activity_recorder),
    auth: AuthState = Depends(require_admin),
) -> BlogPageRead:
    """Update a post, publishing it or moving it back to draft."""

    workspace = _open_workspace(documents, auth, recorder)
    try:
        await workspace.load(post_id)
        _raise_for_load_failure(workspace)
        existing = next((p for p in workspace.posts if p.id == post_id), None)
        if existing is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Post not found"
            )
        return await _save(workspace, payload, existing)
    finally:
        workspace.close()


@router.delete("/posts/{post_id}", response_model=BlogPageRead)
async def delete_post(
    post_id: str,
    documents: DocumentRepository = Depends(get_documents),
    recorder: ActivityRecorder = Depends(get_activity_recorder),
    auth: AuthState = Depends(require_admin),
) -> BlogPageRead:
    """Delete a post and return the view with the next post selected."""

    workspace = _open_workspace(documents, auth, recorder)
    try:
        await workspace.load()
        _raise_for_load_failure(workspace)
        if not any(p.id == post_id for p in workspace.posts):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Post not found"
            )
        if not await workspace.delete(post_id):
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=workspace.status
            )
        return _workspace_to_schema(workspace)
    finally:
        workspace.close()


__all__ = ["router"]
