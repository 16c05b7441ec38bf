"""Project routes."""

from fastapi import APIRouter

from echoboard.directory.projects import (
    archive_project,
    create_project,
    delete_project,
    find_project_by_figma_file,
    find_project_by_github_repo,
    get_project,
    link_figma_file,
    link_github_repo,
    restore_project,
)
from echoboard.models.project import Project
from echoboard.app.models import (
    CreateProjectRequest,
    LinkFigmaRequest,
    LinkGithubRequest,
)

router = APIRouter(prefix="/projects", tags=["projects"])


@router.post("/", response_model=Project, status_code=201)
def create(request: CreateProjectRequest) -> Project:
    """Create a project. Names are unique, compared case-insensitively."""
    return create_project(
        name=request.name,
        description=request.description,
        created_by_id=request.created_by_id,
        max_members=request.max_members,
        is_public=request.is_public,
    )


@router.get("/github/{owner}/{name}", response_model=Project)
def read_project_by_github_repo(owner: str, name: str) -> Project:
    return find_project_by_github_repo(owner, name)


@router.get("/figma/{key}", response_model=Project)
def read_project_by_figma_file(key: str) -> Project:
    return find_project_by_figma_file(key)


@router.get("/{project_id}", response_model=Project)
def read_project(project_id: int, include_members: bool = False) -> Project:
    return get_project(project_id, include_members=include_members)


@router.post("/{project_id}/archive", response_model=Project)
def archive(project_id: int) -> Project:
    return archive_project(project_id)


@router.post("/{project_id}/restore", response_model=Project)
def restore(project_id: int) -> Project:
    return restore_project(project_id)


@router.delete("/{project_id}", response_model=Project)
def delete(project_id: int) -> Project:
    """Delete a project. All of its active members are moved to LEFT."""
    return delete_project(project_id)


@router.patch("/{project_id}/github", response_model=Project)
def link_github(project_id: int, request: LinkGithubRequest) -> Project:
    """Link a GitHub repository. Returns 409 if the project is DELETED."""
    return link_github_repo(project_id, request.url, request.owner, request.name)


@router.patch("/{project_id}/figma", response_model=Project)
def link_figma(project_id: int, request: LinkFigmaRequest) -> Project:
    return link_figma_file(project_id, request.url, request.key)
