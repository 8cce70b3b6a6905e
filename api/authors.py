from fastapi import APIRouter, Depends, HTTPException, Response, status
from typing import List
import logging

from api.dependencies import get_current_user, require_roles, internal_error
from repositories.author_repo import AuthorRepository
from schemas.requests import AuthorCreateRequest, AuthorUpdateRequest
from schemas.responses import AuthorResponse
from services.auth_service import ROLE_ADMINISTRATOR

router = APIRouter()
logger = logging.getLogger(__name__)

CONTROLLER = "Authors"


@router.get("/authors", response_model=List[AuthorResponse], dependencies=[Depends(get_current_user)])
async def get_authors():
    """Get all authors with their books"""
    location = f"{CONTROLLER} - get_authors"
    try:
        logger.info(f"{location}: Attempted Call")
        authors = await AuthorRepository.find_all()
        logger.info(f"{location}: Successful")
        return authors
    except Exception as e:
        raise internal_error(f"{location}: {e}")


@router.get("/authors/{author_id}", response_model=AuthorResponse)
async def get_author(author_id: int):
    """Get an author by id"""
    location = f"{CONTROLLER} - get_author"
    try:
        logger.info(f"{location}: Attempted Call for id: {author_id}")
        author = await AuthorRepository.find_by_id(author_id)

        if not author:
            logger.warning(f"{location}: Failed to retrieve record with id: {author_id}")
            raise HTTPException(status_code=404, detail="Author not found")

        logger.info(f"{location}: Successfully got record with id: {author_id}")
        return author
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error(f"{location}: {e}")


@router.post(
    "/authors",
    response_model=AuthorResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(ROLE_ADMINISTRATOR))],
)
async def create_author(author: AuthorCreateRequest):
    location = f"{CONTROLLER} - create_author"
    try:
        logger.info(f"{location}: Create Attempted")
        author_id = await AuthorRepository.create(author.model_dump())
        if not author_id:
            raise internal_error(f"{location}: Author creation failed")

        created = await AuthorRepository.find_by_id(author_id)
        logger.info(f"{location}: Creation Successful for id: {author_id}")
        return created
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error(f"{location}: {e}")


@router.put(
    "/authors/{author_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    dependencies=[Depends(require_roles(ROLE_ADMINISTRATOR))],
)
async def update_author(author_id: int, author: AuthorUpdateRequest):
    location = f"{CONTROLLER} - update_author"
    try:
        logger.info(f"{location}: Update Attempted on record with id: {author_id}")
        if author_id < 1 or author_id != author.id:
            logger.warning(f"{location}: Update failed with bad data - id: {author_id}")
            raise HTTPException(status_code=400, detail="Invalid author id")

        if not await AuthorRepository.is_exists(author_id):
            logger.warning(f"{location}: Failed to retrieve record with id: {author_id}")
            raise HTTPException(status_code=404, detail="Author not found")

        if not await AuthorRepository.update(author_id, author.model_dump(exclude={"id"})):
            raise internal_error(f"{location}: Update failed for record with id: {author_id}")

        logger.info(f"{location}: Record with id: {author_id} successfully updated")
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error(f"{location}: {e}")


@router.delete(
    "/authors/{author_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    dependencies=[Depends(require_roles(ROLE_ADMINISTRATOR))],
)
async def delete_author(author_id: int):
    location = f"{CONTROLLER} - delete_author"
    try:
        logger.info(f"{location}: Delete Attempted on record with id: {author_id}")
        if author_id < 1:
            logger.warning(f"{location}: Delete failed with bad data - id: {author_id}")
            raise HTTPException(status_code=400, detail="Invalid author id")

        if not await AuthorRepository.is_exists(author_id):
            logger.warning(f"{location}: Failed to retrieve record with id: {author_id}")
            raise HTTPException(status_code=404, detail="Author not found")

        if not await AuthorRepository.delete(author_id):
            raise internal_error(f"{location}: Delete failed for record with id: {author_id}")

        logger.info(f"{location}: Record with id: {author_id} successfully deleted")
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error(f"{location}: {e}")
