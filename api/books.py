from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status
from typing import List, Optional
import logging

from api.dependencies import get_current_user, require_roles, internal_error
from repositories.author_repo import AuthorRepository
from repositories.book_repo import BookRepository
from schemas.requests import BookCreateRequest, BookUpdateRequest
from schemas.responses import BookResponse
from services.auth_service import ROLE_ADMINISTRATOR
from services.file_upload_service import FileUploadService
from utils.file_utils import InvalidImageError, safe_image_name

router = APIRouter()
logger = logging.getLogger(__name__)

CONTROLLER = "Books"

admin_only = [Depends(require_roles(ROLE_ADMINISTRATOR))]


async def _store_image(location: str, book: BookCreateRequest, book_id: Optional[int] = None) -> Optional[str]:
    """Resolve the image name for a create/update body, writing the file if one was sent"""
    if book.file and not book.image:
        logger.warning(f"{location}: File submitted without an image name")
        raise HTTPException(status_code=400, detail="Image name is required when a file is sent")

    if not book.image:
        return None

    try:
        name = safe_image_name(book.image)
        if not book.file:
            return name
        await _ensure_image_free(location, name, book_id)
        return await FileUploadService.save_base64_image(name, book.file)
    except InvalidImageError as e:
        logger.warning(f"{location}: {e}")
        raise HTTPException(status_code=400, detail=str(e))


async def _ensure_image_free(location: str, image: str, book_id: Optional[int]) -> None:
    """Refuse to overwrite a cover that belongs to another book"""
    if await BookRepository.is_image_in_use(image, book_id):
        logger.warning(f"{location}: Image {image} is used by another book")
        raise HTTPException(status_code=400, detail="Image name is already used by another book")


async def _release_image(image: Optional[str]) -> None:
    """Delete a stored image once no book references it"""
    if image and not await BookRepository.is_image_in_use(image):
        FileUploadService.remove_file(image)


@router.get("/books", response_model=List[BookResponse], dependencies=[Depends(get_current_user)])
async def get_books():
    """Get all books with their author"""
    location = f"{CONTROLLER} - get_books"
    try:
        logger.info(f"{location}: Attempted Call")
        books = await BookRepository.find_all()
        logger.info(f"{location}: Successful")
        return books
    except Exception as e:
        raise internal_error(f"{location}: {e}")


@router.get("/books/{book_id}", response_model=BookResponse, dependencies=[Depends(get_current_user)])
async def get_book(book_id: int):
    """Get a book by id, including its cover image as base64 when stored"""
    location = f"{CONTROLLER} - get_book"
    try:
        logger.info(f"{location}: Attempted Call for id: {book_id}")
        book = await BookRepository.find_by_id(book_id)

        if not book:
            logger.warning(f"{location}: Failed to retrieve record with id: {book_id}")
            raise HTTPException(status_code=404, detail="Book not found")

        book.file = await FileUploadService.read_base64(book.image)
        logger.info(f"{location}: Successfully got record with id: {book_id}")
        return book
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error(f"{location}: {e}")


@router.post(
    "/books",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=admin_only,
)
async def create_book(book: BookCreateRequest):
    location = f"{CONTROLLER} - create_book"
    try:
        logger.info(f"{location}: Create Attempted")
        if not await AuthorRepository.is_exists(book.author_id):
            logger.warning(f"{location}: Author {book.author_id} does not exist")
            raise HTTPException(status_code=400, detail="Author does not exist")

        image = await _store_image(location, book)

        book_data = book.model_dump(exclude={"file"})
        book_data['image'] = image
        book_id = await BookRepository.create(book_data)
        if not book_id:
            if book.file:
                FileUploadService.remove_file(image)
            raise internal_error(f"{location}: Book creation failed")

        created = await BookRepository.find_by_id(book_id)
        logger.info(f"{location}: Creation Successful for id: {book_id}")
        return created
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error(f"{location}: {e}")


@router.put(
    "/books/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    dependencies=admin_only,
)
async def update_book(book_id: int, book: BookUpdateRequest):
    location = f"{CONTROLLER} - update_book"
    try:
        logger.info(f"{location}: Update Attempted on record with id: {book_id}")
        if book_id < 1 or book_id != book.id:
            logger.warning(f"{location}: Update failed with bad data - id: {book_id}")
            raise HTTPException(status_code=400, detail="Invalid book id")

        existing = await BookRepository.find_by_id(book_id)
        if not existing:
            logger.warning(f"{location}: Failed to retrieve record with id: {book_id}")
            raise HTTPException(status_code=404, detail="Book not found")

        if not await AuthorRepository.is_exists(book.author_id):
            logger.warning(f"{location}: Author {book.author_id} does not exist")
            raise HTTPException(status_code=400, detail="Author does not exist")

        image = await _store_image(location, book, book_id)

        book_data = book.model_dump(exclude={"id", "file"})
        book_data['image'] = image
        if not await BookRepository.update(book_id, book_data):
            raise internal_error(f"{location}: Update failed for record with id: {book_id}")

        if existing.image != image:
            await _release_image(existing.image)

        logger.info(f"{location}: Record with id: {book_id} successfully updated")
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error(f"{location}: {e}")


@router.delete(
    "/books/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    dependencies=admin_only,
)
async def delete_book(book_id: int):
    location = f"{CONTROLLER} - delete_book"
    try:
        logger.info(f"{location}: Delete Attempted on record with id: {book_id}")
        if book_id < 1:
            logger.warning(f"{location}: Delete failed with bad data - id: {book_id}")
            raise HTTPException(status_code=400, detail="Invalid book id")

        existing = await BookRepository.find_by_id(book_id)
        if not existing:
            logger.warning(f"{location}: Failed to retrieve record with id: {book_id}")
            raise HTTPException(status_code=404, detail="Book not found")

        if not await BookRepository.delete(book_id):
            raise internal_error(f"{location}: Delete failed for record with id: {book_id}")

        await _release_image(existing.image)
        logger.info(f"{location}: Record with id: {book_id} successfully deleted")
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error(f"{location}: {e}")


@router.put(
    "/books/{book_id}/image",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    dependencies=admin_only,
)
async def upload_book_image(book_id: int, file: UploadFile = File(...)):
    """Replace a book's cover image with a multipart upload"""
    location = f"{CONTROLLER} - upload_book_image"
    try:
        logger.info(f"{location}: Upload Attempted on record with id: {book_id}")
        existing = await BookRepository.find_by_id(book_id)
        if not existing:
            logger.warning(f"{location}: Failed to retrieve record with id: {book_id}")
            raise HTTPException(status_code=404, detail="Book not found")

        try:
            image = safe_image_name(file.filename or "")
            await _ensure_image_free(location, image, book_id)
            image = await FileUploadService.save_upload_file(file, image)
        except InvalidImageError as e:
            logger.warning(f"{location}: {e}")
            raise HTTPException(status_code=400, detail=str(e))

        if not await BookRepository.update_image(book_id, image):
            raise internal_error(f"{location}: Image update failed for record with id: {book_id}")

        if existing.image != image:
            await _release_image(existing.image)

        logger.info(f"{location}: Image {image} stored for record with id: {book_id}")
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error(f"{location}: {e}")


@router.delete(
    "/books/{book_id}/image",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    dependencies=admin_only,
)
async def remove_book_image(book_id: int):
    location = f"{CONTROLLER} - remove_book_image"
    try:
        logger.info(f"{location}: Remove Attempted on record with id: {book_id}")
        existing = await BookRepository.find_by_id(book_id)
        if not existing:
            logger.warning(f"{location}: Failed to retrieve record with id: {book_id}")
            raise HTTPException(status_code=404, detail="Book not found")

        if not await BookRepository.update_image(book_id, None):
            raise internal_error(f"{location}: Image removal failed for record with id: {book_id}")

        await _release_image(existing.image)
        logger.info(f"{location}: Image removed for record with id: {book_id}")
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error(f"{location}: {e}")
