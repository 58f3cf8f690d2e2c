from typing import List

from fastapi import APIRouter, Depends, File, Response, UploadFile, status
from fastapi.responses import FileResponse

from library.api.deps import get_book_service, get_channel
from library.core.auth import get_current_identity
from library.domains.books.schemas import BookCreate, BookPatch, BookResponse
from library.domains.books.services import BookService
from library.domains.comments.channel import BroadcastChannel
from library.domains.comments.schemas import CommentResponse
from library.domains.identity.entities import Identity

router = APIRouter(prefix="/api/books", tags=["books"])


@router.get("/", response_model=List[BookResponse])
async def list_books(book_service: BookService = Depends(get_book_service)):
    """Получение списка книг"""
    return await book_service.list_books()


@router.post("/", response_model=BookResponse, status_code=status.HTTP_201_CREATED)
async def create_book(
    book_data: BookCreate,
    identity: Identity = Depends(get_current_identity),
    book_service: BookService = Depends(get_book_service)
):
    """Создание новой книги"""
    return await book_service.create_book(book_data)


@router.get("/{book_id}", response_model=BookResponse)
async def get_book(book_id: str, book_service: BookService = Depends(get_book_service)):
    """Получение книги по ID (без учёта просмотра)"""
    return await book_service.get_book(book_id)


@router.get("/{book_id}/view", response_model=BookResponse)
async def view_book(book_id: str, book_service: BookService = Depends(get_book_service)):
    """Просмотр книги: счётчик просмотров увеличивается на 1"""
    return await book_service.view_book(book_id)


@router.put("/{book_id}", response_model=BookResponse)
async def update_book(
    book_id: str,
    patch: BookPatch,
    identity: Identity = Depends(get_current_identity),
    book_service: BookService = Depends(get_book_service)
):
    """Обновление книги"""
    return await book_service.update_book(book_id, patch)


@router.delete("/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_book(
    book_id: str,
    identity: Identity = Depends(get_current_identity),
    book_service: BookService = Depends(get_book_service)
):
    """Удаление книги"""
    await book_service.delete_book(book_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{book_id}/comments", response_model=List[CommentResponse])
async def list_comments(book_id: str, channel: BroadcastChannel = Depends(get_channel)):
    """История комментариев книги"""
    return await channel.history(book_id)


@router.put("/{book_id}/file", response_model=BookResponse)
async def upload_book_file(
    book_id: str,
    file_book: UploadFile = File(..., alias="fileBook"),
    identity: Identity = Depends(get_current_identity),
    book_service: BookService = Depends(get_book_service)
):
    """Загрузка файла книги (поле формы fileBook)"""
    content = await file_book.read()
    return await book_service.attach_file(book_id, file_book.filename, content)


@router.get("/{book_id}/download")
async def download_book_file(book_id: str, book_service: BookService = Depends(get_book_service)):
    """Скачивание файла книги"""
    path, filename = await book_service.get_file(book_id)
    return FileResponse(path, filename=filename)
