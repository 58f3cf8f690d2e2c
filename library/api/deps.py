from fastapi.requests import HTTPConnection

from library.container import Container
from library.domains.books.services import BookService
from library.domains.comments.channel import BroadcastChannel
from library.domains.identity.services import IdentityService


def get_container(connection: HTTPConnection) -> Container:
    return connection.app.state.container


def get_book_service(connection: HTTPConnection) -> BookService:
    return get_container(connection).book_service


def get_identity_service(connection: HTTPConnection) -> IdentityService:
    return get_container(connection).identity_service


def get_channel(connection: HTTPConnection) -> BroadcastChannel:
    return get_container(connection).channel
